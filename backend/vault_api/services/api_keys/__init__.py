from .dto import ApiKeyCreatedOut, ApiKeyCreateIn, ApiKeyOut
from .service import ApiKeyService

__all__ = ["ApiKeyCreatedOut", "ApiKeyCreateIn", "ApiKeyOut", "ApiKeyService"]
