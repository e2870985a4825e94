from vault_api.models.api_key import ApiKey
from vault_api.models.refresh_session import RefreshSession
from vault_api.models.user import User

__all__ = [
    "ApiKey",
    "RefreshSession",
    "User",
]
