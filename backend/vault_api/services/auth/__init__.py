from .dto import AuthTokenConfig, LoginIn, LoginOut, RefreshIn, RegisterIn, RegisterOut, TokenPairOut
from .service import AuthService

__all__ = [
    "AuthService",
    "AuthTokenConfig",
    "LoginIn",
    "LoginOut",
    "RefreshIn",
    "RegisterIn",
    "RegisterOut",
    "TokenPairOut",
]
