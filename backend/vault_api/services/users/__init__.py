from .dto import ExportedUser, UserExportOut, UserOut
from .service import UserService

__all__ = ["ExportedUser", "UserExportOut", "UserOut", "UserService"]
