from authkit.models.user import User

__all__ = ["User"]
