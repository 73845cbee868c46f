from ._user import user

__all__ = [
    "user",
]
