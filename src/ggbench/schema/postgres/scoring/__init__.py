from ._vote import vote

__all__ = [
    "vote",
]
