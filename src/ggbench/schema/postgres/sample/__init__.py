from ._animation import animation

__all__ = [
    "animation",
]
