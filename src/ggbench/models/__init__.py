from . import animation, model, prompt, user, vote

__all__ = [
    "animation",
    "model",
    "prompt",
    "user",
    "vote",
]
