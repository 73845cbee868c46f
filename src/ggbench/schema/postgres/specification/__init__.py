from ._model import model
from ._prompt import prompt
from ._prompt_tag import prompt_tag
from ._tag import tag

__all__ = [
    "model",
    "prompt",
    "prompt_tag",
    "tag",
]
