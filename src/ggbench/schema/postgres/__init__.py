from . import auth, sample, scoring, specification
from ._metadata import metadata

__all__ = [
    "auth",
    "metadata",
    "sample",
    "specification",
    "scoring",
]
