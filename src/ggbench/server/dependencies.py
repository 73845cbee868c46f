from typing import Optional

from fastapi import Request

from ggbench.util.cache import Cache


def get_cache(request: Request) -> Optional[Cache]:
    # unset when the app runs without its lifespan
    return getattr(request.app.state, "cache", None)
