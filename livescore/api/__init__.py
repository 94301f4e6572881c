from livescore.api.match import router as match_router
from livescore.api.innings import router as innings_router

__all__ = [
    "match_router",
    "innings_router",
]
