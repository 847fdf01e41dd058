from .errors import InvalidInput, LeaderboardError, NotFound
from .store import DEFAULT_TIERS, JsonFileStorage, LeaderboardStore, MemoryStorage

__all__ = [
    "DEFAULT_TIERS",
    "InvalidInput",
    "JsonFileStorage",
    "LeaderboardError",
    "LeaderboardStore",
    "MemoryStorage",
    "NotFound",
]
