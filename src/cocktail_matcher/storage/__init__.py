"""Durable per-user ingredient storage."""

from .users import (
    DEFAULT_MAX_INGREDIENTS,
    CapacityExceeded,
    PersistenceWriteFailure,
    UserId,
    UserIngredientStore,
    UserNotFound,
    UserRecord,
    utc_timestamp,
)
from .utils import atomic_write, write_json

__all__ = [
    "DEFAULT_MAX_INGREDIENTS",
    "CapacityExceeded",
    "PersistenceWriteFailure",
    "UserId",
    "UserIngredientStore",
    "UserNotFound",
    "UserRecord",
    "utc_timestamp",
    "atomic_write",
    "write_json",
]
