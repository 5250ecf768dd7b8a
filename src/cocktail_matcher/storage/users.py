"""Per-user ingredient sets, persisted as a JSON snapshot."""

import dataclasses
import datetime
import json
import logging
import pathlib
import threading
from typing import Any, Callable, Dict, List, Optional, Union

from cocktail_matcher.ingredients.normalization import normalize_ingredient_name
from cocktail_matcher.storage.utils import write_json

logger = logging.getLogger(__name__)

UserId = Union[int, str]

DEFAULT_MAX_INGREDIENTS = 20


class CapacityExceeded(Exception):
    """Raised when adding an ingredient to a full ingredient set."""

    def __init__(self, user_id: UserId, limit: int):
        super().__init__(f"User {user_id} already has the maximum of {limit} ingredients")
        self.user_id = user_id
        self.limit = limit


class UserNotFound(KeyError):
    """Raised when a mutation needs an existing user record."""

    def __init__(self, user_id: UserId):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class PersistenceWriteFailure(Exception):
    """Raised when the user snapshot can't be written to disk."""


def utc_timestamp() -> str:
    """Current UTC time as an ISO 8601 string with millisecond precision."""
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclasses.dataclass
class UserRecord:
    user_id: UserId
    ingredients: List[str] = dataclasses.field(default_factory=list)
    last_activity: str = ""
    username: Optional[str] = None
    created_at: Optional[str] = None
    search_count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserRecord":
        if not isinstance(data, dict) or data.get("userId") is None:
            raise ValueError(f"User record requires 'userId': {data!r}")
        ingredients = data.get("ingredients") or []
        if not isinstance(ingredients, list) or not all(isinstance(i, str) for i in ingredients):
            raise ValueError(f"User {data['userId']}: 'ingredients' must be a list of strings")
        return cls(
            user_id=data["userId"],
            username=data.get("username"),
            ingredients=list(ingredients),
            last_activity=data.get("lastActivity") or "",
            created_at=data.get("createdAt"),
            search_count=data.get("searchCount"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"userId": self.user_id}
        if self.username is not None:
            data["username"] = self.username
        data["ingredients"] = list(self.ingredients)
        data["lastActivity"] = self.last_activity
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.search_count is not None:
            data["searchCount"] = self.search_count
        return data

    def copy(self) -> "UserRecord":
        return dataclasses.replace(self, ingredients=list(self.ingredients))

    def has_ingredient(self, name: str) -> bool:
        target = normalize_ingredient_name(name)
        return any(normalize_ingredient_name(i) == target for i in self.ingredients)


class UserIngredientStore:
    """Owns every user's ingredient set and keeps the JSON snapshot current.

    The whole collection is held in memory and rewritten to ``data_path``
    after every mutation, before the mutating call returns. If a write fails
    the error is logged and the in-memory state stays authoritative until
    the next successful write.

    Mutations run under a store-wide lock, so concurrent callers in the same
    process cannot overwrite each other's changes.

    Ingredient names keep the casing they were added with; comparisons for
    duplicates and removal ignore case and surrounding whitespace. Records
    returned to callers are copies.

    Args:
        data_path: JSON file holding an array of user records. Created,
            along with its directory, if missing.
        max_ingredients: Maximum ingredients per user.
        clock: Returns the timestamp string stored in ``lastActivity`` and
            ``createdAt``.
    """

    def __init__(
        self,
        data_path: Union[str, pathlib.Path],
        max_ingredients: int = DEFAULT_MAX_INGREDIENTS,
        clock: Callable[[], str] = utc_timestamp,
    ):
        if max_ingredients < 1:
            raise ValueError("max_ingredients must be at least 1")
        self.data_path = pathlib.Path(data_path)
        self.max_ingredients = max_ingredients
        self._clock = clock
        self._users: Dict[UserId, UserRecord] = {}
        self._lock = threading.RLock()
        self._load()

    def _load(self) -> None:
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        if not self.data_path.exists():
            self.save()
            return

        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                records = json.load(f)
            if not isinstance(records, list):
                raise ValueError("expected a JSON array of user records")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading user data from {self.data_path}, starting empty: {e}")
            return

        repaired = 0
        for record in records:
            try:
                user = UserRecord.from_dict(record)
            except ValueError as e:
                logger.warning(f"Skipping malformed user record: {e}")
                continue
            if self._repair(user):
                repaired += 1
            self._users[user.user_id] = user
        logger.info(f"Loaded {len(self._users)} users from {self.data_path}")
        if repaired:
            self.save()

    def _repair(self, user: UserRecord) -> bool:
        """Drop duplicate names and trim to ``max_ingredients`` in place.

        The first spelling of a duplicate wins, as does the oldest entry when
        trimming. Returns True if the record changed.
        """
        seen = set()
        ingredients = []
        for name in user.ingredients:
            key = normalize_ingredient_name(name)
            if not key or key in seen:
                continue
            seen.add(key)
            ingredients.append(name)

        if len(ingredients) != len(user.ingredients):
            logger.warning(f"Dropped duplicate or blank ingredients for user {user.user_id}")
        if len(ingredients) > self.max_ingredients:
            logger.warning(
                f"User {user.user_id} has {len(ingredients)} ingredients, "
                f"keeping the first {self.max_ingredients}: dropped {ingredients[self.max_ingredients:]}"
            )
            ingredients = ingredients[: self.max_ingredients]

        if ingredients == user.ingredients:
            return False
        user.ingredients = ingredients
        return True

    def _write_snapshot(self) -> None:
        snapshot = [user.to_dict() for user in self._users.values()]
        try:
            write_json(self.data_path, snapshot)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceWriteFailure(f"Could not write {self.data_path}: {e}") from e

    def save(self) -> bool:
        """Write the full snapshot of all users.

        Returns:
            True if the snapshot was written, False if the write failed.
        """
        with self._lock:
            try:
                self._write_snapshot()
            except PersistenceWriteFailure as e:
                logger.error(f"Error saving user data, keeping in-memory state: {e}")
                return False
            return True

    def get(self, user_id: UserId) -> List[str]:
        """The user's ingredients in insertion order; empty if unknown."""
        with self._lock:
            user = self._users.get(user_id)
            return list(user.ingredients) if user else []

    def get_user(self, user_id: UserId) -> Optional[UserRecord]:
        with self._lock:
            user = self._users.get(user_id)
            return user.copy() if user else None

    def users(self) -> List[UserRecord]:
        with self._lock:
            return [user.copy() for user in self._users.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def __contains__(self, user_id: UserId) -> bool:
        with self._lock:
            return user_id in self._users

    def _create(self, user_id: UserId, username: Optional[str]) -> UserRecord:
        now = self._clock()
        user = UserRecord(
            user_id=user_id,
            username=username,
            ingredients=[],
            last_activity=now,
            created_at=now,
        )
        self._users[user_id] = user
        return user

    def _require(self, user_id: UserId) -> UserRecord:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def _touch_and_save(self, user: UserRecord) -> UserRecord:
        user.last_activity = self._clock()
        self.save()
        return user.copy()

    def create(self, user_id: UserId, username: Optional[str] = None) -> UserRecord:
        """Start a fresh, empty record for ``user_id``, replacing any existing one."""
        with self._lock:
            user = self._create(user_id, username)
            self.save()
            return user.copy()

    def add(self, user_id: UserId, name: str) -> UserRecord:
        """Add an ingredient, creating the user record if needed.

        Adding a name already present (ignoring case) changes nothing but the
        activity timestamp.

        Args:
            user_id: User to update.
            name: Ingredient name; surrounding whitespace is stripped.

        Returns:
            The updated record.

        Raises:
            ValueError: If ``name`` is blank.
            CapacityExceeded: If the set is full and ``name`` is new. The set
                is left unchanged.
        """
        ingredient = name.strip()
        if not ingredient:
            raise ValueError("Ingredient name must not be empty")

        with self._lock:
            user = self._users.get(user_id) or self._create(user_id, None)
            if user.has_ingredient(ingredient):
                return self._touch_and_save(user)
            if len(user.ingredients) >= self.max_ingredients:
                self._touch_and_save(user)
                raise CapacityExceeded(user_id, self.max_ingredients)
            user.ingredients.append(ingredient)
            return self._touch_and_save(user)

    def remove(self, user_id: UserId, name: str) -> UserRecord:
        """Remove an ingredient, ignoring case; absent names are a no-op.

        Raises:
            UserNotFound: If the user has no record.
        """
        target = normalize_ingredient_name(name)
        with self._lock:
            user = self._require(user_id)
            user.ingredients = [
                i for i in user.ingredients if normalize_ingredient_name(i) != target
            ]
            return self._touch_and_save(user)

    def clear(self, user_id: UserId) -> UserRecord:
        """Remove every ingredient.

        Raises:
            UserNotFound: If the user has no record.
        """
        with self._lock:
            user = self._require(user_id)
            user.ingredients = []
            return self._touch_and_save(user)

    def record_search(self, user_id: UserId) -> UserRecord:
        """Count a served match request, creating the user record if needed."""
        with self._lock:
            user = self._users.get(user_id) or self._create(user_id, None)
            user.search_count = (user.search_count or 0) + 1
            return self._touch_and_save(user)
