"""Per-user conversational state, held in a bounded cache."""

import dataclasses
import threading
import time
from collections import OrderedDict
from typing import Callable, List, Optional

from cocktail_matcher.matching.models import MatchResult
from cocktail_matcher.recipes.models import Recipe
from cocktail_matcher.storage.users import UserId

AWAITING_COCKTAIL_NAME = "cocktail_name"
AWAITING_CUSTOM_INGREDIENT = "custom_ingredient"


@dataclasses.dataclass
class UserSession:
    """What a user is in the middle of: pending input and last results.

    Results are kept only so a user can open one of them ("show recipe #3")
    after the list was rendered.
    """

    user_id: UserId
    awaiting_input: Optional[str] = None
    last_matches: List[MatchResult] = dataclasses.field(default_factory=list)
    last_name_results: List[Recipe] = dataclasses.field(default_factory=list)

    def expect(self, kind: Optional[str]) -> None:
        if kind not in (None, AWAITING_COCKTAIL_NAME, AWAITING_CUSTOM_INGREDIENT):
            raise ValueError(f"Unknown input kind: {kind!r}")
        self.awaiting_input = kind

    def take_awaiting(self) -> Optional[str]:
        """Return the pending input kind and reset it."""
        kind, self.awaiting_input = self.awaiting_input, None
        return kind

    def match_at(self, index: int) -> Optional[MatchResult]:
        if 0 <= index < len(self.last_matches):
            return self.last_matches[index]
        return None

    def name_result_at(self, index: int) -> Optional[Recipe]:
        if 0 <= index < len(self.last_name_results):
            return self.last_name_results[index]
        return None


class SessionCache:
    """Thread-safe LRU cache of UserSessions with an idle timeout.

    Args:
        max_size: Maximum number of sessions kept; the least recently used
            one is evicted beyond that.
        ttl_seconds: Sessions idle for longer are dropped on next access.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[UserId, tuple]" = OrderedDict()
        self._lock = threading.RLock()

    def _expired(self, last_used: float) -> bool:
        return self._clock() - last_used > self.ttl_seconds

    def get(self, user_id: UserId) -> UserSession:
        """Return the user's session, starting a new one on a miss."""
        with self._lock:
            entry = self._entries.pop(user_id, None)
            if entry is None or self._expired(entry[1]):
                session = UserSession(user_id=user_id)
            else:
                session = entry[0]
            self._entries[user_id] = (session, self._clock())
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)
            return session

    def peek(self, user_id: UserId) -> Optional[UserSession]:
        """Return the live session without creating or refreshing it."""
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None or self._expired(entry[1]):
                return None
            return entry[0]

    def discard(self, user_id: UserId) -> None:
        with self._lock:
            self._entries.pop(user_id, None)

    def __contains__(self, user_id: UserId) -> bool:
        return self.peek(user_id) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
