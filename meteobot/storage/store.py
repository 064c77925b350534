"""
Process-local store for user preferences and conversation modes.
Nothing is persisted; state lives as long as the process.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

from .models import ConversationMode, UserPreferences

logger = logging.getLogger(__name__)


class ConversationStore:
    """
    Per-user preferences and pending modes behind a single lock.

    Every method takes the lock for the map access only, so a reader never
    sees a half-applied update. Callers must not hold results across awaits
    expecting them to stay current.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._preferences: Dict[int, UserPreferences] = {}
        self._modes: Dict[int, ConversationMode] = {}

    def _preferences_for(self, user_id: int) -> UserPreferences:
        """Get or create the record. Caller holds the lock."""
        prefs = self._preferences.get(user_id)
        if prefs is None:
            prefs = UserPreferences(user_id=user_id)
            self._preferences[user_id] = prefs
        return prefs

    # City

    def set_city(self, user_id: int, city: str) -> None:
        with self._lock:
            self._preferences_for(user_id).city = city
        logger.info(f"User {user_id} set city to {city!r}")

    def get_city(self, user_id: int) -> Optional[str]:
        with self._lock:
            prefs = self._preferences.get(user_id)
            return prefs.city if prefs else None

    # Modes

    def _begin(self, user_id: int, mode: ConversationMode) -> None:
        with self._lock:
            self._modes[user_id] = mode

    def begin_awaiting_city(self, user_id: int) -> None:
        self._begin(user_id, ConversationMode.AWAITING_CITY)

    def begin_awaiting_schedule_time(self, user_id: int) -> None:
        self._begin(user_id, ConversationMode.AWAITING_SCHEDULE_TIME)

    def begin_awaiting_removal(self, user_id: int) -> None:
        self._begin(user_id, ConversationMode.AWAITING_SCHEDULE_REMOVAL)

    def consume_mode(self, user_id: int) -> ConversationMode:
        """Return the pending mode and reset it to NONE in one step."""
        with self._lock:
            return self._modes.pop(user_id, ConversationMode.NONE)

    # Schedule

    def add_schedule_time(self, user_id: int, time: str) -> None:
        with self._lock:
            self._preferences_for(user_id).schedule_times.append(time)
        logger.info(f"User {user_id} added schedule time {time}")

    def remove_schedule_time(self, user_id: int, time: str) -> bool:
        """
        Remove the first occurrence of an exact time string.

        Returns:
            True if a time was removed
        """
        with self._lock:
            prefs = self._preferences.get(user_id)
            if prefs is None or time not in prefs.schedule_times:
                return False
            prefs.schedule_times.remove(time)
        logger.info(f"User {user_id} removed schedule time {time}")
        return True

    def list_schedule_times(self, user_id: int) -> List[str]:
        with self._lock:
            prefs = self._preferences.get(user_id)
            return list(prefs.schedule_times) if prefs else []

    def due_at(self, time: str) -> List[Tuple[int, str]]:
        """
        Users to notify at the given "HH:MM".

        Returns:
            (user_id, city) pairs for users that have a city and the exact time
            in their schedule
        """
        with self._lock:
            return [
                (prefs.user_id, prefs.city)
                for prefs in self._preferences.values()
                if prefs.city and time in prefs.schedule_times
            ]
