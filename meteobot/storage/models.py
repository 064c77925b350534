"""
In-memory models for per-user conversation state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List


class ConversationMode(Enum):
    """How the next message from a user is interpreted."""
    NONE = "none"
    AWAITING_CITY = "awaiting_city"
    AWAITING_SCHEDULE_TIME = "awaiting_schedule_time"
    AWAITING_SCHEDULE_REMOVAL = "awaiting_schedule_removal"


@dataclass
class UserPreferences:
    """
    Committed preferences of one Telegram user.

    Attributes:
        user_id: Telegram chat ID of the user
        city: Chosen city name, None until set
            Example: "Kyiv"
        schedule_times: "HH:MM" delivery times in insertion order, duplicates allowed
            Example: ["08:00", "19:30"]
    """
    user_id: int
    city: Optional[str] = None
    schedule_times: List[str] = field(default_factory=list)
