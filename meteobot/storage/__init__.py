"""In-memory conversation state for the Weather Bot."""

from .store import ConversationStore
from .models import ConversationMode, UserPreferences

__all__ = [
    "ConversationStore",
    "ConversationMode",
    "UserPreferences"
]
