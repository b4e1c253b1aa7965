"""Forum data models."""

from forum_markup.core.models.message import (
    MessageRecord,
    ProcessedMessage,
    ProcessingStage,
    RemotePageDetails,
)
from forum_markup.core.models.smiley import Smiley
from forum_markup.core.models.user import User

__all__ = [
    "MessageRecord",
    "ProcessedMessage",
    "ProcessingStage",
    "RemotePageDetails",
    "Smiley",
    "User",
]
