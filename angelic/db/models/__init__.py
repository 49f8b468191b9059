"""Re-export all models so Base.metadata sees them."""

from angelic.db.models.conversation import ChatMessage, Conversation
from angelic.db.models.feedback import Feedback
from angelic.db.models.idea import Idea, IdeaEval, Match, Rating
from angelic.db.models.report import Report
from angelic.db.models.stripe_event import StripeWebhookEvent
from angelic.db.models.user import User

__all__ = [
    "ChatMessage",
    "Conversation",
    "Feedback",
    "Idea",
    "IdeaEval",
    "Match",
    "Rating",
    "Report",
    "StripeWebhookEvent",
    "User",
]
