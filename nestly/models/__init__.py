# Database models
from nestly.models.user import User
from nestly.models.listing import Listing
from nestly.models.saved_listing import SavedListing
from nestly.models.review import Review
from nestly.models.conversation import Conversation
from nestly.models.message import Message

__all__ = [
    "User",
    "Listing",
    "SavedListing",
    "Review",
    "Conversation",
    "Message",
]
