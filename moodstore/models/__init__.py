# Mood Store Models

from .product import MoodTag, MOOD_EMOJI, ProductView, ProductSearchResponse, canonical_mood, mood_emoji
from .cart import CartLine, AddToCartRequest, UpdateCartItemRequest, CartResponse
from .checkout import (
    Order,
    OrderLine,
    OrderStatus,
    ShippingMethod,
    CheckoutRequest,
    CheckoutResponse,
)
from .profile import CustomerProfile, ProfileUpdate
from .mood import (
    QuizAnswer,
    QuizOption,
    QuizQuestion,
    QuizSubmission,
    MoodScoreResult,
    MoodSelectRequest,
    RecentMood,
    DetectMoodRequest,
    DetectMoodResponse,
)
from .engagement import (
    REACTION_EMOJIS,
    ReactionCount,
    ProductReactions,
    ReactionRequest,
    ReviewCreate,
    Review,
    HelpfulResponse,
    FavoriteResponse,
    TrendingMood,
)

__all__ = [
    "MoodTag",
    "MOOD_EMOJI",
    "ProductView",
    "ProductSearchResponse",
    "canonical_mood",
    "mood_emoji",
    "CartLine",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "CartResponse",
    "Order",
    "OrderLine",
    "OrderStatus",
    "ShippingMethod",
    "CheckoutRequest",
    "CheckoutResponse",
    "CustomerProfile",
    "ProfileUpdate",
    "QuizAnswer",
    "QuizOption",
    "QuizQuestion",
    "QuizSubmission",
    "MoodScoreResult",
    "MoodSelectRequest",
    "RecentMood",
    "DetectMoodRequest",
    "DetectMoodResponse",
    "REACTION_EMOJIS",
    "ReactionCount",
    "ProductReactions",
    "ReactionRequest",
    "ReviewCreate",
    "Review",
    "HelpfulResponse",
    "FavoriteResponse",
    "TrendingMood",
]
