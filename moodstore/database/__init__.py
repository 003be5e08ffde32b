# Database modules

from .query import Table, ChangeEvent, ChangeKind
from .products import product_db, ProductDatabase
from .carts import cart_db, CartDatabase
from .orders import order_db, OrderDatabase
from .profiles import profile_db, ProfileDatabase
from .reactions import reaction_db, ReactionDatabase
from .reviews import review_db, ReviewDatabase
from .favorites import favorites_db, FavoritesDatabase


def reset_store() -> None:
    """Empty every table and reseed the catalog"""
    product_db.seed()
    for table in (
        cart_db.table,
        order_db.orders,
        order_db.items,
        profile_db.table,
        reaction_db.counts,
        reaction_db.marks,
        review_db.reviews,
        review_db.votes,
        favorites_db.table,
    ):
        table.clear()


__all__ = [
    "Table",
    "ChangeEvent",
    "ChangeKind",
    "product_db",
    "ProductDatabase",
    "cart_db",
    "CartDatabase",
    "order_db",
    "OrderDatabase",
    "profile_db",
    "ProfileDatabase",
    "reaction_db",
    "ReactionDatabase",
    "review_db",
    "ReviewDatabase",
    "favorites_db",
    "FavoritesDatabase",
    "reset_store",
]
