# Cart client

from .cart_manager import CartManager, mirror_path
from .remote import CartRemote, TableCartRemote
from .store_client import StoreClient

__all__ = [
    "CartManager",
    "mirror_path",
    "CartRemote",
    "TableCartRemote",
    "StoreClient",
]
