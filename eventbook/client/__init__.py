from .api import APIError, ClientError, EventBookClient, NetworkError
from .cart import Cart, CartItem

__all__ = ["APIError", "ClientError", "EventBookClient", "NetworkError", "Cart", "CartItem"]
