"""Mood Store - mood-themed storefront backend and cart client"""

__version__ = "1.0.0"
