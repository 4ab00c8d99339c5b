"""
Clients for the external services the app calls
"""

from .gemini import GeminiClient
from .shopify_admin import ShopifyAdminClient

__all__ = ["GeminiClient", "ShopifyAdminClient"]
