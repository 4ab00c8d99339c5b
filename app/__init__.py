"""
Waypoint Customs Classifier

A Shopify admin service that:
- Lists a store's products with their stored customs data
- Asks a Gemini model for a customs description and HS code per product
- Saves the result as waypoint metafields on the product
"""

__version__ = "1.0.0"
