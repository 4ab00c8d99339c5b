"""
Business logic services for listing, classifying and saving products
"""

from .product_lister import ProductLister
from .classifier import ProductClassifier, build_classification_prompt, parse_classification
from .metafield_writer import MetafieldWriter
from .dashboard import ProductRow, build_dashboard

__all__ = [
    "ProductLister",
    "ProductClassifier",
    "build_classification_prompt",
    "parse_classification",
    "MetafieldWriter",
    "ProductRow",
    "build_dashboard"
]
