"""
Data models and schemas for the customs classifier
"""

from .schemas import (
    METAFIELD_NAMESPACE,
    CUSTOMS_DESCRIPTION_KEY,
    HS_CODE_KEY,
    METAFIELD_TYPE,
    RowStatus,
    RowAction,
    ProductView,
    ClassificationResult,
    ClassifyResponse,
    Metafield,
    UserError,
    MetafieldsSetResult,
    SaveMetafieldsResponse,
    DashboardRow,
    DashboardResponse,
    ErrorResponse
)

__all__ = [
    "METAFIELD_NAMESPACE",
    "CUSTOMS_DESCRIPTION_KEY",
    "HS_CODE_KEY",
    "METAFIELD_TYPE",
    "RowStatus",
    "RowAction",
    "ProductView",
    "ClassificationResult",
    "ClassifyResponse",
    "Metafield",
    "UserError",
    "MetafieldsSetResult",
    "SaveMetafieldsResponse",
    "DashboardRow",
    "DashboardResponse",
    "ErrorResponse"
]
