from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from datetime import datetime
from enum import Enum


METAFIELD_NAMESPACE = "waypoint"
CUSTOMS_DESCRIPTION_KEY = "customs_description"
HS_CODE_KEY = "hs_code"
METAFIELD_TYPE = "single_line_text_field"


class RowStatus(str, Enum):
    UNCLASSIFIED = "unclassified"
    CLASSIFYING = "classifying"
    CLASSIFIED = "classified"
    SAVING = "saving"
    SAVED = "saved"


class RowAction(str, Enum):
    CLASSIFY = "classify"
    SAVE = "save"


class ProductView(BaseModel):
    id: str
    title: str
    handle: Optional[str] = None
    customs_description: Optional[str] = None
    hs_code: Optional[str] = None

    @property
    def has_classification(self) -> bool:
        return self.customs_description is not None and self.hs_code is not None


class ClassificationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="productId")
    customs_description: str
    hs_code: str


class ClassifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    product_id: str = Field(alias="productId")
    data: Optional[ClassificationResult] = None
    error: Optional[str] = None


class Metafield(BaseModel):
    id: Optional[str] = None
    key: str
    namespace: str
    value: str


class UserError(BaseModel):
    field: Optional[List[str]] = None
    message: str


class MetafieldsSetResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    metafields: List[Metafield] = []
    user_errors: List[UserError] = Field(default=[], alias="userErrors")


class SaveMetafieldsResponse(BaseModel):
    data: MetafieldsSetResult


class DashboardRow(BaseModel):
    product: ProductView
    status: RowStatus
    actions: List[RowAction] = []
    customs_description: Optional[str] = None
    hs_code: Optional[str] = None


class DashboardResponse(BaseModel):
    products: List[DashboardRow] = []
    total_products: int = 0
    empty_message: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
    message: str
    status_code: int
    timestamp: datetime = Field(default_factory=datetime.now)
