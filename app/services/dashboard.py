"""
View model for the product dashboard.

Each product row moves through
Unclassified -> Classifying -> Classified -> Saving -> Saved.
A row loaded with stored metafields starts out Saved.

The listing endpoint merges one round-tripped, unsaved classification into
the rows it returns. The transition methods are driven by the external
presentation layer as its classify and save requests start and finish.
"""

import logging
from typing import List, Optional, Dict, Iterable

from app.models.schemas import (
    ProductView, ClassificationResult, RowStatus, RowAction, DashboardRow, DashboardResponse
)

logger = logging.getLogger(__name__)

EMPTY_MESSAGE = "No products found"


class InvalidTransition(Exception):
    pass


class ProductRow:
    def __init__(self, product: ProductView):
        self.product = product
        self.customs_description = product.customs_description
        self.hs_code = product.hs_code
        self.status = RowStatus.SAVED if product.has_classification else RowStatus.UNCLASSIFIED
        self._before: Optional[RowStatus] = None

    @property
    def actions(self) -> List[RowAction]:
        if self.status == RowStatus.UNCLASSIFIED:
            return [RowAction.CLASSIFY]
        if self.status == RowStatus.CLASSIFIED:
            return [RowAction.CLASSIFY, RowAction.SAVE]
        if self.status == RowStatus.SAVED:
            return [RowAction.CLASSIFY]
        return []

    def _require(self, *allowed: RowStatus):
        if self.status not in allowed:
            raise InvalidTransition(f"Row {self.product.id} cannot leave state {self.status.value}")

    def start_classification(self):
        self._require(RowStatus.UNCLASSIFIED, RowStatus.CLASSIFIED, RowStatus.SAVED)
        self._before = self.status
        self.status = RowStatus.CLASSIFYING

    def apply_classification(self, result: ClassificationResult) -> bool:
        """
        Attach a classification to this row.

        Accepted while classifying, or on a freshly loaded row when an unsaved
        result is merged back in. A result arriving during a save is refused.

        Returns False, leaving the row untouched, when the result belongs to
        another product.
        """
        self._require(RowStatus.CLASSIFYING, RowStatus.UNCLASSIFIED, RowStatus.SAVED)

        if result.product_id != self.product.id:
            logger.warning(
                f"Ignoring classification for {result.product_id} on row {self.product.id}"
            )
            return False

        self.customs_description = result.customs_description
        self.hs_code = result.hs_code
        self.status = RowStatus.CLASSIFIED
        self._before = None
        return True

    def fail_classification(self):
        self._require(RowStatus.CLASSIFYING)
        self.status = self._before or RowStatus.UNCLASSIFIED
        self._before = None

    def start_save(self):
        self._require(RowStatus.CLASSIFIED)
        self.status = RowStatus.SAVING

    def finish_save(self):
        self._require(RowStatus.SAVING)
        self.status = RowStatus.SAVED

    def fail_save(self):
        self._require(RowStatus.SAVING)
        self.status = RowStatus.CLASSIFIED

    def to_model(self) -> DashboardRow:
        return DashboardRow(
            product=self.product,
            status=self.status,
            actions=self.actions,
            customs_description=self.customs_description,
            hs_code=self.hs_code,
        )


def build_rows(
        products: Iterable[ProductView],
        classifications: Optional[Iterable[ClassificationResult]] = None
) -> List[ProductRow]:
    """Build one row per product, merging in unsaved classifications by product id"""
    rows = [ProductRow(product) for product in products]
    by_id: Dict[str, ProductRow] = {row.product.id: row for row in rows}

    for result in classifications or []:
        row = by_id.get(result.product_id)
        if row is not None:
            row.apply_classification(result)

    return rows


def build_dashboard(
        products: Iterable[ProductView],
        classifications: Optional[Iterable[ClassificationResult]] = None
) -> DashboardResponse:
    rows = build_rows(products, classifications)
    return DashboardResponse(
        products=[row.to_model() for row in rows],
        total_products=len(rows),
        empty_message=None if rows else EMPTY_MESSAGE,
    )
