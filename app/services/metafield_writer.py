import logging
from typing import List, Dict, Any

from app.clients.shopify_admin import ShopifyAdminClient
from app.exceptions import UpstreamQueryError
from app.models.schemas import (
    MetafieldsSetResult, METAFIELD_NAMESPACE, METAFIELD_TYPE, CUSTOMS_DESCRIPTION_KEY, HS_CODE_KEY
)

logger = logging.getLogger(__name__)


METAFIELDS_SET_MUTATION = """
mutation MetafieldsSet($metafields: [MetafieldsSetInput!]!) {
  metafieldsSet(metafields: $metafields) {
    metafields {
      id
      key
      namespace
      value
    }
    userErrors {
      field
      message
    }
  }
}
"""


def build_metafield_inputs(product_id: str, customs_description: str, hs_code: str) -> List[Dict[str, Any]]:
    return [
        {
            "ownerId": product_id,
            "namespace": METAFIELD_NAMESPACE,
            "key": CUSTOMS_DESCRIPTION_KEY,
            "type": METAFIELD_TYPE,
            "value": customs_description,
        },
        {
            "ownerId": product_id,
            "namespace": METAFIELD_NAMESPACE,
            "key": HS_CODE_KEY,
            "type": METAFIELD_TYPE,
            "value": hs_code,
        },
    ]


class MetafieldWriter:
    def save(
            self,
            admin: ShopifyAdminClient,
            product_id: str,
            customs_description: str,
            hs_code: str
    ) -> MetafieldsSetResult:
        """
        Upsert the customs description and HS code metafields on a product

        Values are written as given, empty strings included. Field errors reported
        by Shopify are returned in the result, not raised.

        Args:
            admin: Authenticated Admin API client
            product_id: Owner GID of the product
            customs_description: Description to store
            hs_code: HS code to store

        Returns:
            MetafieldsSetResult: Written metafields and any user errors
        """
        data = admin.graphql(
            METAFIELDS_SET_MUTATION,
            {"metafields": build_metafield_inputs(product_id, customs_description, hs_code)}
        )

        payload = data.get("metafieldsSet")
        if payload is None:
            raise UpstreamQueryError("Shopify response has no metafieldsSet payload")

        result = MetafieldsSetResult.model_validate({
            "metafields": payload.get("metafields") or [],
            "userErrors": payload.get("userErrors") or [],
        })

        if result.user_errors:
            logger.warning(
                f"Metafield save for {product_id} returned {len(result.user_errors)} user errors"
            )
        else:
            logger.info(f"Saved {len(result.metafields)} metafields for {product_id}")

        return result
