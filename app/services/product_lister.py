import logging
from typing import List, Dict, Any, Optional

from app.clients.shopify_admin import ShopifyAdminClient
from app.exceptions import UpstreamQueryError
from app.models.schemas import (
    ProductView, METAFIELD_NAMESPACE, CUSTOMS_DESCRIPTION_KEY, HS_CODE_KEY
)

logger = logging.getLogger(__name__)


PRODUCTS_QUERY = f"""
query ListProducts($first: Int!) {{
  products(first: $first, sortKey: TITLE, reverse: false) {{
    edges {{
      node {{
        id
        title
        handle
        customsDescription: metafield(namespace: "{METAFIELD_NAMESPACE}", key: "{CUSTOMS_DESCRIPTION_KEY}") {{
          value
        }}
        hsCode: metafield(namespace: "{METAFIELD_NAMESPACE}", key: "{HS_CODE_KEY}") {{
          value
        }}
      }}
    }}
  }}
}}
"""


def _metafield_value(node: Dict[str, Any], alias: str) -> Optional[str]:
    metafield = node.get(alias)
    if not metafield:
        return None
    return metafield.get("value")


class ProductLister:
    def __init__(self, page_size: int = 10):
        self.page_size = page_size

    def list_products(self, admin: ShopifyAdminClient, first: Optional[int] = None) -> List[ProductView]:
        """
        Fetch the first page of products ordered by title, with their stored classification

        Args:
            admin: Authenticated Admin API client
            first: Page size, defaults to the configured size

        Returns:
            List[ProductView]: Products in the order the platform returned them
        """
        data = admin.graphql(PRODUCTS_QUERY, {"first": first or self.page_size})

        if not data.get("products"):
            raise UpstreamQueryError("Shopify response has no products connection")

        edges = data["products"].get("edges") or []
        products = [self._parse_node(edge["node"]) for edge in edges]

        logger.info(f"Listed {len(products)} products from {admin.store_domain}")
        return products

    def _parse_node(self, node: Dict[str, Any]) -> ProductView:
        return ProductView(
            id=node["id"],
            title=node["title"],
            handle=node.get("handle"),
            customs_description=_metafield_value(node, "customsDescription"),
            hs_code=_metafield_value(node, "hsCode"),
        )
