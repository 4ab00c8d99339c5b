"""Pytest configuration and fixtures."""

import json
import os
import sys
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add project root to path for imports
root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path))

# Set test environment variables
os.environ.setdefault("GOOGLE_AI_API_KEY", "test-google-key")
os.environ.setdefault("SHOPIFY_STORE_DOMAIN", "waypoint-test")
os.environ.setdefault("SHOPIFY_ADMIN_ACCESS_TOKEN", "shpat_test")


class StubAIClient:
    """Completion client that answers from a title -> text table."""

    def __init__(self, answers: Optional[Dict[str, str]] = None, default: Optional[str] = None):
        self.answers = answers or {}
        self.default = default
        self.prompts: List[str] = []
        self._lock = threading.Lock()

    def generate_text(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
        for title, text in self.answers.items():
            if f'"{title}"' in prompt:
                return text
        if self.default is None:
            raise RuntimeError("no stub answer for prompt")
        return self.default


class FakeShopifyAdmin:
    """In-memory stand-in for ShopifyAdminClient.

    Understands the product listing query and the metafieldsSet mutation.
    """

    def __init__(self, products: Optional[List[Dict[str, Any]]] = None):
        self.store_domain = "waypoint-test.myshopify.com"
        self.products = products or []
        self.metafields: Dict[tuple, Dict[str, Any]] = {}
        self.calls: List[Dict[str, Any]] = []
        self.user_errors: List[Dict[str, Any]] = []
        self._next_id = 1
        self.closed = False

    def close(self):
        self.closed = True

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self.calls.append({"query": query, "variables": json.loads(json.dumps(variables or {}))})
        if "metafieldsSet" in query:
            return self._metafields_set(variables["metafields"])
        return self._list_products(variables["first"])

    def _metafield(self, owner_id: str, key: str) -> Optional[Dict[str, str]]:
        stored = self.metafields.get((owner_id, "waypoint", key))
        return {"value": stored["value"]} if stored else None

    def _list_products(self, first: int) -> Dict[str, Any]:
        ordered = sorted(self.products, key=lambda p: p["title"])[:first]
        edges = []
        for product in ordered:
            node = dict(product)
            node["customsDescription"] = self._metafield(product["id"], "customs_description")
            node["hsCode"] = self._metafield(product["id"], "hs_code")
            edges.append({"node": node})
        return {"products": {"edges": edges}}

    def _metafields_set(self, inputs: List[Dict[str, Any]]) -> Dict[str, Any]:
        if self.user_errors:
            return {"metafieldsSet": {"metafields": [], "userErrors": self.user_errors}}

        written = []
        for item in inputs:
            key = (item["ownerId"], item["namespace"], item["key"])
            if key not in self.metafields:
                self.metafields[key] = {"id": f"gid://shopify/Metafield/{self._next_id}"}
                self._next_id += 1
            self.metafields[key].update({
                "key": item["key"],
                "namespace": item["namespace"],
                "type": item["type"],
                "value": item["value"],
            })
            written.append({k: self.metafields[key][k] for k in ("id", "key", "namespace", "value")})
        return {"metafieldsSet": {"metafields": written, "userErrors": []}}


@pytest.fixture
def sample_products() -> List[Dict[str, Any]]:
    return [
        {"id": "gid://shopify/Product/2", "title": "Wireless Bluetooth Earbuds", "handle": "wireless-bluetooth-earbuds"},
        {"id": "gid://shopify/Product/1", "title": "Cotton T-Shirt", "handle": "cotton-t-shirt"},
    ]


@pytest.fixture
def fake_admin(sample_products) -> FakeShopifyAdmin:
    return FakeShopifyAdmin(sample_products)


@pytest.fixture
def stub_ai() -> StubAIClient:
    return StubAIClient({
        "Wireless Bluetooth Earbuds": '{"customs_description":"Wireless audio earphones","hs_code":"851830"}',
        "Cotton T-Shirt": '{"customs_description":"Knitted cotton T-shirt","hs_code":"610910"}',
    })
