import json
import logging
import re
from typing import Optional, Dict, Any

import requests

from app.exceptions import UpstreamQueryError

logger = logging.getLogger(__name__)

STORE_DOMAIN_RE = re.compile(r"^[a-z0-9][a-z0-9-]*\.myshopify\.com$")


def normalize_store_domain(domain: str) -> str:
    """
    Normalize a Shopify store domain to the bare *.myshopify.com host

    Args:
        domain: "my-store", "my-store.myshopify.com" or a full https:// URL

    Returns:
        str: Host name such as "my-store.myshopify.com"
    """
    if not domain:
        return ""

    domain = domain.strip().lower().replace("https://", "").replace("http://", "")
    domain = domain.split("/", 1)[0]

    if not domain.endswith(".myshopify.com"):
        domain = f"{domain}.myshopify.com"

    return domain


def is_valid_store_domain(domain: str) -> bool:
    """True when domain is a bare *.myshopify.com host with no other URL parts"""
    return bool(domain) and STORE_DOMAIN_RE.fullmatch(domain) is not None


class ShopifyAdminClient:
    """Authenticated access to one store's Admin GraphQL API."""

    def __init__(
            self,
            store_domain: str,
            access_token: str,
            api_version: str = "2024-10",
            timeout: Optional[float] = None,
            session: Optional[requests.Session] = None
    ):
        self.store_domain = normalize_store_domain(store_domain)
        if not is_valid_store_domain(self.store_domain):
            raise ValueError(f"Not a Shopify store domain: {store_domain!r}")
        self.access_token = access_token
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({
            "X-Shopify-Access-Token": self.access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        return session

    @property
    def graphql_url(self) -> str:
        return f"https://{self.store_domain}/admin/api/{self.api_version}/graphql.json"

    def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL document and return its "data" member

        Args:
            query: GraphQL query or mutation
            variables: Variables for the document

        Returns:
            dict: The response "data" object

        Raises:
            UpstreamQueryError: on transport failure, GraphQL errors or a response without data
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        try:
            response = self.session.post(self.graphql_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.exceptions.RequestException, json.JSONDecodeError) as e:
            logger.error(f"Shopify GraphQL request to {self.store_domain} failed: {e}")
            raise UpstreamQueryError(f"Shopify request failed: {e}") from e

        errors = body.get("errors")
        if errors:
            logger.error(f"Shopify GraphQL errors from {self.store_domain}: {errors}")
            raise UpstreamQueryError("Shopify returned GraphQL errors", details={"errors": errors})

        data = body.get("data")
        if not data:
            raise UpstreamQueryError("Shopify returned no data")

        return data

    def close(self):
        self.session.close()
