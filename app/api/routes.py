import logging
from typing import Optional, Tuple, Iterator

from fastapi import APIRouter, HTTPException, status, Depends, Form, Header, Query, Request
from fastapi.responses import JSONResponse

from app.clients.shopify_admin import ShopifyAdminClient, normalize_store_domain, is_valid_store_domain
from app.config import Settings
from app.exceptions import AuthenticationError, ClassificationFailed
from app.models.schemas import (
    ClassificationResult, ClassifyResponse, SaveMetafieldsResponse, DashboardResponse
)
from app.services.classifier import ProductClassifier
from app.services.dashboard import build_dashboard
from app.services.metafield_writer import MetafieldWriter
from app.services.product_lister import ProductLister

logger = logging.getLogger(__name__)
router = APIRouter()


# Dependency injection for services
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_product_lister(settings: Settings = Depends(get_settings)) -> ProductLister:
    return ProductLister(page_size=settings.PRODUCT_PAGE_SIZE)


def get_classifier(request: Request) -> ProductClassifier:
    return ProductClassifier(request.app.state.ai_client)


def get_metafield_writer() -> MetafieldWriter:
    return MetafieldWriter()


def get_merchant_session(
        settings: Settings = Depends(get_settings),
        shop_domain: Optional[str] = Header(default=None, alias="X-Shopify-Shop-Domain"),
        authorization: Optional[str] = Header(default=None)
) -> Tuple[str, str]:
    """
    Resolve the request to a (store domain, access token) pair

    A request that names a shop or carries a Bearer token must supply both.
    Only a request with neither header uses the configured store and token.
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()

    if shop_domain or authorization:
        shop = shop_domain
    else:
        shop = settings.SHOPIFY_STORE_DOMAIN
        token = settings.SHOPIFY_ADMIN_ACCESS_TOKEN

    if not shop or not token:
        raise AuthenticationError("No authenticated Shopify session for this request")

    store_domain = normalize_store_domain(shop)
    if not is_valid_store_domain(store_domain):
        logger.warning(f"Rejected shop domain {shop!r}")
        raise AuthenticationError("Shop domain is not a myshopify.com store")

    return store_domain, token


def get_admin_client(
        session: Tuple[str, str] = Depends(get_merchant_session),
        settings: Settings = Depends(get_settings)
) -> Iterator[ShopifyAdminClient]:
    """Admin API client for the merchant session, closed when the request ends"""
    store_domain, token = session
    admin = ShopifyAdminClient(
        store_domain=store_domain,
        access_token=token,
        api_version=settings.SHOPIFY_API_VERSION,
        timeout=settings.REQUEST_TIMEOUT
    )
    try:
        yield admin
    finally:
        admin.close()


@router.get("/products", response_model=DashboardResponse)
def list_products(
        product_id: Optional[str] = Query(default=None, alias="productId"),
        customs_description: Optional[str] = Query(default=None, alias="customsDescription"),
        hs_code: Optional[str] = Query(default=None, alias="hsCode"),
        admin: ShopifyAdminClient = Depends(get_admin_client),
        lister: ProductLister = Depends(get_product_lister)
):
    """
    Load the product dashboard

    **Parameters:**
    - productId, customsDescription, hsCode: an unsaved classification to show
      on its product's row; ignored unless all three are given

    **Returns:**
    - The first page of products sorted by title, each with its stored
      customs description and HS code, row status and available actions
    - empty_message when the store has no products
    """
    products = lister.list_products(admin)

    classifications = []
    if product_id is not None and customs_description is not None and hs_code is not None:
        classifications.append(ClassificationResult(
            product_id=product_id,
            customs_description=customs_description,
            hs_code=hs_code
        ))

    return build_dashboard(products, classifications)


@router.post(
    "/classify",
    response_model=ClassifyResponse,
    dependencies=[Depends(get_merchant_session)]
)
def classify_product(
        product_id: str = Form(..., alias="productId"),
        product_title: str = Form(..., alias="productTitle"),
        classifier: ProductClassifier = Depends(get_classifier)
):
    """
    Ask the AI model for a customs description and HS code

    Nothing is saved; the caller submits the result to /save-metafields.

    **Error Codes:**
    - 400: Blank product title
    - 502: The AI call failed or its answer could not be parsed
    """
    if not product_title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="productTitle is required"
        )

    try:
        result = classifier.classify(product_id, product_title)
    except ClassificationFailed as e:
        logger.error(f"AI classification failed for {product_title}: {e}")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=ClassifyResponse(
                success=False,
                product_id=product_id,
                error=e.message
            ).model_dump(by_alias=True, exclude_none=True)
        )

    return ClassifyResponse(success=True, product_id=product_id, data=result)


@router.post("/save-metafields", response_model=SaveMetafieldsResponse)
def save_metafields(
        product_id: str = Form(..., alias="productId"),
        customs_description: str = Form("", alias="customsDescription"),
        hs_code: str = Form("", alias="hsCode"),
        admin: ShopifyAdminClient = Depends(get_admin_client),
        writer: MetafieldWriter = Depends(get_metafield_writer)
):
    """
    Store a classification as the product's waypoint metafields

    Shopify field errors come back under data.userErrors with a 200 status.
    """
    result = writer.save(admin, product_id, customs_description, hs_code)
    return SaveMetafieldsResponse(data=result)


@router.get("/health")
async def health_check():
    """Health check for the API routes"""
    return {
        "status": "healthy",
        "service": "Waypoint Customs Classifier API",
        "endpoints_available": [
            "/products",
            "/classify",
            "/save-metafields",
            "/health"
        ]
    }
