import os
from typing import Optional

from dotenv import load_dotenv

from app.exceptions import ConfigurationError

# Load environment variables
load_dotenv()


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


class Settings:
    # API Configuration
    API_TITLE = "Waypoint Customs Classifier"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Classify Shopify products for customs declarations and store the result as metafields"

    def __init__(self):
        # Server Configuration
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = int(os.getenv("PORT", 8000))
        self.DEBUG = os.getenv("DEBUG", "false").lower() == "true"

        # AI provider
        self.GOOGLE_AI_API_KEY = os.getenv("GOOGLE_AI_API_KEY", "")
        self.GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

        # Shopify Admin API
        self.SHOPIFY_STORE_DOMAIN = os.getenv("SHOPIFY_STORE_DOMAIN", "")
        self.SHOPIFY_ADMIN_ACCESS_TOKEN = os.getenv("SHOPIFY_ADMIN_ACCESS_TOKEN", "")
        self.SHOPIFY_API_VERSION = os.getenv("SHOPIFY_API_VERSION", "2024-10")
        self.PRODUCT_PAGE_SIZE = int(os.getenv("PRODUCT_PAGE_SIZE", 10))

        # No timeout unless configured; the requests default applies
        self.REQUEST_TIMEOUT = _optional_float(os.getenv("REQUEST_TIMEOUT"))

        # Logging Configuration
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

        # Security Configuration
        self.ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

    def require_ai_api_key(self) -> str:
        """Return the AI provider key, failing hard when it is not configured"""
        if not self.GOOGLE_AI_API_KEY:
            raise ConfigurationError("GOOGLE_AI_API_KEY is not set")
        return self.GOOGLE_AI_API_KEY


# Create settings instance
settings = Settings()

