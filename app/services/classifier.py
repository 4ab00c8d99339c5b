import json
import logging
from typing import Protocol

from app.exceptions import AIProviderError, ClassificationParseError, ClassificationFailed
from app.models.schemas import ClassificationResult, CUSTOMS_DESCRIPTION_KEY, HS_CODE_KEY

logger = logging.getLogger(__name__)


class TextCompletionClient(Protocol):
    def generate_text(self, prompt: str) -> str:
        ...


def build_classification_prompt(product_title: str) -> str:
    """Prompt asking for a customs description and a 6-digit HS code as minified JSON"""
    return (
        "You are an expert international customs agent. "
        "Your task is to generate a customs declaration for an e-commerce product.\n"
        f'Based on the product title "{product_title}", perform two tasks:\n'
        "1. Generate a concise, literal, and accurate product description suitable for a customs form. "
        "Avoid marketing jargon.\n"
        "2. Determine the most likely 6-digit Harmonized System (HS) code for this item.\n"
        "\n"
        "Return the response as a single, minified JSON object with two keys: "
        f'"{CUSTOMS_DESCRIPTION_KEY}" and "{HS_CODE_KEY}".'
    )


def parse_classification(raw_text: str, product_id: str) -> ClassificationResult:
    """
    Parse the model's answer into a ClassificationResult

    The text must be a bare JSON object. Markdown fences or surrounding prose are
    rejected rather than repaired.

    Args:
        raw_text: Text returned by the completion call
        product_id: Identifier of the product the answer belongs to

    Returns:
        ClassificationResult tagged with product_id

    Raises:
        ClassificationParseError: if the text is not an object with both string keys
    """
    try:
        payload = json.loads(raw_text.strip())
    except (json.JSONDecodeError, AttributeError) as e:
        raise ClassificationParseError(f"AI response is not valid JSON: {e}", raw_text=raw_text) from e

    if not isinstance(payload, dict):
        raise ClassificationParseError("AI response is not a JSON object", raw_text=raw_text)

    missing = [key for key in (CUSTOMS_DESCRIPTION_KEY, HS_CODE_KEY) if key not in payload]
    if missing:
        raise ClassificationParseError(
            f"AI response is missing keys: {', '.join(missing)}", raw_text=raw_text
        )

    for key in (CUSTOMS_DESCRIPTION_KEY, HS_CODE_KEY):
        if not isinstance(payload[key], str):
            raise ClassificationParseError(f"AI response key {key} is not a string", raw_text=raw_text)

    return ClassificationResult(
        product_id=product_id,
        customs_description=payload[CUSTOMS_DESCRIPTION_KEY],
        hs_code=payload[HS_CODE_KEY],
    )


class ProductClassifier:
    def __init__(self, ai_client: TextCompletionClient):
        self.ai_client = ai_client

    def classify(self, product_id: str, product_title: str) -> ClassificationResult:
        """
        Classify one product from its title

        Args:
            product_id: Opaque product identifier, passed through unvalidated
            product_title: Product title, must not be blank

        Returns:
            ClassificationResult for product_id

        Raises:
            ValueError: if the title is blank
            ClassificationFailed: if the provider call fails or its answer cannot be parsed
        """
        if not product_title or not product_title.strip():
            raise ValueError("product_title is required")

        prompt = build_classification_prompt(product_title)

        try:
            raw_text = self.ai_client.generate_text(prompt)
        except ClassificationFailed:
            raise
        except Exception as e:
            raise AIProviderError(f"AI call failed: {e}") from e

        logger.debug(f"AI response for {product_id}: {raw_text}")

        result = parse_classification(raw_text, product_id)
        logger.info(f"AI classification successful for: {product_title}")
        return result
