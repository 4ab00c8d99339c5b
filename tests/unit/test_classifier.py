"""Unit tests for prompt building, response parsing and the classifier."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.exceptions import AIProviderError, ClassificationFailed, ClassificationParseError
from app.services.classifier import (
    ProductClassifier,
    build_classification_prompt,
    parse_classification,
)
from conftest import StubAIClient

EARBUDS_ID = "gid://shopify/Product/2"
EARBUDS_ANSWER = '{"customs_description":"Wireless audio earphones","hs_code":"851830"}'


class TestBuildPrompt:
    """Tests for build_classification_prompt."""

    def test_contains_exact_title(self):
        prompt = build_classification_prompt("Wireless Bluetooth Earbuds")
        assert '"Wireless Bluetooth Earbuds"' in prompt

    def test_requests_minified_two_key_json(self):
        prompt = build_classification_prompt("Anything")
        assert "single, minified JSON object" in prompt
        assert '"customs_description"' in prompt
        assert '"hs_code"' in prompt

    def test_asks_for_six_digit_code_without_jargon(self):
        prompt = build_classification_prompt("Anything")
        assert "6-digit Harmonized System (HS) code" in prompt
        assert "Avoid marketing jargon" in prompt


class TestParseClassification:
    """Tests for parse_classification."""

    def test_valid_object(self):
        result = parse_classification(EARBUDS_ANSWER, EARBUDS_ID)
        assert result.product_id == EARBUDS_ID
        assert result.customs_description == "Wireless audio earphones"
        assert result.hs_code == "851830"

    def test_surrounding_whitespace_is_allowed(self):
        result = parse_classification(f"\n  {EARBUDS_ANSWER}\n", EARBUDS_ID)
        assert result.hs_code == "851830"

    def test_extra_keys_are_ignored(self):
        text = '{"customs_description":"Mug","hs_code":"691200","confidence":"high"}'
        result = parse_classification(text, "p1")
        assert result.customs_description == "Mug"

    def test_markdown_fence_is_rejected(self):
        fenced = f"```json\n{EARBUDS_ANSWER}\n```"
        with pytest.raises(ClassificationParseError) as exc_info:
            parse_classification(fenced, EARBUDS_ID)
        assert exc_info.value.raw_text == fenced

    def test_prose_is_rejected(self):
        with pytest.raises(ClassificationParseError):
            parse_classification(f"Here is the result: {EARBUDS_ANSWER}", EARBUDS_ID)

    def test_missing_hs_code_is_rejected(self):
        with pytest.raises(ClassificationParseError, match="hs_code"):
            parse_classification('{"customs_description":"Wireless audio earphones"}', EARBUDS_ID)

    def test_non_object_is_rejected(self):
        with pytest.raises(ClassificationParseError):
            parse_classification('["Wireless audio earphones", "851830"]', EARBUDS_ID)

    def test_non_string_value_is_rejected(self):
        with pytest.raises(ClassificationParseError):
            parse_classification('{"customs_description":"Earphones","hs_code":851830}', EARBUDS_ID)

    def test_parse_error_is_a_classification_failure(self):
        with pytest.raises(ClassificationFailed):
            parse_classification("", EARBUDS_ID)


class TestProductClassifier:
    """Tests for ProductClassifier.classify."""

    def test_earbuds_scenario(self, stub_ai):
        classifier = ProductClassifier(stub_ai)

        result = classifier.classify(EARBUDS_ID, "Wireless Bluetooth Earbuds")

        assert result.product_id == EARBUDS_ID
        assert result.customs_description == "Wireless audio earphones"
        assert result.hs_code == "851830"
        assert len(stub_ai.prompts) == 1
        assert '"Wireless Bluetooth Earbuds"' in stub_ai.prompts[0]
        assert "minified JSON object" in stub_ai.prompts[0]

    def test_product_id_is_passed_through(self, stub_ai):
        classifier = ProductClassifier(stub_ai)
        result = classifier.classify("not-a-gid", "Cotton T-Shirt")
        assert result.product_id == "not-a-gid"

    def test_blank_title_rejected_without_calling_provider(self, stub_ai):
        classifier = ProductClassifier(stub_ai)
        with pytest.raises(ValueError):
            classifier.classify(EARBUDS_ID, "   ")
        assert stub_ai.prompts == []

    def test_provider_exception_becomes_provider_error(self):
        classifier = ProductClassifier(StubAIClient())
        with pytest.raises(AIProviderError):
            classifier.classify(EARBUDS_ID, "Unknown Product")

    def test_provider_error_is_not_rewrapped(self):
        class FailingClient:
            def generate_text(self, prompt):
                raise AIProviderError("quota exceeded")

        with pytest.raises(AIProviderError, match="quota exceeded"):
            ProductClassifier(FailingClient()).classify(EARBUDS_ID, "Earbuds")

    def test_fenced_answer_fails(self):
        stub = StubAIClient(default=f"```json\n{EARBUDS_ANSWER}\n```")
        with pytest.raises(ClassificationParseError):
            ProductClassifier(stub).classify(EARBUDS_ID, "Wireless Bluetooth Earbuds")

    def test_overlapping_calls_keep_their_product_ids(self):
        barrier = threading.Barrier(2)

        class InterleavingClient(StubAIClient):
            def generate_text(self, prompt):
                barrier.wait(timeout=5)
                return super().generate_text(prompt)

        stub = InterleavingClient({
            "Wireless Bluetooth Earbuds": EARBUDS_ANSWER,
            "Cotton T-Shirt": '{"customs_description":"Knitted cotton T-shirt","hs_code":"610910"}',
        })
        classifier = ProductClassifier(stub)

        with ThreadPoolExecutor(max_workers=2) as pool:
            earbuds = pool.submit(classifier.classify, EARBUDS_ID, "Wireless Bluetooth Earbuds")
            shirt = pool.submit(classifier.classify, "gid://shopify/Product/1", "Cotton T-Shirt")
            earbuds_result = earbuds.result(timeout=10)
            shirt_result = shirt.result(timeout=10)

        assert earbuds_result.product_id == EARBUDS_ID
        assert earbuds_result.hs_code == "851830"
        assert shirt_result.product_id == "gid://shopify/Product/1"
        assert shirt_result.hs_code == "610910"
