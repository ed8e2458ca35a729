"""
Tests for `services/insight_service.py`.

The model is replaced by fakes; no network calls are made.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from domain.errors import ServiceError
from domain.product import Product
from domain.sale import SaleItem, SaleRecord
from services import insight_service
from services.insight_service import GeminiInsightClient, ask_sales_insights, build_insight_prompt
from settings import Settings

PRODUCTS = [Product("p1", "Hummus Platter", "Appetizer", Decimal("8.50"), 50)]
SALES = [
    SaleRecord(
        sale_id="s1",
        items=(SaleItem(product_id="p1", quantity=2, price=Decimal("8.50")),),
        total=Decimal("17.00"),
        timestamp=datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc),
    )
]


class _RecordingClient:
    def __init__(self, answer: str = "Hummus Platter is your top seller.") -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.answer


class _FailingClient:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def generate(self, prompt: str) -> str:
        raise self.error


def test_prompt_embeds_question_and_data() -> None:
    prompt = build_insight_prompt("What sells best?", PRODUCTS, SALES, date(2025, 3, 14))

    assert '"What sells best?"' in prompt
    assert "Hummus Platter" in prompt
    assert '"productId": "p1"' in prompt
    assert '"total": "17.00"' in prompt
    assert "2025-03-14" in prompt
    # Stock levels are not part of the product snapshot
    assert '"stock"' not in prompt


def test_ask_returns_model_answer() -> None:
    client = _RecordingClient()

    answer = ask_sales_insights("  What sells best?  ", PRODUCTS, SALES, client=client, today=date(2025, 3, 14))

    assert answer == "Hummus Platter is your top seller."
    assert len(client.prompts) == 1
    assert '"What sells best?"' in client.prompts[0]


def test_empty_question_is_rejected() -> None:
    with pytest.raises(ServiceError):
        ask_sales_insights("   ", PRODUCTS, SALES, client=_RecordingClient())


def test_missing_api_key_is_a_service_error() -> None:
    with pytest.raises(ServiceError) as exc:
        ask_sales_insights("What sells best?", PRODUCTS, SALES, settings=Settings())
    assert "API key" in str(exc.value)


def test_model_failure_is_wrapped_as_service_error() -> None:
    boom = RuntimeError("quota exceeded")

    with pytest.raises(ServiceError) as exc:
        ask_sales_insights("What sells best?", PRODUCTS, SALES, client=_FailingClient(boom))

    assert "quota exceeded" in str(exc.value)
    assert exc.value.__cause__ is boom


def test_service_error_from_client_passes_through() -> None:
    original = ServiceError("The insight model returned an empty answer")

    with pytest.raises(ServiceError) as exc:
        ask_sales_insights("What sells best?", PRODUCTS, SALES, client=_FailingClient(original))

    assert exc.value is original


def test_gemini_client_uses_configured_model(monkeypatch) -> None:
    calls = []

    class _FakeModels:
        def generate_content(self, model, contents):
            calls.append((model, contents))
            return SimpleNamespace(text="42 sales")

    class _FakeGenaiClient:
        def __init__(self, api_key):
            self.api_key = api_key
            self.models = _FakeModels()

    monkeypatch.setattr(insight_service.genai, "Client", _FakeGenaiClient)

    answer = ask_sales_insights(
        "How many sales?",
        PRODUCTS,
        SALES,
        settings=Settings(gemini_api_key="key", gemini_model="gemini-test"),
    )

    assert answer == "42 sales"
    assert calls[0][0] == "gemini-test"
    assert "How many sales?" in calls[0][1]


def test_gemini_client_empty_answer(monkeypatch) -> None:
    class _FakeGenaiClient:
        def __init__(self, api_key):
            self.models = SimpleNamespace(generate_content=lambda model, contents: SimpleNamespace(text=None))

    monkeypatch.setattr(insight_service.genai, "Client", _FakeGenaiClient)

    with pytest.raises(ServiceError):
        GeminiInsightClient("key").generate("prompt")
