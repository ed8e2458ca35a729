"""
Sales insight service.

Answers free-text questions about sales and inventory by sending a snapshot of
the catalog and sale history to Google Gemini. The answer is advisory only:
no other operation depends on it, and every failure surfaces as ServiceError.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any, List, Optional, Protocol, Sequence

from google import genai

from domain.errors import ServiceError
from domain.product import Product
from domain.sale import SaleRecord
from domain.time import utc_now
from settings import Settings

logger = logging.getLogger(__name__)

_PROMPT_TEMPLATE = """\
System Instruction: You are an expert data analyst for a restaurant named {restaurant}. \
Your task is to answer questions about sales and inventory based ONLY on the JSON data provided below. \
Do not invent any information. If the data is insufficient to answer the question, state that clearly. \
Provide concise, clear answers, and if you are providing a list, format it nicely. \
The current date is {today}.

User Question: "{question}"

Here is the data you MUST use:

Products Data (describes all available products):
{products}

Sales Data (describes all transactions, including items sold, quantities, and timestamps in ISO 8601 format):
{sales}

Based on the data above, please answer the user's question.
"""


class InsightClient(Protocol):
    def generate(self, prompt: str) -> str:
        ...


class GeminiInsightClient:
    """InsightClient backed by the google-genai SDK."""

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash") -> None:
        self._client = genai.Client(api_key=api_key)
        self._model = model

    def generate(self, prompt: str) -> str:
        response = self._client.models.generate_content(model=self._model, contents=prompt)
        text = response.text
        if not text:
            raise ServiceError("The insight model returned an empty answer")
        return text


def _products_snapshot(products: Sequence[Product]) -> List[dict[str, Any]]:
    return [
        {"id": p.product_id, "name": p.name, "category": p.category, "price": str(p.price)}
        for p in products
    ]


def _sales_snapshot(sales: Sequence[SaleRecord]) -> List[dict[str, Any]]:
    return [
        {
            "id": sale.sale_id,
            "items": [
                {"productId": item.product_id, "quantity": item.quantity, "price": str(item.price)}
                for item in sale.items
            ],
            "total": str(sale.total),
            "timestamp": sale.timestamp.isoformat(),
        }
        for sale in sales
    ]


def build_insight_prompt(
    question: str,
    products: Sequence[Product],
    sales: Sequence[SaleRecord],
    today: date,
    restaurant: str = "Zamzama",
) -> str:
    return _PROMPT_TEMPLATE.format(
        restaurant=restaurant,
        today=today.isoformat(),
        question=question,
        products=json.dumps(_products_snapshot(products), indent=2),
        sales=json.dumps(_sales_snapshot(sales), indent=2),
    )


def ask_sales_insights(
    question: str,
    products: Sequence[Product],
    sales: Sequence[SaleRecord],
    *,
    client: Optional[InsightClient] = None,
    settings: Optional[Settings] = None,
    today: Optional[date] = None,
) -> str:
    """
    Ask the insight model a question about the given data.

    Args:
        question: Free-text question from the operator
        products: Catalog snapshot
        sales: Sale history snapshot
        client: Model client; built from settings when omitted
        settings: Used to build the default Gemini client
        today: Date stated in the prompt (default: current UTC date)

    Returns:
        The model's answer text

    Raises:
        ServiceError: empty question, missing API key, or model failure
    """

    question = question.strip()
    if not question:
        raise ServiceError("Please enter a question about your sales or inventory.")

    if client is None:
        if settings is None or not settings.gemini_api_key:
            raise ServiceError(
                "Gemini API key is not configured. Please set the GEMINI_API_KEY environment variable."
            )
        client = GeminiInsightClient(settings.gemini_api_key, settings.gemini_model)

    prompt = build_insight_prompt(question, products, sales, today or utc_now().date())

    try:
        return client.generate(prompt)
    except ServiceError:
        raise
    except Exception as e:
        logger.error(
            f"Error fetching insights: {e}",
            extra={"product_count": len(products), "sale_count": len(sales)},
        )
        raise ServiceError(f"An error occurred while analyzing the data: {e}") from e


__all__ = ["InsightClient", "GeminiInsightClient", "build_insight_prompt", "ask_sales_insights"]
