"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
Business validation (empty carts, negative prices, stock checks) happens in the
services so the same rules apply to every caller; these models only check shape.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.product import Product
from domain.sale import SaleRecord
from services.reporting_service import ReportSnapshot


# ============================================================================
# Product Models
# ============================================================================

class ProductResponse(BaseModel):
    """Single catalog product."""
    id: str
    name: str
    category: str
    price: Decimal
    stock: int
    image_url: str

    class Config:
        json_schema_extra = {
            "example": {
                "id": "p1",
                "name": "Hummus Platter",
                "category": "Appetizer",
                "price": "8.50",
                "stock": 50,
                "image_url": "https://picsum.photos/seed/hummus/400"
            }
        }

    @classmethod
    def from_domain(cls, product: Product) -> "ProductResponse":
        return cls(
            id=product.product_id,
            name=product.name,
            category=product.category,
            price=product.price,
            stock=product.stock,
            image_url=product.image_url,
        )


class ProductRequest(BaseModel):
    """Complete product state for create and full-overwrite update."""
    name: str
    category: str
    price: Decimal
    stock: int

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Mint Lemonade",
                "category": "Drinks",
                "price": "4.50",
                "stock": 100
            }
        }


# ============================================================================
# Sale Models
# ============================================================================

class SaleItemModel(BaseModel):
    """One cart line, with the unit price shown to the operator."""
    product_id: str
    quantity: int
    price: Decimal = Field(..., description="Unit price at time of sale")


class CheckoutRequest(BaseModel):
    """Request to commit a cart as a sale."""
    items: List[SaleItemModel]

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"product_id": "p1", "quantity": 2, "price": "8.50"},
                    {"product_id": "p10", "quantity": 1, "price": "4.50"}
                ]
            }
        }


class SaleResponse(BaseModel):
    """Committed sale."""
    id: str
    items: List[SaleItemModel]
    total: Decimal
    timestamp: datetime

    @classmethod
    def from_domain(cls, sale: SaleRecord) -> "SaleResponse":
        return cls(
            id=sale.sale_id,
            items=[
                SaleItemModel(product_id=item.product_id, quantity=item.quantity, price=item.price)
                for item in sale.items
            ],
            total=sale.total,
            timestamp=sale.timestamp,
        )


class QuoteResponse(BaseModel):
    """Cart subtotal without committing."""
    subtotal: Decimal
    total_items: int


# ============================================================================
# Report Models
# ============================================================================

class DailySalesModel(BaseModel):
    label: str
    sales: int
    revenue: Decimal


class TopSellerModel(BaseModel):
    product_id: str
    name: str
    quantity: int


class ReportResponse(BaseModel):
    """Sales report for one reference day."""
    reference_date: date
    series_mode: str
    sales_today: int
    revenue_today: Decimal
    daily_series: List[DailySalesModel]
    top_sellers: List[TopSellerModel]
    low_stock: List[ProductResponse]

    @classmethod
    def from_domain(cls, snapshot: ReportSnapshot, series_mode: str) -> "ReportResponse":
        return cls(
            reference_date=snapshot.reference_date,
            series_mode=series_mode,
            sales_today=snapshot.sales_today,
            revenue_today=snapshot.revenue_today,
            daily_series=[
                DailySalesModel(label=entry.label, sales=entry.sales, revenue=entry.revenue)
                for entry in snapshot.daily_series
            ],
            top_sellers=[
                TopSellerModel(product_id=seller.product_id, name=seller.name, quantity=seller.quantity)
                for seller in snapshot.top_sellers
            ],
            low_stock=[ProductResponse.from_domain(product) for product in snapshot.low_stock],
        )


# ============================================================================
# Insight Models
# ============================================================================

class InsightRequest(BaseModel):
    question: str = Field(..., description="Free-text question about sales or inventory")

    class Config:
        json_schema_extra = {
            "example": {"question": "What were the top 3 best-selling items last week?"}
        }


class InsightResponse(BaseModel):
    """Answer from the insight assistant, or a non-blocking error message."""
    answer: Optional[str] = None
    error: Optional[str] = None


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    status_code: int

    class Config:
        json_schema_extra = {
            "example": {
                "error": "InsufficientStock",
                "detail": "Not enough stock for Lamb Kebabs: requested 3, only 1 available",
                "status_code": 409
            }
        }
