"""
Domain: error kinds surfaced by checkout, inventory and insight operations.

Callers distinguish failures by type:
- InvalidRequest: malformed input; fix the input before retrying.
- ProductNotFound: referenced product does not exist.
- InsufficientStock: cart asks for more units than are available.
- Conflict: a concurrent write was detected by the store; safe to retry
  the whole operation after re-reading current state.
- ServiceError: an external collaborator failed; never blocks the core.
"""

from __future__ import annotations

from typing import Optional


class PosError(Exception):
    """Base class for all point-of-sale domain errors."""

    pass


class InvalidRequest(PosError):
    pass


class ProductNotFound(PosError):
    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class InsufficientStock(PosError):
    def __init__(self, product_id: str, available: int, requested: int, name: Optional[str] = None) -> None:
        self.product_id = product_id
        self.available = available
        self.requested = requested
        self.name = name
        label = name or product_id
        super().__init__(
            f"Not enough stock for {label}: requested {requested}, only {available} available"
        )


class Conflict(PosError):
    def __init__(self, message: str, product_id: Optional[str] = None) -> None:
        self.product_id = product_id
        super().__init__(message)


class ServiceError(PosError):
    pass


__all__ = [
    "PosError",
    "InvalidRequest",
    "ProductNotFound",
    "InsufficientStock",
    "Conflict",
    "ServiceError",
]
