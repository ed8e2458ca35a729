"""
Restaurant POS API - Main Application.

FastAPI application with CORS enabled for frontend communication.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from settings import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Restaurant POS API",
    description="REST API for checkout, inventory management and sales reporting",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# The POS terminals load the frontend from their own hosts.
# TODO: Restrict origins once the POS frontend has a fixed deployment URL
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Liveness check used by the POS terminals before they go online.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "restaurant-pos-api"
    }


@app.get("/", tags=["Root"])
def root():
    """Links to the docs and the health check."""
    return {
        "message": "Restaurant POS API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Routers
from api.routers import insights, products, reports, sales

app.include_router(products.router, prefix="/api/v1", tags=["Products"])
app.include_router(sales.router, prefix="/api/v1", tags=["Sales"])
app.include_router(reports.router, prefix="/api/v1", tags=["Reports"])
app.include_router(insights.router, prefix="/api/v1", tags=["Insights"])
