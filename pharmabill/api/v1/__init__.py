# pharmabill/api/v1/__init__.py
"""
Versioned API v1: aggregates all sub-routers under ``/api/v1``.

Usage in ``main.py``::

    from pharmabill.api.v1 import v1_router
    app.include_router(v1_router)
"""

from fastapi import APIRouter

from pharmabill.api.v1.routes.counterparties import customers_router, suppliers_router
from pharmabill.api.v1.routes.dashboard import router as dashboard_router
from pharmabill.api.v1.routes.documents import invoices_router, purchases_router
from pharmabill.api.v1.routes.gst_reports import router as gst_reports_router
from pharmabill.api.v1.routes.products import router as products_router
from pharmabill.api.v1.routes.stock import router as stock_router

v1_router = APIRouter(prefix="/api/v1")

# Masters
v1_router.include_router(products_router)
v1_router.include_router(customers_router)
v1_router.include_router(suppliers_router)

# Ledger
v1_router.include_router(invoices_router)
v1_router.include_router(purchases_router)
v1_router.include_router(stock_router)

# Reports
v1_router.include_router(gst_reports_router)
v1_router.include_router(dashboard_router)

__all__ = ["v1_router"]
