"""
ERP Ledger Service: FastAPI application.

This is the entry point for the application.
All routers are registered here under /api, except /health.
"""

import logging

from fastapi import FastAPI

from erp_ledger.config import get_settings
from erp_ledger.logging_config import configure_logging
from erp_ledger.api.health import router as health_router
from erp_ledger.api.general_ledger import router as general_ledger_router
from erp_ledger.api.credit_notes import router as credit_notes_router
from erp_ledger.api.proforma_invoices import router as proforma_router
from erp_ledger.api.payroll import router as payroll_router
from erp_ledger.api.suppliers import router as suppliers_router
from erp_ledger.api.directory import router as directory_router

settings = get_settings()
configure_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "General ledger, credit notes, proforma invoices and payroll "
        "for a small ERP"
    ),
)

# Register routers
app.include_router(health_router)
app.include_router(general_ledger_router, prefix="/api")
app.include_router(credit_notes_router, prefix="/api")
app.include_router(proforma_router, prefix="/api")
app.include_router(payroll_router, prefix="/api")
app.include_router(suppliers_router, prefix="/api")
app.include_router(directory_router, prefix="/api")

logger.info(
    "%s %s started (%s)",
    settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT,
)
