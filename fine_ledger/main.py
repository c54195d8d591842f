"""
Traffic Fine Ledger: FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fine_ledger.config import get_settings
from fine_ledger.api.health import router as health_router
from fine_ledger.api.violations import router as violations_router
from fine_ledger.api.payments import router as payments_router

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Traffic fine payment ledger and status reconciliation",
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests in the same shape as ledger errors."""
    errors = exc.errors()
    message = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in errors
    )
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({
            "detail": {"kind": "ValidationError", "message": message},
        }),
    )


# Register routers
app.include_router(health_router)
app.include_router(violations_router)
app.include_router(payments_router)
