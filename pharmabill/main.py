from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from pharmabill.api.routes import health
from pharmabill.api.v1 import v1_router
from pharmabill.api.v1.envelope import error
from pharmabill.config.settings import settings
from pharmabill.core.db import engine
from pharmabill.core.logging_config import setup_logging
from pharmabill.domain.errors import ValidationError
from pharmabill.infrastructure.db.base import Base
from pharmabill.infrastructure.db import models  # noqa: F401  registers tables on Base

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)


@app.on_event("startup")
async def startup():
    setup_logging()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error(exc.message),
    )


app.include_router(health.router)
app.include_router(v1_router)
