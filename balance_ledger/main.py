import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .api.exceptions import register_exception_handlers
from .api.routes import (
    backup_router,
    dashboard_router,
    router as accounts_router,
    settings_router,
    transaction_router,
)
from .core.config import get_settings
from .core.db import init_db
from .core.dependencies import get_mirror

settings = get_settings()
logging.basicConfig(level=settings.log_level)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield
    if get_mirror.cache_info().currsize:
        get_mirror().close()
        get_mirror.cache_clear()

app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.include_router(accounts_router)
app.include_router(transaction_router)
app.include_router(dashboard_router)
app.include_router(settings_router)
app.include_router(backup_router)
register_exception_handlers(app)

@app.get("/health")
def read_health() -> dict[str, str]:
    return {"status": "ok"}
