import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from freezer.config import Settings, get_settings
from freezer.core.errors import (
    AuthError,
    CheckoutConflictError,
    CheckoutNotFoundError,
    DuplicateError,
    FreezerError,
    ItemNotFoundError,
    PermissionDeniedError,
    StoreError,
    StoreTimeoutError,
    UserNotFoundError,
    ValidationError,
)
from freezer.core.logging import setup_logging
from freezer.database import Base, engine
from freezer.models import import_all_models
from freezer.routers import (
    checkouts_router,
    health_router,
    inventory_router,
    locations_router,
    users_router,
)

logger = logging.getLogger(__name__)

# Checked in order; subclasses before their bases.
_ERROR_STATUS = (
    (ValidationError, 422),
    (DuplicateError, 409),
    (CheckoutConflictError, 409),
    (ItemNotFoundError, 404),
    (CheckoutNotFoundError, 404),
    (UserNotFoundError, 404),
    (AuthError, 401),
    (PermissionDeniedError, 403),
    (StoreTimeoutError, 504),
    (StoreError, 500),
)


def status_for(exc: FreezerError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def freezer_error_handler(request: Request, exc: FreezerError):
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    content = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    return JSONResponse(status_code=status_code, content=content)


setup_logging()
settings: Settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import_all_models()
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    new_app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    new_app.add_exception_handler(FreezerError, freezer_error_handler)

    new_app.include_router(health_router)
    new_app.include_router(inventory_router)
    new_app.include_router(checkouts_router)
    new_app.include_router(locations_router)
    new_app.include_router(users_router)
    return new_app


app = create_app()


__all__ = ["app", "create_app", "status_for"]
