import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import router
from app.core.cleanup import TempFileReaper
from app.core.config import settings
from app.core.logging import setup_logging
from app.core.translation import get_translation
from app.core.translation import lang_from_request
from app.models.onboarding import OnboardingValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    reaper = TempFileReaper()
    app.state.reaper = reaper
    if settings.temp_cleanup_enabled:
        reaper.start()
    logger.info("Application started successfully")
    try:
        yield
    finally:
        await reaper.stop()
        logger.info("Application shut down")


app = FastAPI(title="Onboarding API", lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.error(f"HTTP exception: {exc.detail} (status: {exc.status_code})")
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("Request validation failed: %s", exc.errors(), exc_info=False)
    return JSONResponse(
        {"message": "Input validation failed", "errors": exc.errors()},
        status_code=422,
    )


@app.exception_handler(OnboardingValidationError)
async def onboarding_validation_handler(_request: Request, exc: OnboardingValidationError) -> JSONResponse:
    logger.info("Onboarding validation failed: %s", [e.code for e in exc.errors])
    return JSONResponse(
        {
            "message": str(exc),
            "errors": [{"path": e.path, "message": e.message} for e in exc.errors],
        },
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(Exception)
async def unexpected_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error: {exc}", exc_info=True)
    return JSONResponse(
        {"message": get_translation(lang_from_request(request), "internalError"), "error": str(exc)},
        status_code=500,
    )


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> dict[str, str]:
    logger.info("Health check endpoint called")
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)
app.include_router(router)
