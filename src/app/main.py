# src/app/main.py
from __future__ import annotations
import logging
import sys
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from src.app.config import settings
from src.app.domain.errors import RecipeStoreError
from src.app.routers.accounts import router as accounts_router
from src.app.routers.recipes import router as recipes_router

# Plain stdout logging (dev and containers)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Recipe Share API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(accounts_router)
app.include_router(recipes_router)


@app.exception_handler(RecipeStoreError)
async def handle_domain_error(request: Request, exc: RecipeStoreError) -> JSONResponse:
    content = {"message": str(exc)}
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        content = {"message": "Storage error", "error": str(exc)}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body", "errors": [err["msg"] for err in exc.errors()]},
    )


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal server error", "error": str(exc)},
    )


@app.get("/", response_class=PlainTextResponse)
def index():
    return "Welcome to the Recipe Upload API"


@app.get("/health")
def health():
    return {"ok": True}
