# backend/bookshop/main.py

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookshop.api import (
    auth, branch_api, cart_api, category_api, favorites_api, feedback_api,
    offer_api, order_api, product_api, reservation_api, users_api,
)
from bookshop.core.logging import setup_logging
from bookshop.database import Database
from bookshop.models.user import UserType
from bookshop.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def ensure_admin_user(db: Database) -> None:
    """Create the bootstrap admin from ADMIN_EMAIL / ADMIN_PASSWORD when it does not exist yet."""
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        return
    user_repo = UserRepository(db)
    if user_repo.email_exists(email):
        return
    user_repo.create_user(user_email=email, username="Admin User", password=password,
                          user_type=UserType.ADMIN.value)
    logger.info("Bootstrap admin %s created", email)


def _describe_validation_error(exc: RequestValidationError) -> str:
    fields = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        fields.append(".".join(location) or error.get("msg", "request"))
    return "Invalid or missing fields: " + ", ".join(dict.fromkeys(fields))


def create_app(database: Optional[Database] = None) -> FastAPI:
    setup_logging()
    db = database or Database()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.connect()
        db.init_schema()
        ensure_admin_user(db)
        app.state.db = db
        logger.info("Bookshop API started")
        yield
        db.close()
        logger.info("Bookshop API stopped")

    app = FastAPI(title="Bookshop API", version="1.0.0", lifespan=lifespan)

    # Add CORS middleware to allow the storefront to call the API
    origins = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],  # Allow all methods
        allow_headers=["*"],  # Allow all headers
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail},
                            headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                            content={"error": _describe_validation_error(exc)})

    # Include the API routers
    for module in (auth, users_api, product_api, category_api, branch_api, offer_api,
                   cart_api, favorites_api, order_api, feedback_api, reservation_api):
        app.include_router(module.router, prefix="/api/v1")

    @app.get("/")
    def read_root():
        return {"message": "Welcome to the Bookshop API!"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
