"""UX Design Journal - FastAPI server for the journal's public site and admin console."""

import os
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from journal.shared.database import init_db, SessionLocal
from journal.shared.errors import ErrorKind, kind_for_status
from journal.auth.routes import router as auth_router, ensure_admin
from journal.articles.routes import router as articles_router
from journal.articles.public_routes import router as public_router
from journal.articles.service import seed_articles
from journal.ads.routes import router as ads_router
from journal.subscribers.routes import public_router as subscribe_router, admin_router as subscribers_router
from journal.contact.routes import public_router as contact_router, admin_router as contacts_router
from journal.popups.routes import public_router as popup_router, admin_router as popups_router
from journal.ai.routes import router as ai_router
from journal.admin.routes import router as admin_router

DEFAULT_ALLOWED_ORIGINS = "http://localhost:5173,http://localhost:3000"
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ALLOWED_ORIGINS", DEFAULT_ALLOWED_ORIGINS).split(",")
    if origin.strip()
]

app = FastAPI(
    title="UX Design Journal",
    description="Public reader API and admin console for the UX Design Journal",
    version="3.0.0"
)


# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    try:
        init_db()
        db = SessionLocal()
        try:
            ensure_admin(db)
            seed_articles(db)
        finally:
            db.close()
        logging.info("Database initialization completed on startup")
    except Exception as e:
        # Log error but don't crash the app; requests report database errors themselves
        logging.error(f"Database initialization error on startup: {str(e)}")


# Public reader routes
app.include_router(public_router)
app.include_router(subscribe_router)
app.include_router(contact_router)
app.include_router(popup_router)

# Admin routes
app.include_router(auth_router)
app.include_router(articles_router)
app.include_router(ads_router)
app.include_router(subscribers_router)
app.include_router(contacts_router)
app.include_router(popups_router)
app.include_router(ai_router)
app.include_router(admin_router)

# CORS configuration - must be added before exception handlers
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Retry-After"],
)


def _cors_headers(request: Request) -> dict:
    """CORS headers for error responses, which bypass the middleware on unhandled exceptions."""
    headers = {}
    origin = request.headers.get("origin")
    if origin in ALLOWED_ORIGINS:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"
        headers["Access-Control-Allow-Methods"] = "*"
        headers["Access-Control-Allow-Headers"] = "*"
    return headers


def error_response(request: Request, status_code: int, kind: ErrorKind, message: str, headers=None) -> JSONResponse:
    """Every failure is rendered as {"success": false, "message", "error": kind}."""
    response_headers = _cors_headers(request)
    if headers:
        response_headers.update(headers)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": kind.value},
        headers=response_headers
    )


def _detail_message(detail) -> str:
    if isinstance(detail, str):
        return detail
    if isinstance(detail, dict) and "message" in detail:
        return str(detail["message"])
    return str(detail)


def validation_message(errors) -> str:
    """Human message for the first pydantic error of a request."""
    if not errors:
        return "Invalid request."
    error = errors[0]
    message = str(error.get("msg", "Invalid request."))
    # Messages raised from our own validators are already phrased for the client
    if message.startswith("Value error, "):
        return message[len("Value error, "):]
    field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{field}: {message}" if field else message


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """ApiError and plain FastAPI HTTP exceptions."""
    kind = getattr(exc, "kind", None) or kind_for_status(exc.status_code)
    return error_response(request, exc.status_code, kind, _detail_message(exc.detail), exc.headers)


@app.exception_handler(StarletteHTTPException)
async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes and unsupported methods."""
    return error_response(
        request, exc.status_code, kind_for_status(exc.status_code), _detail_message(exc.detail), exc.headers
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are reported as 400 validation errors."""
    return error_response(request, 400, ErrorKind.VALIDATION, validation_message(exc.errors()))


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logging.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return error_response(request, 500, ErrorKind.INTERNAL, "Internal server error")


@app.get("/")
async def root():
    return {"message": "UX Design Journal API is running", "status": "ok"}


@app.get("/health")
async def health():
    return {"status": "healthy"}
