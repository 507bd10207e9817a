from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from sqlalchemy import text
from nestly.config import settings
from nestly.database.connection import close_db, engine
from nestly.controllers.auth_controller import router as auth_router
from nestly.controllers.google_auth_controller import router as google_auth_router
from nestly.controllers.listing_controller import router as listing_router
from nestly.controllers.admin_controller import router as admin_router
from nestly.controllers.user_controller import router as user_router
from nestly.controllers.saved_controller import router as saved_router
from nestly.controllers.review_controller import router as review_router
from nestly.controllers.chat_controller import router as chat_router
from nestly.controllers.upload_controller import router as upload_router
from nestly.controllers.stripe_controller import router as stripe_router
from nestly.utils.errors import error_response
import logging
import time

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all incoming requests"""
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        logger.info(f"Request: {request.method} {request.url.path} from {client_ip}")
        if request.url.query:
            logger.debug(f"Query: {request.url.query}")

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(f"Response: {response.status_code} for {request.method} {request.url.path} ({process_time:.3f}s)")

        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Test database connection on startup (non-blocking - don't fail startup)
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except Exception as e:
        logger.warning(f"Database connection failed on startup: {str(e)}")
        logger.warning("App will continue, but database-dependent features may not work")

    yield

    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database: {str(e)}")


app = FastAPI(
    title="Nestly API",
    description="Real-estate marketplace: listings, moderation, saved listings, reviews, support chat and checkout",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response("Internal server error", exc)


app.include_router(auth_router, prefix="/api")
app.include_router(google_auth_router, prefix="/api")
app.include_router(listing_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(saved_router, prefix="/api")
app.include_router(review_router, prefix="/api")
app.include_router(chat_router, prefix="/api")
app.include_router(upload_router, prefix="/api")
app.include_router(stripe_router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Nestly API", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
