from fastapi import FastAPI, APIRouter
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.middleware_correlation import CorrelationIdMiddleware
from app.core.logging import setup_logging
from app.core.errors import register_exception_handlers

# Routers
from app.api.routes.books import router as books_router


setup_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Books Catalog API - manage book records and generate descriptions with AI.",
    version="1.0.0",
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
)

# CORS middleware - the catalog client is served from another origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Middlewares
app.add_middleware(CorrelationIdMiddleware)

# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with basic information."""
    return {
        "message": "Welcome to Books Catalog API",
        "version": "1.0.0",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "endpoints": {
            "books": f"{settings.API_PREFIX}/books",
            "search": f"{settings.API_PREFIX}/books/search",
            "chat_ai": f"{settings.API_PREFIX}/books/chat-ai",
        },
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


register_exception_handlers(app)

# Mount routers
api = APIRouter(prefix=settings.API_PREFIX)
api.include_router(books_router)
app.include_router(api)
