import logging

from fastapi import FastAPI
from shortlink_app.config import settings
from shortlink_app.database.connection import engine, Base
from shortlink_app.errors import register_exception_handlers
from shortlink_app.api.v1 import shorten, admin, redirect

# Import models to ensure they're registered with Base
from shortlink_app.models import UrlMapping

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener with a cached redirect path, built with FastAPI",
    debug=settings.debug
)

register_exception_handlers(app)


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "ok", "environment": settings.environment}


######## Include routers
app.include_router(shorten.router, prefix="/api")
app.include_router(admin.router, prefix="/api")
# Catch-all /{short_code} goes last
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port)
