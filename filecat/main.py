# Main application entry point

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from filecat import __version__
from filecat.api.routes import router
from filecat.common.logging_config import setup_logging
from filecat.common.middleware import RequestTrackingMiddleware
from filecat.config.settings import get_settings

settings = get_settings()
setup_logging(settings.log_level, json_format=settings.log_json)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="File Catalog Analysis API",
    description="Schema inference and storage recommendations for uploaded JSON files",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestTrackingMiddleware)

app.include_router(router, prefix="/api/v1")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": "File Catalog Analysis API",
        "version": __version__,
        "status": "running",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.get("/live")
async def liveness():
    """Liveness check endpoint"""
    return {"status": "alive"}


def run():
    uvicorn.run(
        "filecat.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug
    )


if __name__ == "__main__":
    run()
