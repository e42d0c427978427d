"""Main FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from multitool_api.config import settings
from multitool_api.api.download_routes import router as download_router
from multitool_api.api.meta_routes import router as meta_router
from multitool_api.api.tools_routes import router as tools_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Multitool API")

# Configure CORS to allow requests from the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(meta_router)
app.include_router(download_router)
app.include_router(tools_router)


def run() -> None:
    """Run the API with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("multitool_api.main:app", host="0.0.0.0", port=settings.PORT)
