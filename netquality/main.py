"""FastAPI status application for netquality.

Runs the bandwidth sampler for the lifetime of the app and exposes the
committed connection quality and classifier metrics read-only.
"""

import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request

from netquality.config import get_config
from netquality.di_container import NetQualityContainer
from netquality.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager (startup/shutdown).

    Args:
        app: FastAPI application instance

    Yields:
        Control during application lifetime
    """
    config = get_config()
    setup_logging(config)

    logger.info("Starting netquality status service...")
    logger.info(f"Environment: {config.env}")

    container = getattr(app.state, "container", None) or NetQualityContainer(config)
    app.state.container = container

    sampler = container.get_sampler()
    sampler.start_sampling()
    logger.info(f"Sampling every {sampler.interval_ms}ms")

    yield

    logger.info("Shutting down netquality status service...")
    sampler.stop_sampling()
    container.cleanup()
    app.state.container = None
    logger.info("netquality status service stopped")


app = FastAPI(
    title="netquality API",
    version="1.0.0",
    description="Download bandwidth quality classification",
    lifespan=lifespan,
)


@app.get("/api/quality")
async def get_quality(request: Request) -> dict[str, Any]:
    """Get the committed and instantaneous connection quality.

    Returns:
        Dictionary with tier, raw average and sampler state
    """
    container: NetQualityContainer = request.app.state.container
    classifier = container.get_classifier()

    return {
        "quality": classifier.current_quality.value,
        "instantaneous_quality": classifier.get_current_bandwidth_quality().value,
        "download_kbps": classifier.get_download_kbits_per_second(),
        "sampling": container.get_sampler().is_sampling(),
        "timestamp": time.time(),
    }


@app.get("/api/metrics")
async def get_metrics(request: Request) -> dict[str, Any]:
    """Get classifier metrics.

    Returns:
        Dictionary with sample counters, transitions and bandwidth stats
    """
    container: NetQualityContainer = request.app.state.container
    return container.get_metrics().get_snapshot()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint.

    Returns:
        Health status
    """
    return {"status": "healthy", "service": "netquality"}


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(app, host=config.host, port=config.port)
