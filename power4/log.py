"""Logging setup and the per-request access log middleware."""

import logging
import sys
import time

from fastapi import Request

logger = logging.getLogger("power4.access")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
    # access lines come from log_requests
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded
    if request.client is None:
        return "-"
    return f"{request.client.host}:{request.client.port}"


async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status = 500
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        logger.info(
            "remote=%s method=%s path=%s status=%d duration=%.1fms",
            client_address(request),
            request.method,
            request.url.path,
            status,
            (time.perf_counter() - start) * 1000,
        )
