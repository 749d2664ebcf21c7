"""
FastAPI middleware for request logging and timing.
"""
import logging
import time

from fastapi import Request

logger = logging.getLogger(__name__)


async def log_requests_middleware(request: Request, call_next):
    """Middleware for request logging and timing"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    # Query strings carry authorization codes; log the path only
    logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")

    return response
