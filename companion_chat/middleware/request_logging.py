"""Request logging middleware."""
import time

from fastapi import Request

from companion_chat.utils.logger import request_logger
from companion_chat.utils.metrics import metrics_collector


async def log_requests(request: Request, call_next):
    """Log method, path, status and duration for every request."""
    start = time.perf_counter()
    log = request_logger.bind(method=request.method, path=request.url.path)
    log.debug("request started")

    try:
        response = await call_next(request)
    except Exception:
        log.exception("request failed", duration_ms=round((time.perf_counter() - start) * 1000, 2))
        raise

    elapsed = time.perf_counter() - start
    metrics_collector.request_handled()
    metrics_collector.record_timer("request_seconds", elapsed)
    log.info("request completed", status_code=response.status_code, duration_ms=round(elapsed * 1000, 2))
    return response
