from functools import wraps
import inspect
import time
import logging
from typing import Callable, Any

from prometheus_client import CollectorRegistry, Counter, Histogram

logger = logging.getLogger(__name__)

# Initialize metrics registry
registry = CollectorRegistry()

SEARCH_REQUESTS = Counter(
    "card_search_requests_total",
    "Card searches answered, by the source that produced the results",
    ["source"],
    registry=registry,
)

PRIMARY_STORE_FAILURES = Counter(
    "card_search_primary_failures_total",
    "Primary store queries that raised and were answered by the fallback",
    registry=registry,
)

METHOD_DURATION = Histogram(
    "card_search_method_duration_seconds",
    "Duration of monitored service methods",
    ["method", "status"],
    registry=registry,
)


def _record(method_name: str, start_time: float, error: Exception = None):
    duration = time.time() - start_time
    status = "error" if error else "success"
    METHOD_DURATION.labels(method=method_name, status=status).observe(duration)
    extra = {
        "duration": f"{duration:.2f}s",
        "status": status,
        "method": method_name,
    }
    if error:
        logger.error(f"Method {method_name} failed: {str(error)}", extra={**extra, "error": str(error)})
    else:
        logger.debug(f"Method {method_name} completed", extra=extra)


def monitor_method(method_name: str):
    """Decorator to time a method, log the outcome and record it in Prometheus"""

    def decorator(func: Callable) -> Callable:
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs) -> Any:
                start_time = time.time()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _record(method_name, start_time, e)
                    raise
                _record(method_name, start_time)
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _record(method_name, start_time, e)
                raise
            _record(method_name, start_time)
            return result

        return wrapper

    return decorator
