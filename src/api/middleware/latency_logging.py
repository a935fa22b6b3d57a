"""Request latency logging middleware for performance monitoring."""

import logging
import time
from collections import deque
from typing import Callable

from fastapi import Request, Response

logger = logging.getLogger(__name__)

# Thresholds for log levels (in milliseconds)
SLOW_REQUEST_THRESHOLD_MS = 1000
VERY_SLOW_REQUEST_THRESHOLD_MS = 3000

QUIET_PATHS = frozenset({"/health", "/health/ready"})


class LatencyStats:
    """In-memory ring buffer of recent request latencies.

    Reported by the liveness endpoint.
    """

    def __init__(self, max_samples: int = 1000) -> None:
        self._samples: deque[float] = deque(maxlen=max_samples)

    def record(self, latency_ms: float) -> None:
        """Record a latency sample."""
        self._samples.append(latency_ms)

    def __len__(self) -> int:
        return len(self._samples)

    def get_stats(self) -> dict[str, float]:
        """Get count, mean and percentiles of the sampled latencies."""
        if not self._samples:
            return {
                "total_requests": 0,
                "avg_latency_ms": 0,
                "p50_latency_ms": 0,
                "p95_latency_ms": 0,
                "p99_latency_ms": 0,
            }

        latencies = sorted(self._samples)
        total = len(latencies)

        def percentile(fraction: float) -> float:
            return round(latencies[min(int(total * fraction), total - 1)], 2)

        return {
            "total_requests": total,
            "avg_latency_ms": round(sum(latencies) / total, 2),
            "p50_latency_ms": percentile(0.5),
            "p95_latency_ms": percentile(0.95),
            "p99_latency_ms": percentile(0.99),
        }


_latency_stats: LatencyStats | None = None


def get_latency_stats() -> LatencyStats:
    """Get or create the global latency stats instance."""
    global _latency_stats
    if _latency_stats is None:
        _latency_stats = LatencyStats()
    return _latency_stats


async def latency_logging_middleware(request: Request, call_next: Callable) -> Response:
    """Log method, path, status and latency of every request.

    Slow requests are escalated to warning (over 1s) and error (over 3s).
    Health probes are only logged at debug level and are not sampled.

    Args:
        request: The incoming request.
        call_next: The next middleware/handler in the chain.

    Returns:
        Response: The response from the handler.
    """
    start_time = time.perf_counter()
    method = request.method
    path = request.url.path
    is_health_check = path in QUIET_PATHS

    response = None
    try:
        response = await call_next(request)
        return response
    finally:
        latency_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code if response else 500
        log_msg = "%s %s - %d - %.2fms"
        log_args = (method, path, status_code, latency_ms)

        if is_health_check:
            logger.debug(log_msg, *log_args)
        else:
            get_latency_stats().record(latency_ms)

            if status_code >= 500:
                logger.error(log_msg, *log_args)
            elif latency_ms > VERY_SLOW_REQUEST_THRESHOLD_MS:
                logger.error("VERY SLOW REQUEST: " + log_msg, *log_args)
            elif latency_ms > SLOW_REQUEST_THRESHOLD_MS:
                logger.warning("SLOW REQUEST: " + log_msg, *log_args)
            elif status_code >= 400:
                logger.warning(log_msg, *log_args)
            else:
                logger.info(log_msg, *log_args)
