import time
import logging
from functools import wraps
from typing import Optional

from prometheus_client import Counter, Histogram, generate_latest
from prometheus_client.core import CollectorRegistry

logger = logging.getLogger(__name__)

# Prometheus Registry
REGISTRY = CollectorRegistry()

service_requests_total = Counter(
    'fleet_service_requests_total',
    'Total service method calls',
    ['status', 'service', 'method'],
    registry=REGISTRY
)

service_duration_seconds = Histogram(
    'fleet_service_duration_seconds',
    'Service method duration in seconds',
    ['service', 'method'],
    buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
    registry=REGISTRY
)


def record_service_call(
    service_name: str,
    method_name: str,
    duration_seconds: float,
    success: bool
):
    """Record a single service call to Prometheus"""
    status = 'success' if success else 'error'

    service_requests_total.labels(
        status=status,
        service=service_name,
        method=method_name
    ).inc()

    service_duration_seconds.labels(
        service=service_name,
        method=method_name
    ).observe(duration_seconds)


def get_prometheus_metrics() -> bytes:
    """Get Prometheus metrics in text format"""
    return generate_latest(REGISTRY)


def track_performance(service_name: Optional[str] = None):
    """
    Decorator to automatically track method performance

    Usage:
    @track_performance(service_name="BusService")
    async def my_method(self, param1, param2):
        # method implementation
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            actual_service_name = service_name or (args[0].__class__.__name__ if args else "Unknown")
            method_name = func.__name__

            start_time = time.perf_counter()
            success = False
            error_type = None

            try:
                result = await func(*args, **kwargs)
                success = True
                return result

            except Exception as e:
                error_type = e.__class__.__name__
                raise

            finally:
                duration_seconds = time.perf_counter() - start_time

                record_service_call(
                    service_name=actual_service_name,
                    method_name=method_name,
                    duration_seconds=duration_seconds,
                    success=success
                )

                logger.info(
                    f"Method executed: {actual_service_name}.{method_name}",
                    extra={
                        'service_name': actual_service_name,
                        'method_name': method_name,
                        'duration_ms': round(duration_seconds * 1000, 3),
                        'success': success,
                        'error_type': error_type
                    }
                )

        return wrapper
    return decorator
