"""
Performance Monitoring and Logging Middleware
"""
from flask import request, g
import time
import logging
import json
import traceback as tb

logger = logging.getLogger(__name__)

SENSITIVE_FIELDS = {'password', 'confirm_password', 'confirmPassword', 'token', 'secret', 'current_password'}
SLOW_REQUEST_SECONDS = 1.0


class PerformanceMonitor:
    """Track request performance metrics"""

    def __init__(self):
        self.reset()

    def reset(self):
        self.metrics = {
            'total_requests': 0,
            'slow_requests': 0,
            'failed_requests': 0,
            'endpoint_stats': {}
        }

    def record_request(self, endpoint: str, duration: float, status_code: int):
        """Record request metrics"""
        self.metrics['total_requests'] += 1

        stats = self.metrics['endpoint_stats'].setdefault(endpoint, {
            'count': 0,
            'total_time': 0,
            'avg_time': 0,
            'slow_count': 0
        })
        stats['count'] += 1
        stats['total_time'] += duration
        stats['avg_time'] = stats['total_time'] / stats['count']

        if duration > SLOW_REQUEST_SECONDS:
            self.metrics['slow_requests'] += 1
            stats['slow_count'] += 1

        if status_code >= 400:
            self.metrics['failed_requests'] += 1

    def get_stats(self):
        return self.metrics


performance_monitor = PerformanceMonitor()


def redact(body):
    if not isinstance(body, dict):
        return body
    return {k: '***' if k in SENSITIVE_FIELDS else v for k, v in body.items()}


def request_logger_middleware(app):
    """
    Log every request and response, and feed the performance monitor
    """
    @app.before_request
    def before_request():
        g.start_time = time.time()

        logger.info(
            f"Incoming: {request.method} {request.path} | "
            f"IP: {request.remote_addr}"
        )

        # Request bodies are logged at debug level only, with secrets redacted
        if request.method in ('POST', 'PUT', 'PATCH') and request.is_json:
            body = request.get_json(silent=True)
            if body is not None:
                logger.debug(f"Request body: {json.dumps(redact(body), default=str)}")

    @app.after_request
    def after_request(response):
        start_time = g.pop('start_time', None)
        if start_time is not None:
            duration = time.time() - start_time

            logger.info(
                f"Response: {request.method} {request.path} | "
                f"Status: {response.status_code} | "
                f"Duration: {duration:.3f}s"
            )
            if duration > SLOW_REQUEST_SECONDS:
                logger.warning(f"SLOW REQUEST: {request.method} {request.path} took {duration:.3f}s")

            response.headers['X-Response-Time'] = f"{duration:.3f}s"

            performance_monitor.record_request(
                endpoint=request.endpoint or request.path,
                duration=duration,
                status_code=response.status_code
            )

        return response


class ErrorTracker:
    """Keep the most recent unexpected errors for the admin metrics endpoint"""

    def __init__(self, max_errors=100):
        self.errors = []
        self.max_errors = max_errors

    def log_error(self, error: Exception):
        self.errors.append({
            'timestamp': time.time(),
            'type': type(error).__name__,
            'message': str(error),
            'traceback': tb.format_exc(),
            'request': {
                'method': request.method if request else None,
                'path': request.path if request else None,
                'ip': request.remote_addr if request else None
            }
        })

        if len(self.errors) > self.max_errors:
            self.errors = self.errors[-self.max_errors:]

    def get_recent_errors(self, limit: int = 10):
        return self.errors[-limit:]

    def get_error_stats(self):
        by_type = {}
        for error in self.errors:
            by_type[error['type']] = by_type.get(error['type'], 0) + 1

        return {
            'total_errors': len(self.errors),
            'by_type': by_type,
            'recent_errors': [
                {k: v for k, v in e.items() if k != 'traceback'}
                for e in self.get_recent_errors(5)
            ]
        }


error_tracker = ErrorTracker()
