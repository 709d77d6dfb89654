# shared/common/middleware.py
"""
Request middleware: request IDs, tenant resolution and access logging.
"""

import uuid
import time
import logging
from typing import Callable, Optional
from django.http import HttpRequest, HttpResponse

from .constants import HEADER_REQUEST_ID, HEADER_TENANT_ID

logger = logging.getLogger(__name__)

HEALTH_PATHS = ('/health/', '/ready/')


class RequestIDMiddleware:
    """
    Tags each request with an ID, reusing the caller's X-Request-ID when sent.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())

        response = self.get_response(request)
        response[HEADER_REQUEST_ID] = request.request_id
        return response


class TenantMiddleware:
    """
    Resolves the facility from the X-Tenant-ID header.

    request.tenant_id is a UUID, or None when the header is missing or
    malformed. Views that need a tenant reject the request themselves.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.tenant_id = self.parse_tenant(request.headers.get(HEADER_TENANT_ID))
        return self.get_response(request)

    @staticmethod
    def parse_tenant(value: Optional[str]) -> Optional[uuid.UUID]:
        if not value:
            return None
        try:
            return uuid.UUID(value.strip())
        except ValueError:
            return None


class LoggingMiddleware:
    """
    Logs one line per completed API request.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path in HEALTH_PATHS:
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - started) * 1000, 2)

        tenant_id = getattr(request, 'tenant_id', None)
        log_method = logger.warning if response.status_code >= 400 else logger.info
        log_method(
            f"{request.method} {request.path} -> {response.status_code}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'duration_ms': duration_ms,
                'tenant_id': str(tenant_id) if tenant_id else None,
                'ip_address': self.get_client_ip(request),
            }
        )

        response['X-Response-Time'] = f"{duration_ms:.2f}ms"
        return response

    def get_client_ip(self, request: HttpRequest) -> str:
        """Extract client IP from request"""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '')
