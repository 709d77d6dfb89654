"""
Shared Constants Module.

Common constants used across the court booking services.
"""

# =============================================================================
# SYSTEM CONSTANTS
# =============================================================================

# API Version
API_VERSION = "v1"
API_PREFIX = f"api/{API_VERSION}/"

# Cache TTL (seconds)
CACHE_TTL_MEDIUM = 300  # 5 minutes

# Cache key prefixes
CACHE_PREFIX_OPERATING_HOURS = "operating_hours"


# =============================================================================
# REQUEST HEADERS
# =============================================================================

HEADER_TENANT_ID = "X-Tenant-ID"
HEADER_REQUEST_ID = "X-Request-ID"
