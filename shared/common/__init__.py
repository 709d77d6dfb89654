# Shared Common Library for the court booking platform
# This package contains shared exceptions, middleware, mixins,
# and other common components used across the services.

__version__ = "1.0.0"

__all__ = [
    '__version__',
]
