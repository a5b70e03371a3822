"""Storefront - admin backend for a multi-tenant storefront.

Provides account registration, password and Google sign-in, and
access/refresh token sessions.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
