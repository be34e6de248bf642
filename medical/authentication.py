"""
Authentication classes used by the API.

Bearer JWTs (``Authorization: Bearer <access>``) are the primary
credential.  The legacy DRF token is still accepted under the ``Token``
keyword so older portal builds keep working.  Keeping these classes in
their own module avoids circular imports when the REST framework loads
authentication classes during initialization.
"""
from __future__ import annotations

from rest_framework import authentication
from rest_framework_simplejwt.authentication import JWTAuthentication


class BearerJWTAuthentication(JWTAuthentication):
    """Simple JWT authentication with a stable import path for settings."""

    www_authenticate_realm = 'campushealth'


class TokenAuthentication(authentication.TokenAuthentication):
    """Legacy token authentication using the ``Token`` keyword."""

    keyword = 'Token'
