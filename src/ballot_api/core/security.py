"""Credentials for the ballot service: bcrypt password hashes and signed JWTs.

Passwords are hashed with passlib's bcrypt scheme. Tokens are signed with
PyJWT and always carry the user's id as ``sub``; a voter record and a
candidate account share that id, so the authorization layer can find them
from the token alone.

Access tokens also carry ``role`` (admin, voter or candidate), ``type``
"access" and, when known, ``email``. Refresh tokens carry only ``sub``
and ``type`` "refresh"; the role is re-read from the user row when a new
access token is issued.
"""

from datetime import UTC, datetime, timedelta

import jwt
from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash an account password for storage in ``users.hashed_password``.

    Args:
        password: The plaintext password from signup or the admin CLI.

    Returns:
        The bcrypt hash, salt included.
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a login attempt against the stored hash.

    Args:
        plain_password: The password as submitted to the login endpoint.
        hashed_password: The user's stored bcrypt hash.

    Returns:
        True if the password matches.
    """
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    subject: str,
    role: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_minutes: int = 30,
    email: str | None = None,
) -> str:
    """Issue the short-lived token sent as ``Authorization: Bearer`` on API calls.

    Args:
        subject: The user's id, stored as ``sub``.
        role: The user's role claim, for clients; route guards re-read it from the user row.
        secret_key: Signing key from settings.
        algorithm: JWT signing algorithm.
        expires_minutes: Lifetime in minutes.
        email: Email claim, omitted when None.

    Returns:
        The encoded JWT with ``type`` "access".
    """
    expire = datetime.now(UTC) + timedelta(minutes=expires_minutes)
    payload = {
        "sub": subject,
        "role": role,
        "exp": expire,
        "type": "access",
    }
    if email is not None:
        payload["email"] = email
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def create_refresh_token(
    subject: str,
    secret_key: str,
    algorithm: str = "HS256",
    expires_days: int = 7,
) -> str:
    """Issue the long-lived token exchanged at ``/auth/refresh`` for a new access token.

    Args:
        subject: The user's id, stored as ``sub``.
        secret_key: Signing key from settings.
        algorithm: JWT signing algorithm.
        expires_days: Lifetime in days.

    Returns:
        The encoded JWT with ``type`` "refresh".
    """
    expire = datetime.now(UTC) + timedelta(days=expires_days)
    payload = {
        "sub": subject,
        "exp": expire,
        "type": "refresh",
    }
    return jwt.encode(payload, secret_key, algorithm=algorithm)


def decode_token(
    token: str,
    secret_key: str,
    algorithm: str = "HS256",
) -> dict:
    """Verify a token's signature and expiry and return its claims.

    Callers check ``type`` themselves: the request guard accepts only
    access tokens and the refresh endpoint only refresh tokens.

    Args:
        token: The encoded JWT.
        secret_key: Signing key from settings.
        algorithm: The only algorithm accepted.

    Returns:
        The claims dict (``sub``, ``type``, ``exp`` and, for access tokens, ``role`` and ``email``).

    Raises:
        jwt.ExpiredSignatureError: If the token has expired.
        jwt.InvalidTokenError: If the token is invalid.
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])
