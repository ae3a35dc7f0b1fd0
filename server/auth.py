"""Authentication and security utilities."""

import base64
import binascii
import hashlib
import uuid
from typing import Optional, Tuple

from common.constants import AUTH_KEY_PREFIX
from common.exceptions import UnauthorizedError


def hash_password(password: str) -> str:
    """
    Hash a password with SHA-1.

    Kept for compatibility with the hashes already stored for existing
    accounts.

    Args:
        password: Plain text password to hash

    Returns:
        Hex digest of the password
    """
    return hashlib.sha1(password.encode('utf-8')).hexdigest()


def verify_password(password: str, password_hash: str) -> bool:
    return hash_password(password) == password_hash


def generate_token() -> str:
    """
    Generate a new opaque session token.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def token_key(token: str) -> str:
    """Token store key under which a session token maps to its user id."""
    return f"{AUTH_KEY_PREFIX}{token}"


def parse_basic_credentials(authorization: Optional[str]) -> Tuple[str, str]:
    """
    Extract email and password from a Basic Authorization header.

    Args:
        authorization: Authorization header value (format: "Basic <base64(email:password)>")

    Returns:
        (email, password) tuple

    Raises:
        UnauthorizedError: If the header is missing or malformed
    """
    if not authorization:
        raise UnauthorizedError()

    parts = authorization.split(' ')
    if len(parts) != 2 or parts[0] != 'Basic':
        raise UnauthorizedError()

    try:
        decoded = base64.b64decode(parts[1], validate=True).decode('utf-8')
    except (binascii.Error, UnicodeDecodeError):
        raise UnauthorizedError()

    email, separator, password = decoded.partition(':')
    if not separator:
        raise UnauthorizedError()
    return email, password
