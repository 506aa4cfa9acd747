"""FastAPI dependencies for database sessions, authentication and audit context."""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import jwt
from fastapi import Depends, Header, Request
from jwt import PyJWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.account import AppRole, User, UserRole
from ..models.activity_log import IP_ADDRESS_MAX_LENGTH, USER_AGENT_MAX_LENGTH
from .config import settings
from .database import get_db
from .exceptions import AdminRequiredError, AuthenticationError, ValidationError
from .middleware import get_client_ip


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller and whether they hold the admin role."""

    user_id: UUID
    email: str
    is_admin: bool


@dataclass(frozen=True)
class RequestContext:
    """Where a request came from, recorded on activity log entries."""

    ip_address: str
    user_agent: str


def _extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the raw token from an Authorization header or raise 401."""
    if not authorization:
        raise AuthenticationError("Unauthorized")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthenticationError("Invalid authorization header format")
    return token.strip()


def decode_access_token(token: str) -> UUID:
    """
    Validate a bearer token and return its subject.

    Args:
        token: Encoded JWT

    Returns:
        UUID: The user id carried in the ``sub`` claim

    Raises:
        AuthenticationError: If the token is invalid, expired or has no usable subject
    """
    decode_options = {"require": ["sub"]}
    if not settings.jwt_audience:
        decode_options["verify_aud"] = False

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=["HS256"],
            audience=settings.jwt_audience or None,
            options=decode_options,
        )
    except PyJWTError as e:
        raise AuthenticationError(f"Token validation failed: {e}") from e

    try:
        return UUID(str(payload["sub"]))
    except ValueError as e:
        raise AuthenticationError("Invalid token payload") from e


async def is_admin(db: AsyncSession, user_id: UUID) -> bool:
    """Check the role table for an admin grant."""
    stmt = select(UserRole.id).where(
        UserRole.user_id == user_id,
        UserRole.role == AppRole.ADMIN.value,
    )
    result = await db.execute(stmt)
    return result.first() is not None


async def _resolve_user(db: AsyncSession, token: str) -> CurrentUser:
    user_id = decode_access_token(token)

    user = await db.get(User, user_id)
    if user is None:
        raise AuthenticationError("Unauthorized")

    return CurrentUser(
        user_id=user.id,
        email=user.email,
        is_admin=await is_admin(db, user.id),
    )


async def get_current_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """
    Authentication dependency that requires a valid bearer token.

    Raises:
        AuthenticationError: If the header is missing, the token is invalid,
            or the account no longer exists
    """
    token = _extract_bearer_token(authorization)
    return await _resolve_user(db, token)


async def get_optional_user(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    db: AsyncSession = Depends(get_db),
) -> Optional[CurrentUser]:
    """Resolve the caller when a valid bearer token is sent; anonymous otherwise."""
    if not authorization or not authorization.lower().startswith("bearer "):
        return None

    try:
        return await _resolve_user(db, _extract_bearer_token(authorization))
    except AuthenticationError:
        return None


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Authorization dependency for admin-only operations."""
    if not current_user.is_admin:
        raise AdminRequiredError()
    return current_user


async def get_request_context(request: Request) -> RequestContext:
    """Client address and user agent for the audit trail, cut to fit the log columns."""
    return RequestContext(
        ip_address=get_client_ip(request)[:IP_ADDRESS_MAX_LENGTH],
        user_agent=request.headers.get("User-Agent", "unknown")[:USER_AGENT_MAX_LENGTH],
    )


async def get_idempotency_key(
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key")
) -> Optional[str]:
    """
    Extract and validate the optional Idempotency-Key header.

    Raises:
        ValidationError: If the key is longer than 255 characters or blank
    """
    if idempotency_key is None:
        return None

    idempotency_key = idempotency_key.strip()
    if not idempotency_key or len(idempotency_key) > 255:
        raise ValidationError("Idempotency key must be between 1 and 255 characters")
    return idempotency_key


# Reusable dependency markers
DatabaseSession = Depends(get_db)
RequiredAuth = Depends(get_current_user)
OptionalAuth = Depends(get_optional_user)
AdminAuth = Depends(require_admin)
AuditContext = Depends(get_request_context)
IdempotencyKey = Depends(get_idempotency_key)
