"""
Auth module: JWT creation/validation and the get_session FastAPI dependency.

Each HTTP request gets its own Session. A valid, unrevoked bearer token restores
the patient or caregiver identity it was issued for; anything else (no header,
bad signature, expired, revoked) yields an anonymous Session, and the service
layer's `require()` turns that into NotAuthenticated where it matters.
"""

import time
import uuid
from typing import Optional
from jose import jwt, JWTError
from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from scheduler.config import get_settings
from scheduler.database import get_db
from scheduler.models.revoked_token import RevokedToken
from scheduler.session import Identity, Role, Session

ALGORITHM = "HS256"


def create_token(identity: Identity) -> str:
    """Create a signed JWT for the given identity."""
    settings = get_settings()
    payload = {
        "sub": identity.username,
        "role": identity.role.value,
        "jti": uuid.uuid4().hex,
        "exp": int(time.time()) + settings.jwt_expire_seconds,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[tuple[Identity, str]]:
    """Decode and validate a JWT. Returns (identity, jti), or None if invalid/expired."""
    try:
        settings = get_settings()
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[ALGORITHM])
        identity = Identity(role=Role(payload["role"]), username=payload["sub"])
        return identity, payload["jti"]
    except (JWTError, KeyError, ValueError):
        return None


async def revoke_token(db: AsyncSession, session: Session) -> None:
    """Invalidate the token behind this session; used by logout."""
    if session.token_id and session.identity:
        db.add(RevokedToken(jti=session.token_id, username=session.identity.username))
        await db.flush()


async def get_session(request: Request, db: AsyncSession = Depends(get_db)) -> Session:
    """
    FastAPI dependency. Extracts the JWT from the Authorization header and
    rebuilds the caller's Session from it.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        return Session()
    decoded = decode_token(auth_header[7:])
    if decoded is None:
        return Session()

    identity, jti = decoded
    revoked = await db.scalar(select(RevokedToken.jti).where(RevokedToken.jti == jti))
    if revoked is not None:
        return Session()
    return Session(identity, token_id=jti)
