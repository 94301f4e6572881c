"""
Scorer authentication - bearer tokens for the admins who enter ball outcomes.

Tokens are issued out of band (``cli.py issue-token``) and carry the admin id
in ``sub``. Read endpoints and the live feed never ask for one.
"""
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from livescore.config import settings
from livescore.database import get_db
from livescore.models.admin import Admin


security = HTTPBearer()


def create_access_token(admin_id: int, expires_minutes: Optional[int] = None) -> str:
    """Sign a scoring token for an admin, valid for ACCESS_TOKEN_EXPIRE_MINUTES unless overridden"""
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.utcnow() + timedelta(minutes=minutes)
    payload = {
        "sub": str(admin_id),
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, token_type: str = "access") -> Optional[int]:
    """Admin id named by a scoring token, or None if it is expired, tampered or of another type"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        if payload.get("type") != token_type:
            return None
        admin_id = payload.get("sub")
        if admin_id is None:
            return None
        return int(admin_id)
    except (JWTError, ValueError):
        return None


def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> Admin:
    """
    Resolve the admin behind the request's bearer token.

    Toss, status, innings start and ball routes depend on this; a token for
    an admin account that no longer exists is refused like a forged one.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    admin_id = verify_token(credentials.credentials, "access")
    if admin_id is None:
        raise credentials_exception

    admin = db.get(Admin, admin_id)
    if admin is None:
        raise credentials_exception

    return admin
