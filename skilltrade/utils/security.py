import logging
from typing import Optional

from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from skilltrade import models
from skilltrade.config import settings
from skilltrade.crud import user as user_crud
from skilltrade.database import get_db

logger = logging.getLogger(__name__)


# ==========================
# AUTH CONFIG
# ==========================

# Tokens are issued by the external identity provider; tokenUrl is only
# advertised in the OpenAPI document.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")

CLAIM_FIELDS = ("email", "first_name", "last_name", "profile_image_url")


# ==========================
# JWT TOKEN
# ==========================

def decode_access_token(token: str) -> dict:
    """Return the verified claims; raises JWTError on a bad or expired token."""
    payload = jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.ALGORITHM]
    )
    if not payload.get("sub"):
        raise JWTError("Token has no subject")
    return payload


# ==========================
# AUTH HELPERS
# ==========================

def resolve_user_from_token(db: Session, token: str) -> Optional[models.User]:
    """
    Verify a bearer token and return the mirrored user row.

    The first time an identity is seen its claims are copied into ``users``
    so swaps, sessions and messages can reference it.
    """
    try:
        payload = decode_access_token(token)
    except JWTError:
        return None

    claims = {field: payload.get(field) for field in CLAIM_FIELDS if payload.get(field)}
    user = user_crud.get_user(db, payload["sub"])
    if user is None:
        user = user_crud.upsert_user(db, user_id=payload["sub"], **claims)
        db.commit()
        logger.info("Mirrored new identity %s", user.id)

    if not user.is_active:
        return None
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user = resolve_user_from_token(db, token)
    if user is None:
        raise credentials_exception

    return user
