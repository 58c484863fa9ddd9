from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from permit_portal.core.security import decode_token
from permit_portal.core.config import settings
from permit_portal.services.auth_service import auth_service
from typing import Dict, Optional
import logging

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def _resolve_user(token: Optional[str]) -> Optional[Dict]:
    if not token:
        return None

    payload = decode_token(token)
    if payload is None:
        logger.warning("Token validation failed")
        return None

    email = payload.get("sub")
    if email is None:
        logger.debug("No 'sub' field in token payload.")
        return None

    return await auth_service.get_user_by_email(email)


# Extracts and validates JWT token to retrieve current authenticated user
async def get_current_user(token: str = Depends(oauth2_scheme)) -> Dict:
    user = await _resolve_user(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


# Same as get_current_user, but an anonymous caller resolves to None
async def get_optional_user(token: Optional[str] = Depends(optional_oauth2_scheme)) -> Optional[Dict]:
    return await _resolve_user(token)


def is_admin_user(user: Dict) -> bool:
    email = (user.get("email") or "").lower()
    return bool(user.get("is_admin")) or email in settings.ADMIN_EMAILS


# Validates that the current user may use the review console
async def get_admin_user(current_user: Dict = Depends(get_current_user)) -> Dict:
    if not is_admin_user(current_user):
        logger.warning("Non-admin %s attempted an admin action", current_user.get("email"))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required"
        )
    return current_user
