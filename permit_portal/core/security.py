from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from typing import Optional, Dict, Any
import logging

from permit_portal.core.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

MIN_PASSWORD_LENGTH = 6
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72

TOKEN_ISSUER = "kasupda-permit-portal"
ACCESS_TOKEN_TYPE = "access"

ROLE_APPLICANT = "applicant"
ROLE_REVIEWER = "reviewer"


# Returns the sign-up message for an unacceptable password, or None
def password_problem(password: Optional[str]) -> Optional[str]:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return f"Password must be at most {MAX_PASSWORD_BYTES} bytes."
    return None


# Hashes a sign-up password with bcrypt
def hash_password(password: str) -> str:
    problem = password_problem(password)
    if problem:
        raise ValueError(problem)

    try:
        return pwd_context.hash(password)
    except Exception as e:
        raise ValueError("Failed to hash password") from e


def verify_password(password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(password, hashed_password)
    except Exception as e:
        logger.warning("Password verification error: %s", e)
        return False


# Issues a portal access token; `sub` is the account email
def create_access_token(subject: str, role: str = ROLE_APPLICANT, expires_delta: Optional[timedelta] = None) -> str:
    if not subject:
        raise ValueError("Token subject is required")

    now = datetime.now(timezone.utc)
    claims = {
        "sub": subject,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iss": TOKEN_ISSUER,
        "iat": now,
        "exp": now + (expires_delta or timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)),
    }
    try:
        return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    except Exception as e:
        raise ValueError("Failed to create access token") from e


# Returns the claims of a valid portal access token, otherwise None
def decode_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            issuer=TOKEN_ISSUER,
        )
    except JWTError:
        return None

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        logger.debug("Rejected token of type %r", claims.get("type"))
        return None
    return claims
