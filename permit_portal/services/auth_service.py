from fastapi import HTTPException, status
from permit_portal.database.models import User
from permit_portal.schemas import UserCreate
from permit_portal.core import hash_password, verify_password, create_access_token, settings
from permit_portal.core.security import ROLE_APPLICANT, ROLE_REVIEWER, password_problem
from typing import Dict, Optional
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


def _user_payload(user: User) -> Dict:
    return {
        "id": str(user.id),
        "email": user.email,
        "full_name": user.full_name,
        "is_admin": bool(user.is_admin) or user.email.lower() in settings.ADMIN_EMAILS,
    }


class AuthService:
    # Register a new applicant account
    @staticmethod
    async def register_user(user_data: UserCreate) -> Dict:
        existing_user = await User.find_one(User.email == user_data.email)

        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        problem = password_problem(user_data.password)
        if problem:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=problem
            )

        try:
            hashed_password = hash_password(user_data.password)
        except ValueError:
            logger.warning("Password hashing failed")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid password format"
            )

        new_user = User(
            email=user_data.email,
            full_name=user_data.full_name,
            phone=user_data.phone,
            hashed_password=hashed_password,
            created_at=datetime.utcnow()
        )

        try:
            await new_user.insert()
            logger.debug("User saved with ID: %s", new_user.id)
        except Exception as e:
            logger.error("User save failed: %s", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="User registration failed"
            )

        return {**_user_payload(new_user), "message": "User registered successfully"}

    # Authenticate user and generate access token
    @staticmethod
    async def login_user(email: str, password: str) -> Dict:
        logger.debug("Login attempt for email: %s", email)

        user = await User.find_one(User.email == email)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning("Invalid credentials for email: %s", email)
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password"
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled"
            )

        try:
            payload = _user_payload(user)
            role = ROLE_REVIEWER if payload["is_admin"] else ROLE_APPLICANT
            access_token = create_access_token(user.email, role=role)
            logger.debug("Created JWT access token for sub: %s", user.email)
        except ValueError as e:
            logger.error("Token creation failed: %s", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Could not create access token"
            )
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "user": payload,
        }

    # Retrieve user information by email address
    @staticmethod
    async def get_user_by_email(email: str) -> Optional[Dict]:
        user = await User.find_one(User.email == email)
        if not user:
            return None
        return _user_payload(user)


auth_service = AuthService()
