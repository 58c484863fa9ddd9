from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from typing import Dict
import logging

from permit_portal.services.auth_service import auth_service
from permit_portal.schemas import UserCreate, UserResponse, Token
from permit_portal.core.auth_dependencies import get_current_user
from permit_portal.services.audit_service import audit_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"]
)


# Registers a new applicant account
@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup_user(user_data: UserCreate) -> UserResponse:
    try:
        created_user = await auth_service.register_user(user_data)
        await audit_service.record("signup", created_user.get("email"), created_user.get("id"))
        return UserResponse(**created_user)
    except HTTPException:
        await audit_service.record("signup", user_data.email, None, status="failed")
        raise
    except Exception as e:
        logger.error(f"Unexpected error during signup: {str(e)}")
        await audit_service.record("signup", user_data.email, None, status="failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during registration"
        )


# Authenticates user credentials and returns an access token
@router.post("/login", response_model=Token, status_code=status.HTTP_200_OK)
async def login_user(form_data: OAuth2PasswordRequestForm = Depends()) -> Token:
    try:
        token_data = await auth_service.login_user(form_data.username, form_data.password)
        await audit_service.record("login", form_data.username, None)
        return Token(
            access_token=token_data["access_token"],
            token_type=token_data["token_type"]
        )
    except HTTPException:
        await audit_service.record("login", form_data.username, None, status="failed")
        raise
    except Exception as e:
        logger.error(f"Unexpected error during login: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred during login"
        )


# Retrieves the authenticated user's profile information
@router.get("/me", response_model=UserResponse, status_code=status.HTTP_200_OK)
async def get_current_user_info(current_user: Dict = Depends(get_current_user)) -> UserResponse:
    return UserResponse(**current_user)
