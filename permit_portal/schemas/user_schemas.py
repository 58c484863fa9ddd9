from pydantic import BaseModel, EmailStr, Field
from typing import Optional

PHONE_PATTERN = r"^\+?[0-9\s\-()]+$"


class UserCreate(BaseModel):
    full_name: str = Field(..., min_length=2, description="Name must be at least 2 characters.")
    email: EmailStr = Field(..., description="Email address of the user")
    phone: str = Field(..., min_length=10, pattern=PHONE_PATTERN, description="Phone number of the user")
    password: str = Field(..., min_length=6, description="Password for the user account")


class UserResponse(BaseModel):
    id: str = Field(..., description="Unique identifier for the user")
    email: EmailStr = Field(..., description="Email address of the user")
    full_name: str = Field(..., description="Full name of the user")
    is_admin: bool = False
    message: Optional[str] = None


class Token(BaseModel):
    access_token: str = Field(..., description="Access token for the user")
    token_type: str = Field(default="bearer", description="Type of the token")
