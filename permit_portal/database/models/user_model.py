from beanie import Document
from pydantic import EmailStr, Field
from datetime import datetime
from typing import Optional


class User(Document):
    email: EmailStr = Field(..., description="Email address of the user")
    full_name: str = Field(..., description="Full name of the user")
    phone: Optional[str] = Field(None, description="Contact phone number")
    hashed_password: str = Field(..., description="Hashed password for the user account")
    is_admin: bool = Field(default=False, description="Grants access to the review console")
    is_active: bool = Field(default=True, description="Indicates if the user account is active")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Timestamp when the user was created")

    class Settings:
        name = "users"
