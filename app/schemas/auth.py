"""
API schemas for registration and login
"""

from pydantic import BaseModel, EmailStr

from app.models.user import UserAccount
from app.validators.user_validators import RegistrationValidatorMixin


class RegisterRequest(RegistrationValidatorMixin, BaseModel):
    username: str
    email: EmailStr
    password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(UserAccount):
    """Public view of an account (the password hash is excluded from dumps)"""


class RegisterResponse(BaseModel):
    message: str = "User created"
    user: UserResponse


class LoginResponse(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserResponse
