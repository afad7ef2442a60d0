from pydantic import EmailStr
from typing import Optional

from api.models.common_schemas import CamelModel
from api.models.user_schemas import User


class CheckDomainInput(CamelModel):
    """Pre-signup check that the email's domain belongs to a company"""
    email: EmailStr


class CheckDomainResponse(CamelModel):
    allowed: bool
    message: Optional[str] = None
    company_name: Optional[str] = None


class RegisterUserInput(CamelModel):
    """Self-registration after identity-provider signup"""
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class RegisterUserResponse(CamelModel):
    message: str
    user: User


class AuthMeResponse(CamelModel):
    user: User
