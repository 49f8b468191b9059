"""Auth API Pydantic schemas."""

from pydantic import EmailStr, Field

from angelic.api.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str | None = None
    last_name: str | None = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)
