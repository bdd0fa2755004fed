from pydantic import EmailStr, Field, field_validator
from typing import Literal, Optional
from uuid import UUID

from app.common.schemas import CamelModel, RequiredStr

Currency = Literal["INR", "USD", "EUR", "GBP"]


class UserCreate(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: RequiredStr
    currency: Currency = "USD"

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserOut(CamelModel):
    id: UUID
    email: EmailStr
    name: str
    currency: str
    logo_url: Optional[str] = None


class TokenResponse(CamelModel):
    token: str
    user: UserOut
