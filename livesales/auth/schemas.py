from pydantic import BaseModel, EmailStr, Field

from ..common.validation import OptionalText


class RegisterRequest(BaseModel):
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    companyName: OptionalText = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
