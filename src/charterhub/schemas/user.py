from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from src.charterhub.schemas.auth import CredentialPair


class UserRead(BaseModel):
    id: int
    email: EmailStr
    first_name: str
    last_name: str
    display_name: str
    phone_number: str | None
    company: str | None
    role: str
    verified: bool
    last_login: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    """Profile fields a user may edit. Unset fields are left untouched."""

    email: EmailStr | None = None
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone_number: str | None = Field(None, max_length=50)
    company: str | None = Field(None, max_length=200)


class UserUpdateResponse(BaseModel):
    """Updated profile. ``tokens`` is set only when the email changed."""

    user: UserRead
    tokens: CredentialPair | None = None
    message: str = "Profile updated"


class AuthSessionResponse(BaseModel):
    """Returned by login and registration: the user plus fresh credentials."""

    user: UserRead
    tokens: CredentialPair
