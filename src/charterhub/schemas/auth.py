from datetime import datetime
from typing import Self

from pydantic import BaseModel, EmailStr, Field, model_validator
from zxcvbn import zxcvbn

# zxcvbn scores 0-4; 3 is "safely unguessable"
MIN_PASSWORD_SCORE = 3


def check_password_strength(password: str, user_inputs: list[str] | None = None) -> str:
    """Reject guessable passwords.

    ``user_inputs`` (the customer's own name, company, email) are treated as
    dictionary words, so a password built from them scores low.
    """
    result = zxcvbn(password, user_inputs=[value for value in user_inputs or [] if value])
    if result["score"] >= MIN_PASSWORD_SCORE:
        return password

    feedback = result.get("feedback") or {}
    hint = feedback.get("warning") or next(iter(feedback.get("suggestions") or []), "")
    if hint:
        raise ValueError(f"Weak password: {hint}")
    raise ValueError("Password is too weak. Use a longer password with a mix of characters.")


class CredentialPair(BaseModel):
    """Session credentials. The raw refresh token is only ever returned here."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    issued_at: datetime
    access_expires_at: datetime
    expires_at: datetime


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class LogoutRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    """Complete an invited registration."""

    token: str = Field(min_length=1)
    password: str = Field(min_length=8, max_length=100)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    phone_number: str | None = Field(None, max_length=50)
    company: str | None = Field(None, max_length=200)

    @model_validator(mode="after")
    def validate_password_strength(self) -> Self:
        check_password_strength(
            self.password, user_inputs=[self.first_name, self.last_name, self.company or ""]
        )
        return self
