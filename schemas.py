"""
Request schemas for the JSON API.

Bodies use camelCase keys (the mobile client's convention); every schema
also accepts the snake_case field names.
"""

from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel

MIN_PASSWORD_LENGTH = 8

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]


def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return value


Password = Annotated[RequiredStr, AfterValidator(_check_password)]


class RequestSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class RegisterRequest(RequestSchema):
    username: Username
    email: EmailStr
    password: Password


class VerifyEmailRequest(RequestSchema):
    email: EmailStr
    otp: RequiredStr


class EmailRequest(RequestSchema):
    email: EmailStr


class LoginRequest(RequestSchema):
    email: EmailStr
    password: RequiredStr


class GoogleLoginRequest(RequestSchema):
    id_token: RequiredStr


class ResetPasswordRequest(RequestSchema):
    token: RequiredStr
    password: Password


class ChangePasswordRequest(RequestSchema):
    current_password: RequiredStr
    new_password: Password


class DisplayNameRequest(RequestSchema):
    display_name: Username


class ProfileUpdateRequest(RequestSchema):
    display_name: Optional[Username] = None
    photo_url: Optional[str] = None


class CommentRequest(RequestSchema):
    text: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: Optional[str]) -> str:
        if value is None or not value.strip():
            raise ValueError("Comment text must not be empty.")
        return value.strip()


class LikeArticleRequest(RequestSchema):
    is_liked: bool
    title: Optional[str] = None


class SaveArticleRequest(RequestSchema):
    is_saved: bool
    title: Optional[str] = None
