"""
Request body schemas.

Each model validates one kind of request payload. ``validate`` turns a
pydantic failure into a ``ValidationError`` carrying a field-level list.
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
URL_RE = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


def _check_url(value):
    if value is not None and not URL_RE.match(value):
        raise ValueError("Invalid url")
    return value


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: str
    password: str = Field(..., min_length=6, max_length=20)
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_format(cls, v):
        v = v.strip().lower()
        if not EMAIL_RE.match(v):
            raise ValueError("Invalid email")
        return v

    @field_validator("avatar")
    @classmethod
    def avatar_url(cls, v):
        return _check_url(v)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=30)
    password: str = Field(..., min_length=6, max_length=20)


class PostCreate(BaseModel):
    title: str = Field(..., min_length=10, max_length=50)
    content: str = Field(..., min_length=30)
    image: Optional[str] = None

    @field_validator("image")
    @classmethod
    def image_url(cls, v):
        return _check_url(v)


class PostUpdate(BaseModel):
    title: str = Field(..., min_length=10, max_length=50)
    content: str = Field(..., min_length=30)
    image: Optional[str] = None


class CommentCreate(BaseModel):
    post: str = Field(..., min_length=1)
    content: str = Field(..., min_length=5, max_length=500)


class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=5, max_length=500)


class MessageCreate(BaseModel):
    receiverId: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1, max_length=1000)


class ProfileUpdate(BaseModel):
    bio: Optional[str] = Field(None, max_length=500)
    avatar: Optional[str] = None
    username: Optional[str] = Field(None, min_length=3, max_length=30)


def require_object(body):
    """Returns the request body as a dict; any other JSON value is rejected."""
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError(
            "Request body must be a JSON object",
            errors=[{"path": [], "message": "Expected a JSON object"}],
        )
    return body


def validate(model, data, message="Validation failed"):
    try:
        return model.model_validate(data or {})
    except PydanticValidationError as e:
        errors = [
            {"path": [str(p) for p in err["loc"]], "message": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(message, errors=errors) from None
