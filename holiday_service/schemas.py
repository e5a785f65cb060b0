"""Pydantic schemas for request and response models used in the holiday_service.

Includes models for sign-up, login, token and message responses, and the
holiday records returned by the external catalog.
"""

from __future__ import annotations

import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SignUpRequest(BaseModel):
    """Schema for account creation requests."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)
    role: str = Field(default="user", min_length=1, max_length=50)
    email: Optional[str] = Field(default=None, min_length=1, max_length=255)


class LoginRequest(BaseModel):
    """Schema for login requests."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
    )

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserResponse(BaseModel):
    id: int
    username: str
    role: str


class Token(BaseModel):
    """Schema returned after successful authentication."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    token: str


class MessageResponse(BaseModel):
    message: str


class SavedHolidaysResponse(BaseModel):
    holiday_ids: List[str]


class Holiday(BaseModel):
    """A public holiday record as published by the catalog."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    date: datetime.date
    local_name: str
    name: str
    country_code: str
    fixed: Optional[bool] = None
    global_: Optional[bool] = Field(default=None, alias="global")
    counties: Optional[List[str]] = None
    launch_year: Optional[int] = None
    types: List[str] = Field(default_factory=list)
