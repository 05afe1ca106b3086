"""
User Models

DESIGN DECISION: The password is stored exactly as given. Hashing is not
done by this core. It is excluded from serialization so it never leaves
the service in a response body.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A registered user. Owns income and expense records."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(
        ...,
        description="Unique user identifier"
    )
    first_name: str
    last_name: str
    email: str
    password: str = Field(
        ...,
        exclude=True,
        description="Password as supplied at sign-up (not returned)"
    )
    created_at: datetime
    updated_at: datetime


class NewUser(BaseModel):
    """Validated user creation input."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str
    password: str = Field(..., min_length=6)


class UserPatch(BaseModel):
    """Validated partial update; only fields in model_fields_set are written."""

    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CreateUserRequest(BaseModel):
    first_name: str
    last_name: str
    email: str
    password: str


class UpdateUserRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
