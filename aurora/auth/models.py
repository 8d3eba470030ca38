"""
Identity models.

VerifiedIdentity is what a successfully verified login assertion yields.
User is the persisted record; it keeps the provider's field names
(first_name, username) on the wire and in the store.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "admin"]


class VerifiedIdentity(BaseModel):
    """Claims extracted from a login assertion whose signature checked out."""

    model_config = ConfigDict(frozen=True)

    id: int
    display_name: str = ""
    handle: str = ""


class User(BaseModel):
    """Stored user record. Role is always derived server-side."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    display_name: str = Field(default="", alias="first_name")
    handle: str = Field(default="", alias="username")
    role: Role = "user"

    def to_record(self) -> dict:
        return self.model_dump(by_alias=True)
