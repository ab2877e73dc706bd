"""Auth domain models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Backend payloads use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfile(_CamelModel):
    id: str
    full_name: str = ""
    staff_id: str = ""
    email: str
    role: Literal["user", "admin"] = "user"
    status: Literal["pending", "approved", "rejected"] = "pending"
    can_view_others: bool = False
    # involved_sale_names[i] and involved_sale_emails[i] describe the same sale
    involved_account_names: list[str] = Field(default_factory=list)
    involved_sale_names: list[str] = Field(default_factory=list)
    involved_sale_emails: list[str] = Field(default_factory=list)
    global_admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator(
        "involved_account_names", "involved_sale_names", "involved_sale_emails", mode="before"
    )
    @classmethod
    def null_list_is_empty(cls, v: object) -> object:
        # Nullable columns come back as JSON null
        return [] if v is None else v


class LoginResult(BaseModel):
    token: str
    user: UserProfile


class ProfileUpdate(_CamelModel):
    """Body of PUT /api/auth/profile."""

    full_name: str
    staff_id: str
    email: str
    involved_account_names: list[str] = Field(default_factory=list)
    involved_sale_names: list[str] = Field(default_factory=list)
    involved_sale_emails: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def sale_lists_aligned(self) -> ProfileUpdate:
        if len(self.involved_sale_names) != len(self.involved_sale_emails):
            raise ValueError("involvedSaleNames and involvedSaleEmails must have the same length")
        return self
