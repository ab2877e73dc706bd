"""Pydantic request/response models for the session and page endpoints."""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_format(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Email is required")
        if not _EMAIL_RE.match(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("password")
    @classmethod
    def password_present(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Password is required")
        return v


class TenantRequest(BaseModel):
    tenant_prefix: str = Field(default="", alias="tenantPrefix")


class TenantResponse(BaseModel):
    tenant_prefix: str = Field(serialization_alias="tenantPrefix")


class SessionResponse(BaseModel):
    state: str
    authenticated: bool
    tenant_prefix: str = Field(serialization_alias="tenantPrefix")
    global_session: bool = Field(default=False, serialization_alias="globalSession")
    user: dict[str, Any] | None = None
    next: str | None = None


class GlobalLoginResponse(BaseModel):
    global_session: bool = Field(default=True, serialization_alias="globalSession")
    next: str = "/global-admin"


class PageView(BaseModel):
    page: str
    path: str
    params: dict[str, str] = Field(default_factory=dict)
    tenant_prefix: str = Field(serialization_alias="tenantPrefix")
    global_session: bool = Field(default=False, serialization_alias="globalSession")
    user: dict[str, Any] | None = None


class PendingView(BaseModel):
    loading: bool = True


# Profile edit operations


class AddSale(BaseModel):
    op: Literal["add_sale"]
    name: str = ""
    email: str = ""


class RemoveSale(BaseModel):
    op: Literal["remove_sale"]
    index: int


class UpdateSale(BaseModel):
    op: Literal["update_sale"]
    index: int
    name: str | None = None
    email: str | None = None


class AddAccount(BaseModel):
    op: Literal["add_account"]
    name: str = ""


class RemoveAccount(BaseModel):
    op: Literal["remove_account"]
    index: int


class UpdateAccount(BaseModel):
    op: Literal["update_account"]
    index: int
    name: str


ProfileOperation = Annotated[
    AddSale | RemoveSale | UpdateSale | AddAccount | RemoveAccount | UpdateAccount,
    Field(discriminator="op"),
]


class ProfileEditRequest(BaseModel):
    full_name: str | None = Field(default=None, alias="fullName")
    staff_id: str | None = Field(default=None, alias="staffId")
    operations: list[ProfileOperation] = Field(default_factory=list)
