"""Profile editing operations.

Sale names and sale emails are parallel lists: every operation here touches
both so that index ``i`` keeps describing the same sale.
"""

from __future__ import annotations

import re

from asc3_gate.auth.models import ProfileUpdate, UserProfile

# Thai tone marks, vowels and leading vowels are dropped from names; the
# remaining text is limited to printable ASCII and Thai consonants/digits.
_THAI_MARKS = re.compile(r"[\u0e47-\u0e4e\u0e30-\u0e39\u0e40-\u0e44]")
_DISALLOWED = re.compile(r"[^\u0020-\u007e\u0e01-\u0e5b]")


def clean_name(value: str) -> str:
    return _DISALLOWED.sub("", _THAI_MARKS.sub("", value)).strip()


class ProfileEditor:
    """Mutable working copy of a profile's editable fields."""

    def __init__(self, profile: UserProfile) -> None:
        self.full_name = profile.full_name
        self.staff_id = profile.staff_id
        self.email = profile.email
        self.account_names = list(profile.involved_account_names)
        names = list(profile.involved_sale_names)
        emails = list(profile.involved_sale_emails)
        # Pad the shorter list so a misaligned backend record becomes editable
        width = max(len(names), len(emails))
        self.sale_names = names + [""] * (width - len(names))
        self.sale_emails = emails + [""] * (width - len(emails))

    # Sales

    def add_sale(self, name: str = "", email: str = "") -> int:
        self.sale_names.append(clean_name(name))
        self.sale_emails.append(email.strip())
        return len(self.sale_names) - 1

    def remove_sale(self, index: int) -> None:
        self._check_sale(index)
        del self.sale_names[index]
        del self.sale_emails[index]

    def update_sale(self, index: int, name: str | None = None, email: str | None = None) -> None:
        self._check_sale(index)
        if name is not None:
            self.sale_names[index] = clean_name(name)
        if email is not None:
            self.sale_emails[index] = email.strip()

    def _check_sale(self, index: int) -> None:
        if not 0 <= index < len(self.sale_names):
            raise IndexError(f"no sale at index {index}")

    # Accounts

    def add_account(self, name: str = "") -> int:
        self.account_names.append(clean_name(name))
        return len(self.account_names) - 1

    def remove_account(self, index: int) -> None:
        if not 0 <= index < len(self.account_names):
            raise IndexError(f"no account at index {index}")
        del self.account_names[index]

    def update_account(self, index: int, name: str) -> None:
        if not 0 <= index < len(self.account_names):
            raise IndexError(f"no account at index {index}")
        self.account_names[index] = clean_name(name)

    def to_update(self) -> ProfileUpdate:
        return ProfileUpdate(
            full_name=self.full_name,
            staff_id=self.staff_id,
            email=self.email,
            involved_account_names=list(self.account_names),
            involved_sale_names=list(self.sale_names),
            involved_sale_emails=list(self.sale_emails),
        )
