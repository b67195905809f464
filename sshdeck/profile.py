"""Host profile model shared by the codec, the store and the TUI."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class ProfileField(Enum):
    """Editable profile fields in their fixed display and file order.

    Each member carries ``(attribute, keyword, label)`` where *keyword* is the
    directive written to the SSH config file.
    """

    NAME = ("name", "Host", "Host")
    HOSTNAME = ("hostname", "HostName", "HostName")
    USER = ("user", "User", "User")
    PORT = ("port", "Port", "Port")
    IDENTITY_FILE = ("identity_file", "IdentityFile", "IdentityFile")
    PROXY_JUMP = ("proxy_jump", "ProxyJump", "ProxyJump")
    FORWARD_AGENT = ("forward_agent", "ForwardAgent", "ForwardAgent")
    PASSWORD = ("password", "# Password", "Password")

    def __init__(self, attribute: str, keyword: str, label: str):
        self.attribute = attribute
        self.keyword = keyword
        self.label = label

    @classmethod
    def optional(cls):
        """All fields except the host name."""
        return [field for field in cls if field is not cls.NAME]

    def next(self) -> "ProfileField":
        members = list(ProfileField)
        return members[(members.index(self) + 1) % len(members)]

    def previous(self) -> "ProfileField":
        members = list(ProfileField)
        return members[(members.index(self) - 1) % len(members)]


@dataclass(frozen=True)
class Profile:
    """One ``Host`` entry of an SSH client config.

    Values are kept as the raw strings found in the file; nothing is parsed or
    validated beyond requiring a non-empty ``name``.
    """

    name: str
    hostname: Optional[str] = None
    user: Optional[str] = None
    port: Optional[str] = None
    identity_file: Optional[str] = None
    proxy_jump: Optional[str] = None
    forward_agent: Optional[str] = None
    password: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Profile name must be a non-empty string")

    def get(self, field: ProfileField) -> Optional[str]:
        return getattr(self, field.attribute)

    def with_value(self, field: ProfileField, value: Optional[str]) -> "Profile":
        return dataclasses.replace(self, **{field.attribute: value})

    def as_dict(self) -> Dict[ProfileField, Optional[str]]:
        return {field: self.get(field) for field in ProfileField}

    @property
    def label(self) -> str:
        if self.hostname:
            return f"{self.name} ({self.hostname})"
        return self.name


class ProfileDraft:
    """Mutable copy of a profile used while the editor form is open.

    Unlike :class:`Profile` a draft may hold an empty name; it only becomes a
    profile again through :meth:`to_profile`.
    """

    def __init__(self, values: Optional[Dict[ProfileField, Optional[str]]] = None):
        self.values: Dict[ProfileField, Optional[str]] = {field: None for field in ProfileField}
        if values:
            self.values.update(values)

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileDraft":
        return cls(profile.as_dict())

    def get(self, field: ProfileField) -> Optional[str]:
        return self.values.get(field)

    def append_char(self, field: ProfileField, char: str) -> None:
        self.values[field] = (self.values.get(field) or "") + char

    def pop_char(self, field: ProfileField) -> None:
        self.values[field] = (self.values.get(field) or "")[:-1]

    def to_profile(self) -> Profile:
        """Build a profile from trimmed values, treating blank ones as unset fields.

        Raises ``ValueError`` when the name is empty.
        """
        name = (self.values.get(ProfileField.NAME) or "").strip()
        kwargs = {}
        for field in ProfileField.optional():
            value = (self.values.get(field) or "").strip()
            kwargs[field.attribute] = value or None
        return Profile(name=name, **kwargs)


__all__ = ["Profile", "ProfileDraft", "ProfileField"]
