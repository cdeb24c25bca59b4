"""Resource types and entitlement subject kinds, with their wire names.

Each ``ResourceType`` knows its SCIM endpoint, the attribute used to look
it up by name and the fields shown when listing.  Each ``SubjectKind``
maps to the tokens the entitlement API expects.
"""

from enum import Enum
from typing import NamedTuple, Optional, Tuple


class ResourceType(Enum):
    """SCIM resource types addressable by name."""

    USER = ("Users", "userName", ("userName", "id", "active"))
    GROUP = ("Groups", "displayName", ("displayName", "id"))
    ROLE = ("Roles", "displayName", ("displayName", "id"))

    def __init__(self, endpoint: str, name_attr: str, summary_fields: Tuple[str, ...]):
        self.endpoint = endpoint
        self.name_attr = name_attr
        self.summary_fields = summary_fields

    @property
    def path(self) -> str:
        """Collection path, e.g. ``scim/Users``."""
        return f"scim/{self.endpoint}"

    def item_path(self, resource_id: str) -> str:
        """Single-resource path, e.g. ``scim/Users/<id>``."""
        return f"{self.path}/{resource_id}"

    def __str__(self) -> str:
        return self.endpoint


class ResourceRef(NamedTuple):
    """A resolved ``(resource_type, id)`` pair."""

    resource_type: ResourceType
    id: str


class SubjectKind(Enum):
    """What an entitlement is granted to, or read back for."""

    USER = "user"
    GROUP = "group"
    APP = "app"

    @property
    def subject_type(self) -> Optional[str]:
        """``USERS``/``GROUPS`` as sent in an entitlement; ``None`` for apps."""
        return _SUBJECT_WIRE[self][0]

    @property
    def category(self) -> str:
        """Path segment used when reading entitlements back."""
        return _SUBJECT_WIRE[self][1]

    @property
    def resource_type(self) -> Optional[ResourceType]:
        """The SCIM type a subject name resolves against; ``None`` for apps."""
        return _SUBJECT_WIRE[self][2]

    def __str__(self) -> str:
        return self.value


# kind -> (subjectType, entitlement category, SCIM resource type)
_SUBJECT_WIRE = {
    SubjectKind.USER: ("USERS", "users", ResourceType.USER),
    SubjectKind.GROUP: ("GROUPS", "groups", ResourceType.GROUP),
    SubjectKind.APP: (None, "catalogitems", None),
}
