"""Builds request bodies for the provisioning service.

All builders are pure: they return plain dicts ready to be sent as JSON
and never touch the network.  Top-level SCIM bodies always carry
``CORE_SCHEMA``.
"""

from typing import Any, Dict, Optional

CORE_SCHEMA = "urn:scim:schemas:core:1.0"
ACTIVATION_AUTOMATIC = "AUTOMATIC"


class AttributePatch:
    """Partial update of a user's attributes.

    Only fields that were explicitly set end up in the payload, so an
    intentional ``active=False`` or empty string is sent rather than
    silently dropped.
    """

    def __init__(self):
        self._name: Dict[str, str] = {}
        self._fields: Dict[str, Any] = {}

    def given_name(self, value: str) -> "AttributePatch":
        self._name["givenName"] = value
        return self

    def family_name(self, value: str) -> "AttributePatch":
        self._name["familyName"] = value
        return self

    def email(self, value: str) -> "AttributePatch":
        self._fields["emails"] = [{"value": value}]
        return self

    def password(self, value: str) -> "AttributePatch":
        self._fields["password"] = value
        return self

    def active(self, value: bool) -> "AttributePatch":
        self._fields["active"] = value
        return self

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"schemas": [CORE_SCHEMA]}
        if self._name:
            payload["name"] = dict(self._name)
        payload.update(self._fields)
        return payload


def build_attribute_patch(
    given: str = "",
    family: str = "",
    email: str = "",
    password: str = "",
    active: Optional[bool] = None,
) -> Dict[str, Any]:
    """Attribute patch from flat inputs, skipping blank strings and ``None``.

    A patch with nothing set is still returned (schemas only); deciding
    whether to send it is up to the caller.
    """
    patch = AttributePatch()
    if given:
        patch.given_name(given)
    if family:
        patch.family_name(family)
    if email:
        patch.email(email)
    if password:
        patch.password(password)
    if active is not None:
        patch.active(active)
    return patch.to_dict()


def build_membership_patch(subject_id: str, remove: bool = False) -> Dict[str, Any]:
    """Add (or with ``remove=True``, delete) one user in a group or role.

    The presence of ``operation`` is what distinguishes removal; an add
    carries no ``operation`` key at all.
    """
    member: Dict[str, str] = {"value": subject_id, "type": "User"}
    if remove:
        member["operation"] = "delete"
    return {"schemas": [CORE_SCHEMA], "members": [member]}


def make_user_account(user) -> Dict[str, Any]:
    """Full User body for creation from a ``BasicUser``.

    Blank given/family names default to the user name, a blank email to
    ``<name>@example.com``.  The password is only included when set.
    """
    account: Dict[str, Any] = {
        "schemas": [CORE_SCHEMA],
        "userName": user.name,
        "name": {
            "givenName": user.given or user.name,
            "familyName": user.family or user.name,
        },
        "emails": [{"value": user.email or f"{user.name}@example.com"}],
    }
    if user.password:
        account["password"] = user.password
    return account


def make_entitlement_bulk(catalog_item_id: str, subject_type: str, subject_id: str) -> Dict[str, Any]:
    """Bulk envelope with a single POST creating an automatic entitlement.

    ``returnPayloadOnError`` asks the service to echo the failing operation
    back, which is the only diagnostic it gives for bulk failures.
    """
    return {
        "returnPayloadOnError": True,
        "operations": [
            {
                "method": "POST",
                "data": {
                    "catalogItemId": catalog_item_id,
                    "subjectType": subject_type,
                    "subjectId": subject_id,
                    "activationPolicy": ACTIVATION_AUTOMATIC,
                },
            }
        ],
    }


def redact_password(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Shallow copy of a body with any password masked, for display."""
    shown = dict(payload)
    if "password" in shown:
        shown["password"] = "********"
    return shown
