"""Write operations against SCIM resources.

Partial updates are sent as POST with ``X-HTTP-Method-Override: PATCH``,
which is what the service expects instead of a real PATCH verb.
"""

from typing import Any, Dict

from .http_client import SCIMClient
from .payload_factory import make_user_account
from .resources import ResourceType

METHOD_OVERRIDE_HEADER = "X-HTTP-Method-Override"


def apply_patch(client: SCIMClient, resource_type: ResourceType, resource_id: str,
                payload: Dict[str, Any]) -> None:
    """Apply a partial update to ``scim/<Type>/<id>``.  Raises ``TransportError``."""
    client.request(
        "POST",
        resource_type.item_path(resource_id),
        payload,
        extra_headers={METHOD_OVERRIDE_HEADER: "PATCH"},
    )


def create_user(client: SCIMClient, user) -> Dict[str, Any]:
    """Create a user from a ``BasicUser`` and return the service's copy."""
    return client.request("POST", ResourceType.USER.path, make_user_account(user)) or {}


def delete_by_id(client: SCIMClient, resource_type: ResourceType, resource_id: str) -> None:
    client.request("DELETE", resource_type.item_path(resource_id))
