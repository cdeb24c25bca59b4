"""Grant application entitlements to users and groups, and read them back.

Entitlements live outside SCIM: they are created through a bulk endpoint
that takes vendor media types, and read per subject or per catalog item.
"""

from typing import Optional

from .console import Console
from .http_client import SCIMClient, TransportError
from .payload_factory import make_entitlement_bulk
from .resolver import ResolveError, name_to_id, resolve_by_name
from .resources import SubjectKind

ENTITLEMENTS_PATH = "entitlements/definitions"
ENTITLEMENT_FIELDS = ("catalogItemId", "subjectType", "subjectId", "activationPolicy")

_MEDIA_PREFIX = "application/vnd.vmware.horizon.manager."


def _media_type(name: str) -> str:
    return f"{_MEDIA_PREFIX}{name}+json"


def entitle_subject(client: SCIMClient, subject_id: str, subject_kind: SubjectKind,
                    catalog_item_id: str) -> None:
    """Entitle one user or group (by id) to a catalog item.

    Raises:
        ValueError: ``subject_kind`` is not a user or group.
        TransportError: the service rejected the request.
    """
    subject_type = subject_kind.subject_type
    if subject_type is None:
        raise ValueError(f"cannot entitle a subject of kind {subject_kind}")

    client.request(
        "POST",
        ENTITLEMENTS_PATH,
        make_entitlement_bulk(catalog_item_id, subject_type, subject_id),
        extra_headers={
            "Accept": _media_type("bulk.sync.response"),
            "Content-Type": _media_type("entitlements.definition.bulk"),
        },
    )


def maybe_entitle(
    client: SCIMClient,
    console: Console,
    catalog_item_id: str,
    subject_name: str,
    subject_kind: SubjectKind,
    app_name: str,
    name_attr: Optional[str] = None,
) -> bool:
    """Resolve ``subject_name`` and entitle it to the catalog item.

    An empty ``subject_name`` means no entitlement was asked for: nothing
    is sent or reported and the call counts as a success.
    """
    if not subject_name:
        return True

    try:
        if subject_kind.resource_type is None:
            raise ValueError(f"cannot entitle a subject of kind {subject_kind}")
        ref = resolve_by_name(client, subject_kind.resource_type, subject_name, name_attr)
        entitle_subject(client, ref.id, subject_kind, catalog_item_id)
    except (ResolveError, TransportError, ValueError) as exc:
        console.err(
            f'Could not entitle {subject_kind} "{subject_name}" to app "{app_name}", error: {exc}'
        )
        return False

    console.info(f'Entitled {subject_kind} "{subject_name}" to app "{app_name}".')
    return True


def get_entitlement(client: SCIMClient, console: Console, subject_kind: SubjectKind,
                    name: str) -> bool:
    """Show the entitlements of a user, a group or an app.

    Users and groups are looked up by name; for apps ``name`` is the
    catalog item id.  A failed lookup has already been reported.
    """
    resource_type = subject_kind.resource_type
    if resource_type is None:
        subject_id = name
    else:
        subject_id = name_to_id(client, console, resource_type, name)
    if not subject_id:
        return False

    path = f"{ENTITLEMENTS_PATH}/{subject_kind.category}/{subject_id}"
    try:
        body = client.request("GET", path) or {}
    except TransportError as exc:
        console.err(f"Error: {exc}")
        return False

    console.ppf("Entitlements", body.get("items"), ENTITLEMENT_FIELDS)
    return True
