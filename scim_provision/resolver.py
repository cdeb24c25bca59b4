"""Name-to-id resolution for SCIM resources.

The service is asked for candidates with a server-side ``eq`` filter, but
that filter is only trusted as a pre-filter: its case handling varies
between deployments.  The real contract is the client-side check that
exactly one returned item carries the name, compared case-insensitively.
Two matches is an error, never "pick the first", because acting on the
wrong identity is unsafe.
"""

from typing import Any, Dict, List, Optional, Tuple

from .console import Console
from .http_client import SCIMClient, TransportError
from .resources import ResourceRef, ResourceType

# Upper bound on a single listing; there is no paging beyond this
MAX_PAGE_SIZE = 10000


class ResolveError(Exception):
    """Base class for failures to turn a name into exactly one resource."""

    def __init__(self, message: str, resource_type: ResourceType, name: str):
        super().__init__(message)
        self.resource_type = resource_type
        self.name = name


class NotFound(ResolveError):
    def __init__(self, resource_type: ResourceType, name: str):
        super().__init__(f'no {resource_type} found named "{name}"', resource_type, name)


class AmbiguousName(ResolveError):
    def __init__(self, resource_type: ResourceType, name: str, count: int):
        super().__init__(
            f'multiple {resource_type} found named "{name}" ({count} matches)',
            resource_type, name,
        )
        self.count = count


class MalformedResource(ResolveError):
    def __init__(self, resource_type: ResourceType, name: str):
        super().__init__(f'no id returned for "{name}"', resource_type, name)


def eq_filter(attr: str, value: str) -> str:
    """Build a SCIM ``attr eq "value"`` filter, escaping the value."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'{attr} eq "{escaped}"'


def list_by_filter(
    client: SCIMClient,
    resource_type: ResourceType,
    filter_expr: Optional[str] = None,
    count: int = MAX_PAGE_SIZE,
) -> Tuple[List[Dict[str, Any]], int]:
    """Fetch one page of resources and return ``(items, total_results)``.

    ``count`` is capped at ``MAX_PAGE_SIZE``; a non-positive count leaves the
    page size to the server.
    Raises ``TransportError`` when the body is not a SCIM list response.
    """
    params: Dict[str, Any] = {}
    if count > 0:
        params["count"] = min(count, MAX_PAGE_SIZE)
    if filter_expr:
        params["filter"] = filter_expr

    body = client.request("GET", resource_type.path, params=params) or {}
    if not isinstance(body, dict):
        raise TransportError(f"malformed {resource_type} listing: expected a JSON object")
    items = body.get("Resources") or []
    if not isinstance(items, list):
        raise TransportError(f"malformed {resource_type} listing: Resources is not a list")
    total = body.get("totalResults")
    if not isinstance(total, int):
        total = len(items)
    return items, total


def _same_name(wanted: str, candidate: Any) -> bool:
    return isinstance(candidate, str) and candidate.casefold() == wanted.casefold()


def get_by_name(
    client: SCIMClient,
    resource_type: ResourceType,
    name: str,
    name_attr: Optional[str] = None,
) -> Dict[str, Any]:
    """Return the single resource whose name attribute matches ``name``.

    Raises:
        NotFound: no item matches.  Entries that are not objects never match.
        AmbiguousName: more than one item matches.
        TransportError: the listing call failed.
    """
    attr = name_attr or resource_type.name_attr
    items, _ = list_by_filter(client, resource_type, eq_filter(attr, name))

    matches = [
        item for item in items
        if isinstance(item, dict) and _same_name(name, item.get(attr))
    ]
    if len(matches) > 1:
        raise AmbiguousName(resource_type, name, len(matches))
    if not matches:
        raise NotFound(resource_type, name)
    return matches[0]


def resolve_by_name(
    client: SCIMClient,
    resource_type: ResourceType,
    name: str,
    name_attr: Optional[str] = None,
) -> ResourceRef:
    """Resolve ``name`` to a ``ResourceRef``.

    Raises everything ``get_by_name`` raises, plus ``MalformedResource``
    when the match has no string ``id``.
    """
    item = get_by_name(client, resource_type, name, name_attr)
    resource_id = item.get("id")
    if not isinstance(resource_id, str) or not resource_id:
        raise MalformedResource(resource_type, name)
    return ResourceRef(resource_type, resource_id)


def name_to_id(
    client: SCIMClient,
    console: Console,
    resource_type: ResourceType,
    name: str,
    name_attr: Optional[str] = None,
) -> Optional[str]:
    """Resolve ``name`` or report why not; ``None`` means abort the command."""
    try:
        return resolve_by_name(client, resource_type, name, name_attr).id
    except (ResolveError, TransportError) as exc:
        console.err(f"Error getting SCIM {resource_type} ID of {name}: {exc}")
        return None
