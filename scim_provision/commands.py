"""Command handlers behind the CLI.

Each handler resolves names, performs the change, reports the outcome on
the console and returns an exit code (0 = success, 1 = failure).  Remote
failures never escape as exceptions; the CLI decides what the exit code
means for the process.
"""

from typing import Optional

from .console import Console
from .entitlements import get_entitlement, maybe_entitle
from .http_client import SCIMClient, TransportError
from .mutations import apply_patch, create_user, delete_by_id
from .payload_factory import (
    build_attribute_patch,
    build_membership_patch,
    make_user_account,
    redact_password,
)
from .resolver import ResolveError, get_by_name, list_by_filter, name_to_id
from .resources import ResourceType, SubjectKind
from .users import BasicUser, UserFileError, load_users_file


def _add_user(client: SCIMClient, console: Console, user: BasicUser) -> None:
    console.pp("add user:", redact_password(make_user_account(user)))
    create_user(client, user)


def add_user(client: SCIMClient, console: Console, user: BasicUser) -> int:
    try:
        _add_user(client, console, user)
    except TransportError as exc:
        console.err(f"Error creating user: {exc}")
        return 1
    console.info("User successfully added")
    return 0


def load_users(client: SCIMClient, console: Console, path: str) -> int:
    """Create every user in a YAML file, one at a time.

    A failed record is reported with its 1-based position and the run
    carries on with the next one.
    """
    try:
        users = load_users_file(path)
    except UserFileError as exc:
        console.err(f"could not read file of bulk users: {exc}")
        return 1

    failures = 0
    for line, user in enumerate(users, start=1):
        try:
            _add_user(client, console, user)
        except TransportError as exc:
            failures += 1
            console.err(f"Error adding user, line {line}, name {user.name}: {exc}")
        else:
            console.info(f"added user {user.name}")
    return 1 if failures else 0


def update_user(client: SCIMClient, console: Console, user: BasicUser,
                active: Optional[bool] = None) -> int:
    user_id = name_to_id(client, console, ResourceType.USER, user.name)
    if not user_id:
        return 1

    patch = build_attribute_patch(given=user.given, family=user.family,
                                  email=user.email, active=active)
    try:
        apply_patch(client, ResourceType.USER, user_id, patch)
    except TransportError as exc:
        console.err(f'Error updating user "{user.name}": {exc}')
        return 1
    console.info(f'User "{user.name}" updated')
    return 0


def set_password(client: SCIMClient, console: Console, name: str, password: str) -> int:
    user_id = name_to_id(client, console, ResourceType.USER, name)
    if not user_id:
        return 1

    try:
        apply_patch(client, ResourceType.USER, user_id, build_attribute_patch(password=password))
    except TransportError as exc:
        console.err(f"Error updating user {name}: {exc}")
        return 1
    console.info(f'User "{name}" updated')
    return 0


def update_membership(client: SCIMClient, console: Console, resource_type: ResourceType,
                      resource_name: str, user_name: str, remove: bool = False) -> int:
    """Add ``user_name`` to (or remove it from) a group or role."""
    resource_id = name_to_id(client, console, resource_type, resource_name)
    user_id = name_to_id(client, console, ResourceType.USER, user_name)
    if not resource_id or not user_id:
        return 1

    try:
        apply_patch(client, resource_type, resource_id, build_membership_patch(user_id, remove))
    except TransportError as exc:
        console.err(f"Error updating SCIM resource {resource_name} of type {resource_type}: {exc}")
        return 1
    console.info(f"Updated SCIM resource {resource_name} of type {resource_type}")
    return 0


def delete_resource(client: SCIMClient, console: Console, resource_type: ResourceType,
                    name: str) -> int:
    resource_id = name_to_id(client, console, resource_type, name)
    if not resource_id:
        return 1

    try:
        delete_by_id(client, resource_type, resource_id)
    except TransportError as exc:
        console.err(f"Error deleting {resource_type} {name}: {exc}")
        return 1
    console.info(f'{resource_type} "{name}" deleted')
    return 0


def get_resource(client: SCIMClient, console: Console, resource_type: ResourceType,
                 name: str) -> int:
    try:
        item = get_by_name(client, resource_type, name)
    except (ResolveError, TransportError) as exc:
        console.err(f"Error getting SCIM resource named {name} of type {resource_type}: {exc}")
        return 1
    console.pp("", item)
    return 0


def list_resources(client: SCIMClient, console: Console, resource_type: ResourceType,
                   count: int = 0, filter_expr: Optional[str] = None) -> int:
    try:
        items, _ = list_by_filter(client, resource_type, filter_expr, count)
    except TransportError as exc:
        console.err(f"Error getting SCIM resources of type {resource_type}: {exc}")
        return 1
    console.ppf(str(resource_type), items, resource_type.summary_fields)
    return 0


def entitle(client: SCIMClient, console: Console, catalog_item_id: str,
            subject_kind: SubjectKind, subject_name: str, app_name: str = "") -> int:
    ok = maybe_entitle(client, console, catalog_item_id, subject_name, subject_kind,
                       app_name or catalog_item_id)
    return 0 if ok else 1


def show_entitlements(client: SCIMClient, console: Console, subject_kind: SubjectKind,
                      name: str) -> int:
    return 0 if get_entitlement(client, console, subject_kind, name) else 1
