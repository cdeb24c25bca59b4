"""CLI interface for scim-provision using Click."""

import logging
import sys
from typing import Optional

import click

from . import __version__
from . import commands
from .console import Console
from .http_client import SCIMClient
from .resources import ResourceType, SubjectKind
from .users import BasicUser


def _setup_logging(verbose: bool) -> None:
    """Send transport tracing to stderr when ``--verbose`` is given."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def _finish(exit_code: int) -> None:
    sys.exit(exit_code)


@click.group()
@click.option("--url", envvar="SCIM_PROVISION_URL", required=True,
              help="Base URL of the service API, e.g. https://tenant/SAAS/jersey/manager/api")
@click.option("--token", envvar="SCIM_PROVISION_TOKEN", help="Bearer token")
@click.option("--username", envvar="SCIM_PROVISION_USERNAME", help="HTTP Basic username")
@click.option("--password", envvar="SCIM_PROVISION_PASSWORD", help="HTTP Basic password")
@click.option("--tls-no-verify", is_flag=True, help="Skip TLS certificate verification")
@click.option("--ca-bundle", type=click.Path(exists=True, dir_okay=False),
              help="CA bundle used to verify the server certificate")
@click.option("--proxy", help="HTTP/HTTPS proxy URL")
@click.option("--timeout", type=int, default=30, show_default=True,
              help="Per-request timeout in seconds")
@click.option("--verbose", "-v", is_flag=True, help="Trace every request on stderr")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx, url, token, username, password, tls_no_verify, ca_bundle, proxy, timeout, verbose):
    """Manage users, groups, roles and app entitlements of a SCIM 1.0 directory.

    Examples:

    \b
      scim-provision --url https://tenant/SAAS/jersey/manager/api user add alice
      scim-provision user load users.yaml
      scim-provision group member Engineers alice
      scim-provision entitlement grant group Engineers --app-id 42 --app-name CatalogX
    """
    _setup_logging(verbose)
    client = SCIMClient(
        url,
        token=token,
        username=username,
        password=password,
        tls_no_verify=tls_no_verify,
        timeout=timeout,
        proxy=proxy,
        ca_bundle=ca_bundle,
    )
    ctx.obj = {"client": client, "console": Console()}


# -- Users -------------------------------------------------------------------

@main.group()
def user():
    """Create, update and delete users."""


@user.command("add")
@click.argument("name")
@click.option("--given", default="", help="Given name (defaults to NAME)")
@click.option("--family", default="", help="Family name (defaults to NAME)")
@click.option("--email", default="", help="Email (defaults to NAME@example.com)")
@click.option("--user-password", "user_password", default="", help="Initial password")
@click.pass_obj
def user_add(obj, name, given, family, email, user_password):
    """Add a user."""
    u = BasicUser(name, given, family, email, user_password)
    _finish(commands.add_user(obj["client"], obj["console"], u))


@user.command("load")
@click.argument("file", type=click.Path(dir_okay=False))
@click.pass_obj
def user_load(obj, file):
    """Add every user listed in a YAML FILE."""
    _finish(commands.load_users(obj["client"], obj["console"], file))


@user.command("update")
@click.argument("name")
@click.option("--given", default="", help="New given name")
@click.option("--family", default="", help="New family name")
@click.option("--email", default="", help="New email")
@click.option("--active/--inactive", default=None, help="Enable or disable the account")
@click.pass_obj
def user_update(obj, name, given, family, email, active: Optional[bool]):
    """Update attributes of user NAME."""
    u = BasicUser(name, given, family, email)
    _finish(commands.update_user(obj["client"], obj["console"], u, active=active))


@user.command("password")
@click.argument("name")
@click.option("--new-password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.pass_obj
def user_password(obj, name, new_password):
    """Set the password of user NAME."""
    _finish(commands.set_password(obj["client"], obj["console"], name, new_password))


# -- Generic get/list/delete, plus membership for groups and roles -------------

def _add_resource_commands(group: click.Group, resource_type: ResourceType) -> None:
    label = resource_type.endpoint[:-1].lower()

    @group.command("get", help=f"Show the {label} named NAME.")
    @click.argument("name")
    @click.pass_obj
    def get_cmd(obj, name):
        _finish(commands.get_resource(obj["client"], obj["console"], resource_type, name))

    @group.command("list", help=f"List {label}s.")
    @click.option("--count", type=int, default=0, help="Maximum number of results")
    @click.option("--filter", "filter_expr", help='SCIM filter, e.g. \'userName sw "a"\'')
    @click.pass_obj
    def list_cmd(obj, count, filter_expr):
        _finish(commands.list_resources(obj["client"], obj["console"], resource_type,
                                        count, filter_expr))

    @group.command("delete", help=f"Delete the {label} named NAME.")
    @click.argument("name")
    @click.pass_obj
    def delete_cmd(obj, name):
        _finish(commands.delete_resource(obj["client"], obj["console"], resource_type, name))

    if resource_type is ResourceType.USER:
        return

    @group.command("member", help=f"Add user USER_NAME to the {label} NAME (or remove with --remove).")
    @click.argument("name")
    @click.argument("user_name")
    @click.option("--remove", is_flag=True, help="Remove instead of add")
    @click.pass_obj
    def member_cmd(obj, name, user_name, remove):
        _finish(commands.update_membership(obj["client"], obj["console"], resource_type,
                                           name, user_name, remove))


@main.group()
def group():
    """Inspect groups and manage their members."""


@main.group()
def role():
    """Inspect roles and manage their members."""


_add_resource_commands(user, ResourceType.USER)
_add_resource_commands(group, ResourceType.GROUP)
_add_resource_commands(role, ResourceType.ROLE)


# -- Entitlements --------------------------------------------------------------

@main.group()
def entitlement():
    """Grant and show application entitlements."""


@entitlement.command("grant")
@click.argument("kind", type=click.Choice([SubjectKind.USER.value, SubjectKind.GROUP.value]))
@click.argument("name")
@click.option("--app-id", required=True, help="Catalog item id of the app")
@click.option("--app-name", default="", help="App name used in messages")
@click.pass_obj
def entitlement_grant(obj, kind, name, app_id, app_name):
    """Entitle the user or group NAME to an app."""
    _finish(commands.entitle(obj["client"], obj["console"], app_id,
                             SubjectKind(kind), name, app_name))


@entitlement.command("get")
@click.argument("kind", type=click.Choice([k.value for k in SubjectKind]))
@click.argument("name")
@click.pass_obj
def entitlement_get(obj, kind, name):
    """Show entitlements of a user, a group, or an app (NAME is the catalog item id)."""
    _finish(commands.show_entitlements(obj["client"], obj["console"], SubjectKind(kind), name))


if __name__ == "__main__":
    main()
