"""CLI tests using Click's CliRunner against the mock server."""

import pytest
from click.testing import CliRunner
from scim_provision.cli import main


@pytest.fixture
def run(server):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(main, list(args), env={"SCIM_PROVISION_URL": server.base_url})

    return _run


def test_url_is_required():
    result = CliRunner().invoke(main, ["user", "list"], env={"SCIM_PROVISION_URL": None})
    assert result.exit_code == 2
    assert "--url" in result.output


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_user_add_and_get(run, server):
    result = run("user", "add", "alice", "--given", "Alice", "--user-password", "pw")
    assert result.exit_code == 0, result.output
    assert "User successfully added" in result.output

    result = run("user", "get", "ALICE")
    assert result.exit_code == 0
    assert '"userName": "alice"' in result.output


def test_user_load(run, server, tmp_path):
    path = tmp_path / "users.yaml"
    path.write_text("- name: a1\n- name: a2\n")
    result = run("user", "load", str(path))
    assert result.exit_code == 0, result.output
    assert len(server.stores["Users"]) == 2


def test_user_update_inactive(run, server):
    server.seed("Users", {"userName": "alice", "active": True}, resource_id="u1")
    result = run("user", "update", "alice", "--inactive")
    assert result.exit_code == 0, result.output
    assert server.stores["Users"]["u1"]["active"] is False


def test_user_password(run, server):
    server.seed("Users", {"userName": "alice"}, resource_id="u1")
    result = run("user", "password", "alice", "--new-password", "s3cret")
    assert result.exit_code == 0, result.output
    assert server.stores["Users"]["u1"]["password"] == "s3cret"


def test_group_member_add_and_remove(run, server):
    server.seed("Users", {"userName": "alice"}, resource_id="u1")
    server.seed("Groups", {"displayName": "Engineers"}, resource_id="g1")

    assert run("group", "member", "Engineers", "alice").exit_code == 0
    assert server.stores["Groups"]["g1"]["members"] == [{"value": "u1", "type": "User"}]

    assert run("group", "member", "Engineers", "alice", "--remove").exit_code == 0
    assert server.stores["Groups"]["g1"]["members"] == []


def test_role_list(run, server):
    server.seed("Roles", {"displayName": "Admin"})
    result = run("role", "list")
    assert result.exit_code == 0
    assert "Roles (1)" in result.output


def test_user_has_no_member_command(run):
    result = run("user", "member", "x", "y")
    assert result.exit_code == 2


def test_failed_command_exits_1(run):
    result = run("group", "delete", "Nobody")
    assert result.exit_code == 1
    assert "no Groups found" in result.output


def test_entitlement_grant_and_get(run, server):
    server.seed("Groups", {"displayName": "Engineers"}, resource_id="g1")
    result = run("entitlement", "grant", "group", "Engineers",
                 "--app-id", "item-1", "--app-name", "CatalogX")
    assert result.exit_code == 0, result.output
    assert server.entitlements[0]["subjectType"] == "GROUPS"
    assert server.entitlements[0]["subjectId"] == "g1"

    result = run("entitlement", "get", "app", "item-1")
    assert result.exit_code == 0
    assert "Entitlements (1)" in result.output


def test_entitlement_grant_rejects_app_kind(run):
    result = run("entitlement", "grant", "app", "x", "--app-id", "item-1")
    assert result.exit_code == 2
