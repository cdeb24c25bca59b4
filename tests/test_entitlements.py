"""Tests for granting and reading application entitlements."""

import pytest
from scim_provision.entitlements import (
    ENTITLEMENTS_PATH,
    entitle_subject,
    get_entitlement,
    maybe_entitle,
)
from scim_provision.resources import ResourceType, SubjectKind
from tests.mock_scim_server import request_header


def test_subject_kind_wire_table():
    assert SubjectKind.USER.subject_type == "USERS"
    assert SubjectKind.GROUP.subject_type == "GROUPS"
    assert SubjectKind.APP.subject_type is None
    assert [k.category for k in SubjectKind] == ["users", "groups", "catalogitems"]
    assert SubjectKind.GROUP.resource_type is ResourceType.GROUP


def test_entitle_subject_sends_bulk_envelope(client, server):
    entitle_subject(client, "u1", SubjectKind.USER, "item-9")
    sent = server.requests[-1]
    assert sent["method"] == "POST"
    assert sent["path"] == f"/{ENTITLEMENTS_PATH}"
    assert request_header(sent, "Content-Type") == (
        "application/vnd.vmware.horizon.manager.entitlements.definition.bulk+json"
    )
    assert request_header(sent, "Accept") == (
        "application/vnd.vmware.horizon.manager.bulk.sync.response+json"
    )
    assert sent["body"]["returnPayloadOnError"] is True
    assert server.entitlements == [{
        "catalogItemId": "item-9",
        "subjectType": "USERS",
        "subjectId": "u1",
        "activationPolicy": "AUTOMATIC",
    }]


def test_entitle_subject_rejects_app_kind(client):
    with pytest.raises(ValueError):
        entitle_subject(client, "x", SubjectKind.APP, "item-9")


def test_maybe_entitle_empty_name_is_silent(client, server, console, capsys):
    assert maybe_entitle(client, console, "item-9", "", SubjectKind.USER, "CatalogX") is True
    assert server.requests == []
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_maybe_entitle_group_uses_resolved_id(client, server, console, capsys):
    server.seed("Groups", {"displayName": "engineers"}, resource_id="g-42")
    ok = maybe_entitle(client, console, "catalogx-id", "Engineers", SubjectKind.GROUP, "CatalogX")
    assert ok is True

    bulk = server.requests[-1]["body"]
    data = bulk["operations"][0]["data"]
    assert data["subjectType"] == "GROUPS"
    assert data["subjectId"] == "g-42"
    assert data["subjectId"] != "Engineers"
    assert 'Entitled group "Engineers" to app "CatalogX".' in capsys.readouterr().out


def test_maybe_entitle_reports_resolution_failure(client, server, console, capsys):
    ok = maybe_entitle(client, console, "item-9", "ghost", SubjectKind.USER, "CatalogX")
    assert ok is False
    assert server.entitlements == []
    err = capsys.readouterr().err
    assert 'Could not entitle user "ghost" to app "CatalogX"' in err
    assert "no Users found" in err


def test_get_entitlement_for_user(client, server, console, capsys):
    server.seed("Users", {"userName": "alice"}, resource_id="u1")
    entitle_subject(client, "u1", SubjectKind.USER, "item-1")
    entitle_subject(client, "u2", SubjectKind.USER, "item-2")

    assert get_entitlement(client, console, SubjectKind.USER, "alice") is True
    assert server.requests[-1]["path"] == "/entitlements/definitions/users/u1"
    out = capsys.readouterr().out
    assert "Entitlements (1)" in out
    assert "item-1" in out
    assert "item-2" not in out


def test_get_entitlement_for_app_uses_name_as_id(client, server, console, capsys):
    entitle_subject(client, "g1", SubjectKind.GROUP, "item-1")
    assert get_entitlement(client, console, SubjectKind.APP, "item-1") is True
    assert server.requests[-1]["path"] == "/entitlements/definitions/catalogitems/item-1"
    assert "GROUPS" in capsys.readouterr().out


def test_get_entitlement_aborts_when_unresolved(client, server, console, capsys):
    assert get_entitlement(client, console, SubjectKind.GROUP, "Nobody") is False
    assert all(not r["path"].startswith("/entitlements") for r in server.requests)
    assert "Error getting SCIM Groups ID of Nobody" in capsys.readouterr().err
