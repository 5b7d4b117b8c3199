"""Tests for role search, filtering, sorting and pagination."""

from __future__ import annotations

import uuid

import pytest

from roles_admin.application.use_cases.roles import grant_role, search_roles
from roles_admin.config import reset_settings_cache
from roles_admin.domain.exceptions import InvalidFilterError, NotFoundError, ValidationError


def _names(page) -> list[str]:
    return [item.role.name for item in page.items]


@pytest.fixture()
def chain(make_role):
    viewer = make_role("Viewer", description="Reads published pages")
    editor = make_role("Editor", viewer, description="Edits pages")
    admin = make_role("Admin", editor, description="Runs the site")
    auditor = make_role("Auditor", viewer, description="Reviews logs")
    return {"Viewer": viewer, "Editor": editor, "Admin": admin, "Auditor": auditor}


def test_lists_system_roles_by_name(session, chain, make_user_role):
    make_user_role("alice")

    page = search_roles(session)

    assert _names(page) == ["Admin", "Auditor", "Editor", "Viewer"]
    assert page.total == 4
    assert page.num_pages == 1


def test_items_carry_direct_grants(session, chain):
    page = search_roles(session, {"role_name": "Admin"})

    (item,) = page.items
    assert item.granted_roles_names == ["Editor"]
    assert item.granted_roles_ids == [chain["Editor"].id]
    assert item.granted_roles_uuids == [chain["Editor"].uuid]


def test_name_substring_search_counts_every_match(session, chain):
    page = search_roles(session, {"role_name": "itor"}, limit=1)

    assert _names(page) == ["Auditor"]
    assert page.total == 2
    assert page.num_pages == 2


def test_substring_search_ignores_case_by_default(session, chain):
    assert _names(search_roles(session, {"role_name": "ADMIN"})) == ["Admin"]
    assert _names(search_roles(session, {"role_description": "PAGES"})) == [
        "Editor",
        "Viewer",
    ]


def test_case_sensitive_search_can_be_enabled(session, chain, monkeypatch):
    monkeypatch.setenv("ROLE_SEARCH_CASE_SENSITIVE", "true")
    reset_settings_cache()

    assert _names(search_roles(session, {"role_description": "Runs"})) == ["Admin"]
    assert _names(search_roles(session, {"role_name": "Adm"})) == ["Admin"]
    assert search_roles(session, {"role_name": "admin"}).total == 0
    assert search_roles(session, {"role_description": "runs"}).total == 0
    assert search_roles(session, {"role_name": "admin"}, case_sensitive=False).total == 1


def test_case_sensitive_search_keeps_like_wildcards_literal(session, make_role):
    make_role("Role_A")
    make_role("RoleXA")

    page = search_roles(session, {"role_name": "e_A"}, case_sensitive=True)

    assert _names(page) == ["Role_A"]


def test_exact_id_and_uuid_filters(session, chain):
    editor = chain["Editor"]

    assert _names(search_roles(session, {"role_id": editor.id})) == ["Editor"]
    assert _names(search_roles(session, {"role_id": str(editor.id)})) == ["Editor"]
    assert _names(search_roles(session, {"role_id": float(editor.id)})) == ["Editor"]
    assert _names(search_roles(session, {"role_uuid": str(editor.uuid)[:13]})) == ["Editor"]
    assert _names(search_roles(session, {"meta_object_uuid": str(editor.uuid).upper()})) == [
        "Editor"
    ]


def test_inherits_role_includes_the_named_role(session, chain):
    page = search_roles(session, {"inherits_role_name": "Editor"})

    assert _names(page) == ["Admin", "Editor"]
    assert page.total == 2

    page = search_roles(session, {"inherits_role_uuid": str(chain["Viewer"].uuid)})
    assert _names(page) == ["Admin", "Auditor", "Editor", "Viewer"]


def test_granted_role_matches_direct_grants_only(session, chain):
    page = search_roles(session, {"granted_role_name": "Viewer"})

    assert _names(page) == ["Auditor", "Editor"]


def test_filters_are_combined(session, chain):
    page = search_roles(session, {"inherits_role_name": "Viewer", "role_description": "pages"})

    assert _names(page) == ["Editor", "Viewer"]
    assert page.total == 2


def test_inherits_filter_excludes_user_roles(session, chain, make_user_role):
    alice = make_user_role("alice")
    grant_role(session, role_uuid=alice.uuid, granted_role_uuid=chain["Editor"].uuid)

    assert _names(search_roles(session, {"inherits_role_name": "Editor"})) == ["Admin", "Editor"]


def test_null_criteria_are_ignored(session, chain):
    assert search_roles(session, {"role_name": None, "inherits_role_name": None}).total == 4


def test_sorting_and_pagination(session, chain):
    page = search_roles(session, order_by="role_id", order="desc", offset=1, limit=2)

    assert _names(page) == ["Admin", "Editor"]
    assert page.total == 4
    assert page.num_pages == 2


def test_ties_are_broken_by_id(session, make_role):
    first = make_role("Beta", description="same")
    second = make_role("Alpha", description="same")

    page = search_roles(session, order_by="role_description", order="desc")

    assert [item.role.id for item in page.items] == [first.id, second.id]


@pytest.mark.parametrize(
    "criteria",
    [
        {"user_name": "x"},
        {"role_id": "abc"},
        {"role_id": True},
        {"role_id": 1.9},
        {"role_id": "1.0"},
    ],
)
def test_invalid_filters(session, chain, criteria):
    with pytest.raises(InvalidFilterError):
        search_roles(session, criteria)


def test_unknown_named_roles(session, chain):
    with pytest.raises(NotFoundError):
        search_roles(session, {"inherits_role_name": "Nobody"})
    with pytest.raises(NotFoundError):
        search_roles(session, {"granted_role_uuid": str(uuid.uuid4())})


@pytest.mark.parametrize(
    "kwargs",
    [{"order_by": "user_name"}, {"order": "sideways"}, {"offset": -1}, {"limit": -5}],
)
def test_invalid_sort_and_paging(session, kwargs):
    with pytest.raises(ValidationError):
        search_roles(session, **kwargs)
