"""Integration tests for the role administration endpoints."""

from __future__ import annotations

import base64
import json
import uuid
from urllib.parse import quote

import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

from roles_admin.infrastructure.database import get_db, get_session_factory


@pytest.fixture()
def client(database_url):
    """Return a test client bound to a clean application instance."""

    from main import create_app

    app = create_app()

    def override_get_db():
        db = get_session_factory()()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client


def _create(client: TestClient, name: str, *granted: str, description: str | None = None) -> str:
    response = client.post(
        "/admin/roles/role",
        json={
            "role_name": name,
            "role_description": description,
            "granted_roles_uuids": list(granted),
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["record"]["meta_object_uuid"]


def _encode(criteria: dict) -> str:
    return quote(base64.urlsafe_b64encode(json.dumps(criteria).encode()).decode(), safe="")


def _listing(client: TestClient, criteria: dict | None = None, *, page=1, limit=10, sort_by="none", sort="asc"):
    search_values = _encode(criteria) if criteria is not None else "none"
    return client.get(f"/admin/roles/{page}/{limit}/{search_values}/{sort_by}/{sort}")


def test_role_crud_and_grant_flow(client: TestClient) -> None:
    viewer = _create(client, "Viewer", description="Reads pages")
    editor = _create(client, "Editor", viewer)

    response = client.get(f"/admin/roles/role/{editor}")
    assert response.status_code == 200
    body = response.json()["data"]
    assert body["record"]["role_name"] == "Editor"
    assert body["record"]["role_is_user"] is False
    assert body["record"]["granted_roles_names"] == ["Viewer"]
    assert body["inherited_roles"] == [{"role_name": "Viewer", "meta_object_uuid": viewer}]
    assert body["editable_record_properties"] == [
        "role_name",
        "role_description",
        "granted_roles_uuids",
    ]

    admin = _create(client, "Admin")
    response = client.post(f"/admin/roles/role/{admin}/role/{editor}")
    assert response.status_code == 200
    assert response.json()["data"]["changed"] is True

    response = client.get(f"/admin/roles/role/{admin}/inherited-roles")
    assert [role["role_name"] for role in response.json()["data"]] == ["Editor", "Viewer"]
    response = client.get(f"/admin/roles/role/{viewer}/inheriting-roles")
    assert [role["role_name"] for role in response.json()["data"]] == ["Admin", "Editor"]

    response = client.delete(f"/admin/roles/role/{admin}/role/{editor}")
    assert response.status_code == 200
    assert response.json()["data"]["changed"] is True
    response = client.delete(f"/admin/roles/role/{admin}/role/{editor}")
    assert response.status_code == 200
    assert response.json()["data"]["changed"] is False


def test_update_replaces_attributes_and_grants(client: TestClient) -> None:
    viewer = _create(client, "Viewer")
    auditor = _create(client, "Auditor")
    editor = _create(client, "Editor", viewer, description="Edits")

    response = client.put(
        f"/admin/roles/role/{editor}",
        json={"role_name": "Publisher", "granted_roles_uuids": [auditor]},
        headers={"X-Acting-Role-Id": "5"},
    )
    assert response.status_code == 200, response.text
    record = response.json()["data"]["record"]
    assert record["role_name"] == "Publisher"
    assert record["role_description"] == "Edits"
    assert record["granted_roles_uuids"] == [auditor]
    assert record["meta_object_last_update_role_id"] == 5
    assert "was updated" in response.json()["message"]

    response = client.put(f"/admin/roles/role/{editor}", json={"role_description": "Publishes"})
    assert response.status_code == 200
    assert response.json()["data"]["record"]["granted_roles_uuids"] == [auditor]


def test_error_statuses(client: TestClient) -> None:
    viewer = _create(client, "Viewer")
    editor = _create(client, "Editor", viewer)

    assert client.get(f"/admin/roles/role/{uuid.uuid4()}").status_code == 404
    assert client.get("/admin/roles/role/not-a-uuid").status_code == 404

    response = client.post(f"/admin/roles/role/{viewer}/role/{editor}")
    assert response.status_code == 409
    assert "cycle" in response.json()["detail"]

    response = client.post("/admin/roles/role", json={"role_name": "Viewer"})
    assert response.status_code == 400

    response = client.post("/admin/roles/role", json={"role_name": "Other", "role_is_user": True})
    assert response.status_code == 422

    response = client.put(f"/admin/roles/role/{editor}", json={"granted_roles_uuids": [editor]})
    assert response.status_code == 409

    assert client.delete(f"/admin/roles/role/{editor}").status_code == 501

    response = client.post("/admin/roles/role", headers={"X-Acting-Role-Id": "abc"}, json={"role_name": "X"})
    assert response.status_code == 400


def test_listing_with_search_values(client: TestClient) -> None:
    viewer = _create(client, "Viewer", description="Reads pages")
    editor = _create(client, "Editor", viewer, description="Edits pages")
    _create(client, "Admin", editor)
    _create(client, "Auditor", viewer)

    response = _listing(client)
    assert response.status_code == 200
    body = response.json()["data"]
    assert [row["role_name"] for row in body["data"]] == ["Admin", "Auditor", "Editor", "Viewer"]
    assert body["totalItems"] == 4
    assert body["numPages"] == 1
    assert body["listing_columns"] == [
        "role_id",
        "role_name",
        "role_is_user",
        "meta_object_uuid",
        "granted_roles_names",
    ]

    response = _listing(client, {"role_name": "itor"}, limit=1, page=2)
    body = response.json()["data"]
    assert [row["role_name"] for row in body["data"]] == ["Editor"]
    assert body["totalItems"] == 2
    assert body["numPages"] == 2

    response = _listing(client, {"inherits_role_name": "Editor"})
    assert [row["role_name"] for row in response.json()["data"]["data"]] == ["Admin", "Editor"]

    response = _listing(client, limit=0, sort_by="role_id", sort="desc")
    body = response.json()["data"]
    assert [row["role_name"] for row in body["data"]] == ["Auditor", "Admin", "Editor", "Viewer"]
    assert body["numPages"] == 1


def test_listing_rejects_bad_search_values(client: TestClient) -> None:
    assert _listing(client, {"user_name": "x"}).status_code == 400
    assert client.get("/admin/roles/1/10/%25%25%25/none/asc").status_code == 400
    assert _listing(client, sort_by="user_name").status_code == 400
    assert _listing(client, {"inherits_role_name": "Nobody"}).status_code == 404


def test_listing_accepts_standard_base64_with_slashes(client: TestClient) -> None:
    _create(client, "Ed?")
    _create(client, "Editor")
    encoded = base64.b64encode(json.dumps({"role_name": "Ed?"}).encode()).decode()
    assert "/" in encoded

    response = client.get(f"/admin/roles/1/10/{quote(encoded, safe='')}/none/asc")

    assert response.status_code == 200
    assert [item["role_name"] for item in response.json()["data"]["data"]] == ["Ed?"]
    assert client.get("/admin/roles/1/10/none").status_code == 404


def test_navigation_entry_is_registered(client: TestClient) -> None:
    entries = client.app.state.navigation

    assert [(entry.path, entry.name, entry.in_navigation) for entry in entries] == [
        ("/admin/roles", "Roles", True)
    ]
