"""
HTTP tests for the portfolio content API.
"""
from sqlalchemy import text

BASE = "/api/content"


def _create(client, headers, **fields):
    response = client.post(f"{BASE}/admin/sections", json=fields, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_admin_endpoints_require_api_key(client):
    for method, path in [
        ("get", "/admin/sections"),
        ("post", "/admin/sections"),
        ("put", "/admin/sections/reorder"),
        ("get", "/admin/export"),
        ("post", "/admin/import"),
    ]:
        response = getattr(client, method)(f"{BASE}{path}")
        assert response.status_code == 401, path
        assert response.json()["category"] == "security"

    response = client.get(f"{BASE}/admin/sections", headers={"X-API-Key": "wrong"})
    assert response.status_code == 401


def test_create_list_get(client, admin_headers):
    hero = _create(client, admin_headers, name="hero", type="hero", title="Hi")
    about = _create(client, admin_headers, name="about", type="about", is_visible=False)

    assert hero["sort_order"] == 1
    assert about["sort_order"] == 2
    assert about["content"] == {}

    public = client.get(f"{BASE}/sections").json()
    assert [s["name"] for s in public] == ["hero"]

    admin = client.get(f"{BASE}/admin/sections", headers=admin_headers).json()
    assert [s["name"] for s in admin] == ["hero", "about"]

    fetched = client.get(f"{BASE}/sections/{hero['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["title"] == "Hi"


def test_create_validation_errors(client, admin_headers):
    response = client.post(f"{BASE}/admin/sections", json={"type": "hero"}, headers=admin_headers)
    assert response.status_code == 422
    assert response.json()["category"] == "validation"

    response = client.post(
        f"{BASE}/admin/sections", json={"name": "x", "type": "gallery"}, headers=admin_headers
    )
    assert response.status_code == 422


def test_update_replaces_content(client, admin_headers):
    section = _create(
        client, admin_headers, name="hero", type="hero", content={"subtitle": "a", "buttonText": "b"}
    )

    response = client.put(
        f"{BASE}/admin/sections/{section['id']}",
        json={"content": {"subtitle": "c"}},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["content"] == {"subtitle": "c"}
    assert body["name"] == "hero"


def test_not_found_responses(client, admin_headers):
    response = client.get(f"{BASE}/sections/404")
    assert response.status_code == 404
    assert response.json()["category"] == "not_found"

    response = client.put(f"{BASE}/admin/sections/404", json={"title": "x"}, headers=admin_headers)
    assert response.status_code == 404

    response = client.delete(f"{BASE}/admin/sections/404", headers=admin_headers)
    assert response.status_code == 404


def test_delete(client, admin_headers):
    section = _create(client, admin_headers, name="x", type="custom")

    response = client.delete(f"{BASE}/admin/sections/{section['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert client.get(f"{BASE}/sections").json() == []


def test_reorder_and_compact(client, admin_headers):
    ids = [_create(client, admin_headers, name=n, type="custom")["id"] for n in "abc"]

    response = client.put(
        f"{BASE}/admin/sections/reorder",
        json={"section_ids": [ids[2], ids[0], ids[1]]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["count"] == 3
    assert [s["name"] for s in client.get(f"{BASE}/sections").json()] == ["c", "a", "b"]

    response = client.put(
        f"{BASE}/admin/sections/reorder",
        json={"section_ids": [ids[0], 999]},
        headers=admin_headers,
    )
    assert response.status_code == 404
    assert [s["name"] for s in client.get(f"{BASE}/sections").json()] == ["c", "a", "b"]

    client.delete(f"{BASE}/admin/sections/{ids[2]}", headers=admin_headers)
    response = client.post(f"{BASE}/admin/sections/compact", headers=admin_headers)
    assert response.status_code == 200
    assert [s["sort_order"] for s in client.get(f"{BASE}/sections").json()] == [1, 2]


def test_reorder_accepts_section_objects(client, admin_headers):
    ids = [_create(client, admin_headers, name=n, type="custom")["id"] for n in "abc"]

    response = client.put(
        f"{BASE}/admin/sections/reorder",
        json={"sections": [{"id": ids[1]}, {"id": ids[2]}, {"id": ids[0]}]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["count"] == 3
    assert [s["name"] for s in client.get(f"{BASE}/sections").json()] == ["b", "c", "a"]

    response = client.put(
        f"{BASE}/admin/sections/reorder",
        json={"sections": [{"name": "a"}]},
        headers=admin_headers,
    )
    assert response.status_code == 422
    assert response.json()["category"] == "validation"


def test_over_long_title_is_rejected_before_storage(client, admin_headers):
    section = _create(client, admin_headers, name="hero", type="hero")

    response = client.put(
        f"{BASE}/admin/sections/{section['id']}",
        json={"title": "t" * 201},
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert response.json()["category"] == "validation"


def test_settings(client, admin_headers):
    response = client.put(
        f"{BASE}/admin/settings",
        json={"site_title": "Mine", "primary_color": "#111111"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    assert client.get(f"{BASE}/settings").json() == {
        "site_title": "Mine",
        "primary_color": "#111111",
    }


def test_export_import_round_trip(client, admin_headers):
    _create(client, admin_headers, name="hero", type="hero", content={"subtitle": "s"})
    _create(client, admin_headers, name="about", type="about", is_visible=False)
    client.put(f"{BASE}/admin/settings", json={"site_title": "Mine"}, headers=admin_headers)

    response = client.get(f"{BASE}/admin/export", headers=admin_headers)
    assert response.status_code == 200
    assert "portfolio-backup.json" in response.headers["content-disposition"]
    snapshot = response.json()
    assert snapshot["version"] == "1.0.0"

    client.delete(
        f"{BASE}/admin/sections/{snapshot['sections'][0]['id']}", headers=admin_headers
    )

    response = client.post(f"{BASE}/admin/import", json=snapshot, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["sections"] == 2

    admin = client.get(f"{BASE}/admin/sections", headers=admin_headers).json()
    assert [(s["name"], s["content"]) for s in admin] == [
        ("hero", {"subtitle": "s"}),
        ("about", {}),
    ]
    assert client.get(f"{BASE}/settings").json() == {"site_title": "Mine"}


def test_import_invalid_format(client, admin_headers):
    _create(client, admin_headers, name="keep", type="custom")

    response = client.post(f"{BASE}/admin/import", json={"sections": []}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["category"] == "invalid_format"
    assert len(client.get(f"{BASE}/sections").json()) == 1


def test_corrupt_content_is_reported(client, admin_headers, session_factory):
    section = _create(client, admin_headers, name="x", type="about")
    session = session_factory()
    session.execute(text("UPDATE sections SET content = 'oops' WHERE id = :id"), {"id": section["id"]})
    session.commit()
    session.close()

    response = client.get(f"{BASE}/sections/{section['id']}")

    assert response.status_code == 500
    assert response.json()["category"] == "corrupt_data"


def test_page_endpoint(client, admin_headers):
    _create(client, admin_headers, name="hero", type="hero")

    page = client.get(f"{BASE}/page").json()

    assert page["sections"][0]["title"] == "Welcome to My Portfolio"
    assert page["sections"][0]["content"]["buttonLink"] == "#projects"


def test_security_headers(client):
    response = client.get(f"{BASE}/sections")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
