import pytest

from services.auth import USER, issue_token
from services.migration import populate_database

from conftest import article_payload, scholarship_payload


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "durableStore": True}


def test_public_lists_follow_ordering(client, storage):
    populate_database(storage)
    countries = client.get("/api/countries").get_json()
    assert [c["name"] for c in countries] == ["Canada", "Germany", "United Kingdom", "United States"]
    universities = client.get("/api/universities").get_json()
    assert [u["ranking"] for u in universities] == [1, 2, 8, 18]
    news = client.get("/api/news").get_json()
    assert [n["publishDate"] for n in news] == ["2025-04-15", "2025-03-10", "2025-01-15"]
    featured = client.get("/api/news/featured").get_json()
    assert [n["slug"] for n in featured] == ["major-funding-initiative", "canada-expands-work-permits"]


def test_get_by_slug_and_404(client, storage):
    populate_database(storage)
    resp = client.get("/api/countries/germany")
    assert resp.status_code == 200
    assert resp.get_json()["currency"] == "EUR"

    resp = client.get("/api/articles/no-such-article")
    assert resp.status_code == 404
    assert resp.get_json() == {"msg": "Article not found"}


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/spaceships")
    assert resp.status_code == 404
    assert "msg" in resp.get_json()


def test_menu_falls_back_to_ephemeral(client, durable_down):
    resp = client.get("/api/menu")
    assert resp.status_code == 200
    assert [m["title"] for m in resp.get_json()][:2] == ["Home", "Scholarships"]


def test_admin_routes_require_admin_token(client, user):
    assert client.get("/api/admin/scholarships").status_code == 401
    user_token = {"x-auth-token": issue_token(USER, user["id"])}
    assert client.get("/api/admin/scholarships", headers=user_token).status_code == 403
    assert client.get("/api/admin/scholarships", headers={"x-auth-token": "garbage"}).status_code == 401


def test_admin_create_derives_slug(client, admin_headers):
    resp = client.post("/api/admin/scholarships", json=scholarship_payload(), headers=admin_headers)
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["slug"] == "test-grant"

    public = client.get("/api/scholarships/test-grant").get_json()
    assert public["id"] == created["id"]


def test_admin_create_rejects_invalid_body(client, admin_headers):
    resp = client.post("/api/admin/articles", json={"title": "No content"}, headers=admin_headers)
    assert resp.status_code == 400
    fields = {e["field"] for e in resp.get_json()["errors"]}
    assert {"content", "summary", "author"} <= fields

    resp = client.post("/api/admin/articles", data="not json", headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.parametrize("kind, payload, patch, slug_field", [
    ("articles", article_payload(), {"summary": "Edited"}, "slug"),
    ("countries", {"name": "Spain", "description": "d", "universities": 76, "acceptanceRate": "x"},
     {"currency": "EUR"}, "slug"),
    ("news", {"title": "Exam dates", "content": "c", "summary": "s", "publishDate": "2025-05-05",
              "category": "x"}, {"isFeatured": True}, "slug"),
])
def test_admin_update_and_delete_persist(client, admin_headers, kind, payload, patch, slug_field):
    created = client.post(f"/api/admin/{kind}", json=payload, headers=admin_headers).get_json()
    item_url = f"/api/admin/{kind}/{created['id']}"

    resp = client.put(item_url, json=patch, headers=admin_headers)
    assert resp.status_code == 200
    public = client.get(f"/api/{kind}/{created[slug_field]}").get_json()
    for k, v in patch.items():
        assert public[k] == v

    assert client.delete(item_url, headers=admin_headers).status_code == 200
    assert client.get(item_url, headers=admin_headers).status_code == 404
    assert client.delete(item_url, headers=admin_headers).status_code == 404


def test_admin_menu_crud(client, admin_headers):
    resp = client.post("/api/admin/menu", json={"title": "Blog", "url": "/blog"}, headers=admin_headers)
    item = resp.get_json()
    resp = client.put(f"/api/admin/menu/{item['id']}", json={"url": "/journal"}, headers=admin_headers)
    assert resp.get_json()["url"] == "/journal"
    assert client.put("/api/admin/menu/999", json={"url": "/x"}, headers=admin_headers).status_code == 404


def test_admin_seed(client, admin_headers):
    resp = client.post("/api/admin/seed", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["counts"]["scholarships"] == 4
    assert len(client.get("/api/scholarships").get_json()) == 4


def test_admin_seed_disabled(app, client, admin_headers):
    app.config["ALLOW_SEED"] = False
    resp = client.post("/api/admin/seed", headers=admin_headers)
    assert resp.status_code == 403
    assert client.get("/api/scholarships").get_json() == []


def test_admin_seed_requires_auth(client):
    assert client.post("/api/admin/seed").status_code == 401


def test_admin_migrate(app, client, storage, admin_headers):
    app.config["DURABLE_STORE_ENABLED"] = False
    storage.create("news", {"title": "Offline news", "content": "c", "summary": "s",
                            "publishDate": "2025-01-01", "category": "x"})
    app.config["DURABLE_STORE_ENABLED"] = True

    resp = client.post("/api/admin/migrate", headers=admin_headers)
    assert resp.status_code == 200
    report = resp.get_json()["report"]
    assert report["failed"] == 0
    assert report["by_kind"]["news"] == 1
    assert client.get("/api/news/offline-news").status_code == 200


def test_admin_migrate_without_durable_store(client, admin_headers, durable_down):
    resp = client.post("/api/admin/migrate", headers=admin_headers)
    assert resp.status_code == 503
