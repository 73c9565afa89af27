import logging

import pytest

from services.errors import BackendUnavailable, ConflictError, ValidationFailure

from conftest import article_payload, scholarship_payload

NEWS = {"title": "Visa fees rise", "content": "c", "summary": "s", "publishDate": "2025-02-01", "category": "x"}
COUNTRY = {"name": "Ireland", "description": "d", "universities": 34, "acceptanceRate": "High"}
UNIVERSITY = {"name": "Trinity College Dublin", "description": "d", "country": "Ireland", "ranking": 81}
MENU = {"title": "Blog", "url": "/blog", "children": [{"id": 71, "title": "Latest", "url": "/blog/latest"}]}

PAYLOADS = {
    "scholarships": scholarship_payload(),
    "articles": article_payload(),
    "countries": COUNTRY,
    "universities": UNIVERSITY,
    "news": NEWS,
    "menu": MENU,
}


def test_example_scenario(app, storage):
    created = storage.create("scholarships", {
        "title": "Test Grant",
        "description": "d",
        "amount": "$500",
        "deadline": "soon",
        "country": "Canada",
        "tags": [],
    })
    assert created["slug"] == "test-grant"
    assert storage.get_by_slug("scholarships", "test-grant")["id"] == created["id"]

    # 持久存储不可用 -> 内存存储里没有这条，返回 None 而不是抛异常
    app.config["DURABLE_STORE_ENABLED"] = False
    assert storage.get_by_slug("scholarships", "test-grant") is None


@pytest.mark.parametrize("kind", sorted(PAYLOADS))
def test_fallback_returns_same_shape(app, storage, kind):
    durable_row = storage.create(kind, PAYLOADS[kind])

    app.config["DURABLE_STORE_ENABLED"] = False
    ephemeral_row = storage.create(kind, PAYLOADS[kind])

    assert set(durable_row) == set(ephemeral_row)
    assert isinstance(ephemeral_row["id"], int)
    assert storage.get_by_id(kind, ephemeral_row["id"]) == ephemeral_row
    assert isinstance(storage.get_all(kind), list)


def test_every_read_survives_durable_outage(durable_down):
    storage = durable_down
    for kind in PAYLOADS:
        assert isinstance(storage.get_all(kind), list)
        assert storage.get_by_id(kind, 1) is None or storage.get_by_id(kind, 1)["id"] == 1
        assert storage.delete(kind, 999) is False
        assert storage.update(kind, 999, {}) is None
    assert storage.get_by_slug("articles", "nope") is None
    assert storage.get_featured_news() == []
    assert storage.get_user_by_username("admin") is None
    assert storage.get_active_user(1) is None
    assert storage.like_article(1, 1) is None
    assert storage.save_item(1, "articles", 1) is None
    assert storage.comments_by_user(1) == []
    assert set(storage.search("anything")) == {"scholarships", "articles", "countries", "universities", "news"}


def test_fallback_is_logged(durable_down, caplog):
    with caplog.at_level(logging.WARNING, logger="services.router"):
        durable_down.get_all("news")
    assert any("news.get_all" in r.getMessage() for r in caplog.records)


def test_fallback_log_names_kind_in_any_position(durable_down, caplog):
    with caplog.at_level(logging.WARNING, logger="services.router"):
        durable_down.save_item(1, "scholarships", 1)
    assert any("scholarships.save_item" in r.getMessage() for r in caplog.records)


def test_mid_query_failure_falls_back(storage, monkeypatch):
    def unavailable(*args):
        raise BackendUnavailable("server closed the connection")

    monkeypatch.setattr(storage.durable, "get_all", unavailable)
    # 内存存储初始化时自带导航菜单
    assert len(storage.get_all("menu")) == 6


def test_validation_runs_before_any_io(storage, monkeypatch):
    def must_not_run(*args):
        raise AssertionError("backend touched with invalid input")

    monkeypatch.setattr(storage.durable, "create", must_not_run)
    monkeypatch.setattr(storage.ephemeral, "create", must_not_run)
    with pytest.raises(ValidationFailure):
        storage.create("scholarships", {"title": "Only a title"})
    with pytest.raises(ValidationFailure):
        storage.create("not-a-kind", {})


def test_validation_failure_does_not_fall_back(storage, monkeypatch):
    def rejects(*args):
        raise ValidationFailure("Value rejected by the store")

    monkeypatch.setattr(storage.durable, "create", rejects)
    with pytest.raises(ValidationFailure):
        storage.create("scholarships", scholarship_payload())
    assert storage.ephemeral.get_all("scholarships") == []


def test_update_revalidates_merged_entity(storage):
    created = storage.create("news", NEWS)
    updated = storage.update("news", created["id"], {"isFeatured": True})
    assert updated["isFeatured"] is True
    assert updated["title"] == NEWS["title"]
    with pytest.raises(ValidationFailure):
        storage.update("news", created["id"], {"title": ""})
    with pytest.raises(ValidationFailure):
        storage.update("news", created["id"], "not json")


def test_conflicts_propagate(storage):
    user = {"fullName": "A", "email": "a@example.com", "passwordHash": "h"}
    storage.create_active_user(user)
    with pytest.raises(ConflictError):
        storage.create_active_user(dict(user, email="A@EXAMPLE.COM"))


def test_conflicts_are_checked_in_ephemeral_too(durable_down):
    durable_down.create_user({"username": "root", "passwordHash": "h"})
    with pytest.raises(ConflictError):
        durable_down.create_user({"username": "root", "passwordHash": "h2"})


def test_stores_are_not_reconciled(app, storage):
    storage.create("articles", article_payload())
    app.config["DURABLE_STORE_ENABLED"] = False
    assert storage.get_all("articles") == []
    app.config["DURABLE_STORE_ENABLED"] = True
    assert len(storage.get_all("articles")) == 1
