import pytest
from sqlalchemy import inspect
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError
from sqlalchemy.schema import CreateIndex

from extensions import db
from models.article import Article
from models.base import search_vector
from models.country import Country
from models.news import News
from models.scholarship import Scholarship
from models.university import University
from schemas import validate
from services.errors import BackendUnavailable, ConflictError
from services.storage_base import SEARCH_FIELDS

from conftest import article_payload, scholarship_payload


@pytest.fixture()
def durable(storage):
    return storage.durable


def _create(durable, kind, payload):
    return durable.create(kind, validate(kind, payload))


def test_create_exposes_public_id_only(durable):
    created = _create(durable, "scholarships", scholarship_payload())
    assert isinstance(created["id"], int)
    for internal in ("version_id", "versionId", "created_at", "createdAt", "updatedAt"):
        assert internal not in created
    assert durable.get_by_id("scholarships", created["id"]) == created
    assert durable.get_by_slug("scholarships", "test-grant") == created


def test_not_found_is_none(durable):
    assert durable.get_by_id("articles", 12345) is None
    assert durable.get_by_id("articles", "abc") is None
    assert durable.get_by_slug("articles", "missing") is None
    assert durable.delete("articles", 12345) is False
    assert durable.update("articles", 12345, {"title": "x"}) is None


def test_slug_collision_is_disambiguated(durable):
    slugs = [_create(durable, "scholarships", scholarship_payload())["slug"] for _ in range(3)]
    assert slugs == ["test-grant", "test-grant-2", "test-grant-3"]


def test_update_keeps_own_slug(durable):
    art = _create(durable, "articles", article_payload())
    data = validate("articles", dict(article_payload(), summary="Updated"))
    updated = durable.update("articles", art["id"], data)
    assert updated["summary"] == "Updated"
    assert updated["slug"] == art["slug"]


def test_update_to_taken_slug_is_disambiguated(durable):
    alpha = _create(durable, "scholarships", scholarship_payload(title="Alpha Grant"))
    _create(durable, "scholarships", scholarship_payload(title="Beta Grant"))
    updated = durable.update("scholarships", alpha["id"], {"slug": "beta-grant"})
    assert updated["slug"] == "beta-grant-2"
    assert durable.get_by_slug("scholarships", "beta-grant")["title"] == "Beta Grant"
    assert durable.get_by_id("scholarships", alpha["id"])["slug"] == "beta-grant-2"


@pytest.mark.parametrize("kind, payload, patch", [
    ("articles", article_payload(), {"category": "Visa Tips"}),
    ("countries", {"name": "Japan", "description": "d", "universities": 780, "acceptanceRate": "x"},
     {"currency": "JPY"}),
    ("news", {"title": "N", "content": "c", "summary": "s", "publishDate": "2025-01-01", "category": "x"},
     {"isFeatured": True}),
    ("menu", {"title": "Blog", "url": "/blog"}, {"url": "/journal"}),
])
def test_full_crud_on_every_kind(durable, kind, payload, patch):
    created = _create(durable, kind, payload)
    data = validate(kind, dict(payload, **patch))
    updated = durable.update(kind, created["id"], data)
    for k, v in patch.items():
        assert updated[k] == v
    assert durable.get_by_id(kind, created["id"]) == updated
    assert durable.delete(kind, created["id"]) is True
    assert durable.get_by_id(kind, created["id"]) is None


def test_ordering(durable):
    for name, rank in (("Unranked", None), ("Fifth", 5), ("First", 1)):
        _create(durable, "universities", {"name": name, "description": "d", "country": "x", "ranking": rank})
    assert [u["name"] for u in durable.get_all("universities")] == ["First", "Fifth", "Unranked"]

    for date in ("2025-01-01", "2025-06-01", "2025-03-01"):
        _create(durable, "news", {
            "title": f"News {date}", "content": "c", "summary": "s", "publishDate": date, "category": "x",
            "isFeatured": date != "2025-03-01",
        })
    assert [n["publishDate"] for n in durable.get_all("news")] == ["2025-06-01", "2025-03-01", "2025-01-01"]
    assert [n["publishDate"] for n in durable.get_featured_news()] == ["2025-06-01", "2025-01-01"]


def test_search_falls_back_to_substring_on_sqlite(durable):
    for i in range(4):
        _create(durable, "scholarships", scholarship_payload(title=f"Grant {i}", country="Japan"))
    _create(durable, "scholarships", scholarship_payload(title="Other", description="Unrelated", country="Peru"))
    assert len(durable.search_kind("scholarships", "gRaNt", 10)) == 4
    assert len(durable.search_kind("scholarships", "grant", 2)) == 2
    assert [s["title"] for s in durable.search_kind("scholarships", "peru", 10)] == ["Other"]
    assert durable.search_kind("scholarships", "100%", 10) == []


def test_duplicate_email_is_a_conflict(durable):
    user = {"fullName": "A", "email": "a@example.com", "passwordHash": "h"}
    durable.create_active_user(user)
    with pytest.raises(ConflictError):
        durable.create_active_user(user)
    # session 回滚后仍可继续使用
    assert durable.get_active_user_by_email("A@example.com")["fullName"] == "A"


def test_likes_saves_and_comments(durable):
    art = _create(durable, "articles", article_payload())
    user = durable.create_active_user({"fullName": "A", "email": "a@example.com", "passwordHash": "h"})

    assert durable.like_article(art["id"], user["id"]) == 1
    assert durable.like_article(art["id"], user["id"]) == 1
    assert durable.get_by_id("articles", art["id"])["likes"] == [user["id"]]
    assert durable.unlike_article(art["id"], user["id"]) == 0
    assert durable.has_liked(art["id"], user["id"]) is False

    assert durable.save_item(user["id"], "articles", art["id"]) == [art["id"]]
    assert durable.save_item(user["id"], "articles", art["id"]) == [art["id"]]
    assert durable.get_active_user(user["id"])["savedArticles"] == [art["id"]]
    assert durable.save_item(user["id"], "articles", 999) is None

    c = durable.add_comment(user["id"], art["id"], "hello")
    assert c["articleId"] == art["id"] and c["userId"] == user["id"]
    assert durable.update_comment(c["id"], "edited")["content"] == "edited"
    assert [x["id"] for x in durable.comments_by_user(user["id"])] == [c["id"]]

    # 删文章时评论 / 收藏一起清掉
    assert durable.delete("articles", art["id"]) is True
    assert durable.comments_by_user(user["id"]) == []
    assert durable.get_active_user(user["id"])["savedArticles"] == []


def test_clear_removes_rows(durable):
    _create(durable, "scholarships", scholarship_payload())
    _create(durable, "scholarships", scholarship_payload())
    assert durable.clear("scholarships") == 2
    assert durable.get_all("scholarships") == []


def test_disabled_store_raises_backend_unavailable(app, durable):
    app.config["DURABLE_STORE_ENABLED"] = False
    with pytest.raises(BackendUnavailable):
        durable.get_all("scholarships")


def test_infrastructure_error_invalidates_connection(durable, monkeypatch):
    assert durable.get_all("scholarships") == []
    assert durable.connection.ready

    def boom(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("server closed the connection"))

    monkeypatch.setattr(type(db.session), "get", boom)
    with pytest.raises(BackendUnavailable):
        durable.get_by_id("scholarships", 1)
    assert not durable.connection.ready


@pytest.mark.parametrize("model, kind", [
    (Scholarship, "scholarships"),
    (Article, "articles"),
    (Country, "countries"),
    (University, "universities"),
    (News, "news"),
])
def test_search_index_matches_query_expression(model, kind):
    idx = next(i for i in model.__table__.indexes if i.name == f"ix_{model.__tablename__}_search")
    assert idx.dialect_options["postgresql"]["using"] == "gin"

    pg = postgresql.dialect()
    indexed = str(idx.expressions[0].compile(dialect=pg))
    queried = str(search_vector(*(getattr(model, f) for f in SEARCH_FIELDS[kind])).compile(dialect=pg))
    assert indexed == queried
    assert "concat_ws" not in indexed
    assert "coalesce" in indexed


def test_search_index_is_postgres_only(durable):
    durable.get_all("articles")
    ddl = str(CreateIndex(next(i for i in Article.__table__.indexes if i.name == "ix_articles_search"))
              .compile(dialect=postgresql.dialect()))
    assert "USING gin" in ddl
    # sqlite 上不建该索引
    assert "ix_articles_search" not in {ix["name"] for ix in inspect(db.engine).get_indexes("articles")}
