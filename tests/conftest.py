import pytest

from app import create_app
from extensions import db
from services.auth import ADMIN, USER, hash_password, issue_token
from services.router import get_storage


@pytest.fixture()
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def storage(app):
    return get_storage()


@pytest.fixture()
def durable_down(app, storage):
    """让持久存储在本用例内不可用，所有调用都走内存存储"""
    app.config["DURABLE_STORE_ENABLED"] = False
    storage.durable.connection.reset()
    yield storage
    app.config["DURABLE_STORE_ENABLED"] = True


@pytest.fixture()
def admin(storage):
    return storage.create_user({
        "username": "admin",
        "passwordHash": hash_password("superpassword123"),
        "isAdmin": True,
    })


@pytest.fixture()
def admin_headers(admin):
    return {"x-auth-token": issue_token(ADMIN, admin["id"])}


@pytest.fixture()
def user(storage):
    return storage.create_active_user({
        "fullName": "Ada Lovelace",
        "email": "ada@example.com",
        "passwordHash": hash_password("engine123"),
    })


@pytest.fixture()
def user_headers(user):
    return {"x-auth-token": issue_token(USER, user["id"])}


def scholarship_payload(**overrides):
    data = {
        "title": "Test Grant",
        "description": "A grant used in tests.",
        "amount": "$1,000",
        "deadline": "June 1, 2026",
        "country": "Canada",
        "tags": ["Merit-Based"],
    }
    data.update(overrides)
    return data


def article_payload(**overrides):
    data = {
        "title": "Packing for a Semester Abroad",
        "content": "Bring adapters, copies of documents and a warm jacket.",
        "summary": "What to pack.",
        "publishDate": "2025-07-01",
        "author": "Jo Park",
        "category": "Study Guide",
    }
    data.update(overrides)
    return data
