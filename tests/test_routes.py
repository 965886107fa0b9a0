"""
Unit tests for the /articles routes — in-memory SQLite database behind TestClient.

Run with: pytest tests/test_routes.py -v
"""
from datetime import datetime, timezone

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.models import Article
from app.routes.articles import router

# Minimal test app — no lifespan, tables are created by the fixture
_app = FastAPI()
_app.include_router(router)

CONTRACT_FIELDS = {"id", "title", "description", "body", "published", "created_at", "updated_at"}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def db():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = Session()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def client(db):
    _app.dependency_overrides[get_db] = lambda: db
    yield TestClient(_app)
    _app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_payload(**kwargs) -> dict:
    """Returns a valid create payload dict, overridable via kwargs."""
    defaults = {
        "title": "Test Article",
        "description": None,
        "body": "Some body text",
    }
    defaults.update(kwargs)
    return defaults


def insert_article(db, **kwargs) -> Article:
    """Insert an Article directly into the DB, bypassing the store."""
    now = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
    defaults = {
        "title": "Stored Article",
        "description": "A description",
        "body": "Stored body",
        "published": False,
        "created_at": now,
        "updated_at": now,
    }
    defaults.update(kwargs)
    article = Article(**defaults)
    db.add(article)
    db.commit()
    db.refresh(article)
    return article


# ---------------------------------------------------------------------------
# POST /articles
# ---------------------------------------------------------------------------

class TestCreate:
    def test_returns_201_and_created_article(self, client):
        response = client.post("/articles", json=make_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Test Article"
        assert body["published"] is False
        assert body["created_at"] == body["updated_at"]

    def test_response_shape_is_exactly_contract(self, client):
        article = client.post("/articles", json=make_payload()).json()
        assert set(article.keys()) == CONTRACT_FIELDS

    def test_duplicate_title_returns_409(self, client, db):
        client.post("/articles", json=make_payload(title="Dup"))
        response = client.post("/articles", json=make_payload(title="Dup"))

        assert response.status_code == 409
        assert "Dup" in response.json()["detail"]
        assert db.query(Article).filter(Article.title == "Dup").count() == 1

    def test_missing_title_returns_422(self, client):
        response = client.post("/articles", json={"body": "No title"})
        assert response.status_code == 422

    def test_whitespace_only_title_returns_422(self, client):
        response = client.post("/articles", json=make_payload(title="   "))
        assert response.status_code == 422

    def test_missing_body_returns_422(self, client):
        response = client.post("/articles", json={"title": "No body"})
        assert response.status_code == 422

    def test_description_is_optional(self, client):
        response = client.post("/articles", json={"title": "Bare", "body": "x"})
        assert response.status_code == 201
        assert response.json()["description"] is None


# ---------------------------------------------------------------------------
# GET /articles and GET /articles/drafts
# ---------------------------------------------------------------------------

class TestLists:
    def test_returns_empty_list_when_no_articles(self, client):
        response = client.get("/articles")
        assert response.status_code == 200
        assert response.json() == []

    def test_published_list_excludes_drafts(self, client, db):
        insert_article(db, title="Live", published=True)
        insert_article(db, title="Hidden", published=False)

        titles = [a["title"] for a in client.get("/articles").json()]
        assert titles == ["Live"]

    def test_drafts_list_excludes_published(self, client, db):
        insert_article(db, title="Live", published=True)
        insert_article(db, title="Hidden", published=False)

        titles = [a["title"] for a in client.get("/articles/drafts").json()]
        assert titles == ["Hidden"]

    def test_drafts_path_is_not_treated_as_id(self, client):
        response = client.get("/articles/drafts")
        assert response.status_code == 200


# ---------------------------------------------------------------------------
# GET /articles/{id}
# ---------------------------------------------------------------------------

class TestGet:
    def test_returns_article(self, client, db):
        article = insert_article(db)
        response = client.get(f"/articles/{article.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Stored Article"

    def test_unknown_id_returns_404(self, client):
        response = client.get("/articles/999")
        assert response.status_code == 404

    def test_id_beyond_64_bits_returns_404_on_every_verb(self, client):
        url = "/articles/99999999999999999999"
        assert client.get(url).status_code == 404
        assert client.patch(url, json={"published": True}).status_code == 404
        assert client.delete(url).status_code == 404

    def test_timestamps_carry_utc_offset(self, client, db):
        article = insert_article(db)
        body = client.get(f"/articles/{article.id}").json()
        assert body["created_at"].endswith("Z") or body["created_at"].endswith("+00:00")

    def test_non_integer_id_returns_422(self, client):
        response = client.get("/articles/not-a-number")
        assert response.status_code == 422


# ---------------------------------------------------------------------------
# PATCH /articles/{id}
# ---------------------------------------------------------------------------

class TestUpdate:
    def test_only_supplied_fields_change(self, client, db):
        article = insert_article(db)
        response = client.patch(f"/articles/{article.id}", json={"published": True})

        body = response.json()
        assert response.status_code == 200
        assert body["published"] is True
        assert body["title"] == "Stored Article"
        assert body["description"] == "A description"
        assert body["updated_at"] > body["created_at"]

    def test_null_description_clears_it(self, client, db):
        article = insert_article(db)
        response = client.patch(f"/articles/{article.id}", json={"description": None})
        assert response.json()["description"] is None

    def test_null_title_returns_422(self, client, db):
        article = insert_article(db)
        response = client.patch(f"/articles/{article.id}", json={"title": None})
        assert response.status_code == 422

    def test_unknown_id_returns_404(self, client):
        response = client.patch("/articles/999", json={"title": "x"})
        assert response.status_code == 404

    def test_conflicting_title_returns_409(self, client, db):
        insert_article(db, title="Taken")
        other = insert_article(db, title="Mine")

        response = client.patch(f"/articles/{other.id}", json={"title": "Taken"})

        assert response.status_code == 409
        assert client.get(f"/articles/{other.id}").json()["title"] == "Mine"


# ---------------------------------------------------------------------------
# DELETE /articles/{id}
# ---------------------------------------------------------------------------

class TestDelete:
    def test_returns_removed_article(self, client, db):
        article = insert_article(db, title="Doomed")
        response = client.delete(f"/articles/{article.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Doomed"

    def test_article_is_gone_afterwards(self, client, db):
        article = insert_article(db)
        client.delete(f"/articles/{article.id}")

        assert client.get(f"/articles/{article.id}").status_code == 404

    def test_unknown_id_returns_404(self, client):
        response = client.delete("/articles/999")
        assert response.status_code == 404
