import pytest
from fastapi.testclient import TestClient

import api as api_module
from library import LibraryManager
from notifications import RecordingNotifier


@pytest.fixture
def client(settings_factory):
    # Her test kendi katalog örneğini alır
    fresh = LibraryManager(RecordingNotifier(), settings_factory())
    api_module.app.dependency_overrides[api_module.get_manager] = lambda: fresh
    try:
        with TestClient(api_module.app) as test_client:
            yield test_client
    finally:
        api_module.app.dependency_overrides.clear()


GATSBY = {"title": "El Gran Gatsby", "author": "F. Scott Fitzgerald", "identifier": "123456789"}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"

def test_get_books_empty(client):
    response = client.get("/books")
    assert response.status_code == 200
    assert response.json() == []

def test_add_get_and_delete_book(client):
    response = client.post("/books", json=GATSBY)
    assert response.status_code == 201
    assert response.json() == GATSBY

    response = client.get("/books/123456789")
    assert response.status_code == 200
    assert response.json()["title"] == "El Gran Gatsby"

    response = client.delete("/books/123456789")
    assert response.status_code == 200

    assert client.get("/books/123456789").status_code == 404
    assert client.delete("/books/123456789").status_code == 404

def test_duplicate_book_conflict(client):
    client.post("/books", json=GATSBY)
    response = client.post("/books", json=GATSBY)
    assert response.status_code == 409

def test_search_books(client):
    client.post("/books", json=GATSBY)
    client.post("/books", json={"title": "Ulysses", "author": "James Joyce", "identifier": "2"})

    titles = [b["title"] for b in client.get("/books", params={"title": "Gatsby"}).json()]
    assert titles == ["El Gran Gatsby"]
    authors = [b["author"] for b in client.get("/books", params={"author": "Joyce"}).json()]
    assert authors == ["James Joyce"]
    assert client.get("/books", params={"title": "Gatsby", "author": "Joyce"}).json() == []

def test_loan_and_return_flow(client):
    client.post("/observers", json={"user_id": "user01"})
    client.post("/books", json=GATSBY)

    response = client.post("/loans", json={"identifier": "123456789", "borrower": "user01"})
    assert response.status_code == 201
    assert response.json()["borrower"] == "user01"
    assert len(client.get("/loans", params={"borrower": "user01"}).json()) == 1

    response = client.post("/loans/return", json={"identifier": "123456789", "borrower": "user01"})
    assert response.status_code == 200
    assert client.get("/loans").json() == []

    response = client.post("/loans/return", json={"identifier": "123456789", "borrower": "user01"})
    assert response.status_code == 409

    messages = [n["message"] for n in client.get("/notifications").json()]
    assert messages == [
        "You have borrowed the book El Gran Gatsby",
        "You have returned the book with identifier 123456789. Thank you!",
    ]

def test_loan_missing_book_is_404(client):
    response = client.post("/loans", json={"identifier": "nonexistent-isbn", "borrower": "u1"})
    assert response.status_code == 404
    assert "does not exist" in response.json()["detail"]

def test_stats(client):
    client.post("/observers", json={"user_id": "user01"})
    client.post("/books", json=GATSBY)
    client.post("/loans", json={"identifier": "123456789", "borrower": "u1"})
    assert client.get("/stats").json() == {
        "total_books": 1,
        "unique_authors": 1,
        "active_loans": 1,
        "observers": 1,
    }
