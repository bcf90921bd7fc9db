from fastapi.testclient import TestClient

from bookgraph.main import create_app
from bookgraph.settings import Settings

from .conftest import wait_for_subscribers

CREATE_BOOK = """
mutation Create($authorId: ID!, $title: String!, $releaseYear: Int!) {
  createBook(authorId: $authorId, title: $title, releaseYear: $releaseYear) {
    id title releaseYear authorId
  }
}
"""

SUBSCRIBE = "subscription { bookAdded { id title releaseYear authorId } }"


def gql(client, query, **variables):
    resp = client.post("/graphql", json={"query": query, "variables": variables or None})
    assert resp.status_code == 200
    body = resp.json()
    assert "errors" not in body, body
    return body["data"]


def _open_subscription(ws, sub_id="1"):
    ws.send_json({"type": "connection_init"})
    assert ws.receive_json()["type"] == "connection_ack"
    ws.send_json({"id": sub_id, "type": "subscribe", "payload": {"query": SUBSCRIBE}})


def test_health_endpoints(client):
    assert client.get("/").json() == {"status": "ok", "graphql": "/graphql"}
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy", "books": 2, "authors": 2}


def test_query_over_http(client):
    data = gql(client, '{ book(id: "1") { title author { name } } }')
    assert data == {"book": {"title": "Book 1", "author": {"name": "Author 1"}}}


def test_create_update_delete_over_http(client, store):
    created = gql(client, CREATE_BOOK, authorId="2", title="HTTP", releaseYear=2023)["createBook"]
    assert created == {"id": "3", "title": "HTTP", "releaseYear": 2023, "authorId": "2"}

    updated = gql(
        client,
        'mutation { updateBook(id: "3", authorId: "1", title: "HTTP 2", releaseYear: 2024) { title authorId } }',
    )
    assert updated == {"updateBook": {"title": "HTTP 2", "authorId": "1"}}

    deleted = gql(client, 'mutation { deleteBook(id: "3") { message } }')
    assert deleted == {"deleteBook": {"message": "Book deleted successfully"}}
    assert [b.id for b in store.books] == ["1", "2"]


def test_invalid_document_reports_errors(client):
    resp = client.post("/graphql", json={"query": "{ books { isbn } }"})
    body = resp.json()
    assert body["errors"]
    assert body.get("data") is None


def test_subscription_over_websocket(client, bus):
    with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as ws:
        _open_subscription(ws)
        wait_for_subscribers(bus, 1)

        created = gql(client, CREATE_BOOK, authorId="1", title="T", releaseYear=1999)["createBook"]

        message = ws.receive_json()
        assert message["type"] == "next"
        assert message["id"] == "1"
        assert message["payload"]["data"] == {"bookAdded": created}

        ws.send_json({"id": "1", "type": "complete"})


def test_subscription_over_legacy_graphql_ws(client, bus):
    with client.websocket_connect("/graphql", subprotocols=["graphql-ws"]) as ws:
        ws.send_json({"type": "connection_init"})
        assert ws.receive_json()["type"] == "connection_ack"
        ws.send_json({"id": "1", "type": "start", "payload": {"query": SUBSCRIBE}})
        wait_for_subscribers(bus, 1)

        created = gql(client, CREATE_BOOK, authorId="2", title="Legacy", releaseYear=2003)["createBook"]

        message = ws.receive_json()
        assert message["type"] == "data"
        assert message["id"] == "1"
        assert message["payload"]["data"] == {"bookAdded": created}

        ws.send_json({"id": "1", "type": "stop"})


def test_two_websocket_subscribers(client, bus):
    with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as one:
        with client.websocket_connect("/graphql", subprotocols=["graphql-transport-ws"]) as two:
            _open_subscription(one)
            _open_subscription(two)
            wait_for_subscribers(bus, 2)

            created = gql(client, CREATE_BOOK, authorId="2", title="Fan", releaseYear=2000)["createBook"]

            for ws in (one, two):
                assert ws.receive_json()["payload"]["data"] == {"bookAdded": created}


def test_shutdown_closes_bus(store, bus):
    app = create_app(Settings(), store=store, bus=bus)
    with TestClient(app):
        assert not bus.closed
    assert bus.closed


def test_custom_graphql_path(store, bus):
    app = create_app(Settings(graphql_path="/api/graphql", graphql_ide=None), store=store, bus=bus)
    with TestClient(app) as client:
        resp = client.post("/api/graphql", json={"query": "{ authors { id } }"})
        assert resp.json()["data"] == {"authors": [{"id": "1"}, {"id": "2"}]}
        assert client.post("/graphql", json={"query": "{ authors { id } }"}).status_code == 404
