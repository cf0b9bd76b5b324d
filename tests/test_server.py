"""End-to-end tests for the webhook endpoint."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from trellocord.common import compute_trello_digest
from trellocord.models import ActionKind
from trellocord.relay.server import create_app

from helpers import CALLBACK_URL, GRAPHICS_BOARD, SECRET, UNROUTED_BOARD, make_payload


@pytest.fixture
def client(config, service):
    return TestClient(create_app(config, service))


def post_signed(client, payload=None, body=None, signature=None):
    body = body if body is not None else json.dumps(payload).encode("utf-8")
    if signature is None:
        signature = compute_trello_digest(body, CALLBACK_URL, SECRET)
    return client.post("/api", content=body, headers={
        "content-type": "application/json",
        "x-trello-webhook": signature,
    })


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_head_probe(client):
    assert client.head("/api").status_code == 200


def test_bad_signature_is_unauthorized(client, remote):
    response = post_signed(client, make_payload(ActionKind.CARD_CREATED.value), signature="bm90LXRoZS1kaWdlc3Q=")

    assert response.status_code == 401
    assert remote.requests == []


def test_missing_signature_is_unauthorized(client, remote):
    body = json.dumps(make_payload(ActionKind.CARD_CREATED.value))

    response = client.post("/api", content=body, headers={"content-type": "application/json"})

    assert response.status_code == 401
    assert remote.requests == []


def test_signature_over_other_body_is_unauthorized(client, remote):
    signed = json.dumps(make_payload(ActionKind.CARD_CREATED.value)).encode()
    sent = json.dumps(make_payload(ActionKind.COMMENT_ADDED.value)).encode()

    response = post_signed(client, body=sent, signature=compute_trello_digest(signed, CALLBACK_URL, SECRET))

    assert response.status_code == 401
    assert remote.requests == []


def test_unhandled_action_is_soft_rejected(client, remote):
    response = post_signed(client, make_payload("action_changed_description_of_card"))

    assert response.status_code == 200
    assert response.text == "Wrong Action Type"
    assert remote.requests == []


def test_filtered_board_action_is_soft_rejected(client, remote):
    response = post_signed(client, make_payload(ActionKind.CARD_CREATED.value, board_id=GRAPHICS_BOARD))

    assert response.status_code == 200
    assert response.text == "Wrong Action Type"
    assert remote.requests == []


def test_malformed_payload_answers_200(client, remote):
    response = post_signed(client, body=b"{not json")

    assert response.status_code == 200
    assert response.text == "Wrong Action Type"
    assert remote.requests == []


def test_non_ascii_signature_is_unauthorized(client, remote):
    body = json.dumps(make_payload(ActionKind.CARD_CREATED.value)).encode("utf-8")

    response = client.post("/api", content=body, headers={
        "content-type": "application/json",
        "x-trello-webhook": b"caf\xe9",
    })

    assert response.status_code == 401
    assert remote.requests == []


def test_signed_body_with_invalid_utf8_answers_200(client, remote):
    response = post_signed(client, body=b'{"a": "\xff\xfe"}')

    assert response.status_code == 200
    assert response.text == "Wrong Action Type"
    assert remote.requests == []


def test_comment_is_relayed(client, remote):
    payload = make_payload(ActionKind.COMMENT_ADDED.value, data={"text": "@alice please review"})

    response = post_signed(client, payload)

    assert response.status_code == 200
    assert response.text == "OK"
    assert len(remote.sends) == 1
    sent = json.loads(remote.sends[0].content)
    assert sent["content"] == "<@123>"
    assert sent["embeds"][0]["description"] == "<@123> please review"


def test_archive_answers_200_without_sending(client, remote, store):
    asyncio.run(store.put("card1", "900"))

    response = post_signed(client, make_payload(ActionKind.CARD_ARCHIVED.value, board_id=GRAPHICS_BOARD))

    assert response.status_code == 200
    assert len(remote.deletes) == 1
    assert remote.sends == []


def test_unconfigured_board_answers_200(client, remote):
    response = post_signed(client, make_payload(ActionKind.CARD_CREATED.value, board_id=UNROUTED_BOARD))

    assert response.status_code == 200
    assert response.text == "Configuration Error"
    assert remote.sends == []


def test_accepted_webhook_is_logged(client, log_dir):
    post_signed(client, make_payload(ActionKind.CARD_CREATED.value))

    assert any(p.name.startswith("webhook-") for p in log_dir.iterdir())
