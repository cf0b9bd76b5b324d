"""Shared builders and fakes for the trellocord tests."""

import json
from pathlib import Path
from typing import Dict, List, Optional, Set

import httpx
from redis.exceptions import ConnectionError as RedisConnectionError

from trellocord.config import BoardPolicy, Destination, RelayConfig, TrelloConfig
from trellocord.models import ActionKind, extract_event, parse_webhook

TRELLO_HOST = "api.trello.com"
GRAPHICS_BOARD = "62d5f89049b4ce140f831fec"
GENERAL_BOARD = "5f1e2d3c4b5a697887766554"
UNROUTED_BOARD = "000000000000000000000000"
GRAPHICS_HOOK = "https://discord.com/api/webhooks/111/graphics-token"
GENERAL_HOOK = "https://discord.com/api/webhooks/222/general-token"
CALLBACK_URL = "https://relay.example.net/api"
SECRET = "trello-secret"
PUBLIC_BASE_URL = "https://relay.example.net"
GALLERY_URL = "https://trello.com/b/krXSdDI3/kto-graphics"

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 64
TEXT_BYTES = b"this is definitely not an image"


def load_resource(name: str) -> dict:
    """Load a sample payload from the test resources."""
    path = Path(__file__).parent / "resources" / name
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def make_payload(translation_key: str, board_id: str = GENERAL_BOARD, data: Optional[dict] = None) -> dict:
    """Build a Trello webhook payload for the given action."""
    action_data = {
        "card": {"id": "card1", "name": "Summer Poster", "shortLink": "abc123", "idShort": 7},
        "list": {"id": "list1", "name": "Doing"},
        "board": {"id": board_id, "name": "Design"},
    }
    if data:
        action_data.update(data)
    return {
        "action": {
            "id": "action1",
            "idMemberCreator": "member1",
            "type": "someAction",
            "date": "2024-05-01T10:00:00.000Z",
            "display": {"translationKey": translation_key, "entities": {}},
            "data": action_data,
            "memberCreator": {
                "id": "member1",
                "username": "alice",
                "fullName": "Alice Smith",
                "avatarUrl": "https://trello-members.s3.amazonaws.com/member1/avatarhash",
            },
        },
        "model": {
            "id": board_id,
            "name": "Design",
            "shortUrl": "https://trello.com/b/xyz789",
        },
    }


def make_event(kind: ActionKind, board_id: str = GENERAL_BOARD, data: Optional[dict] = None):
    return extract_event(parse_webhook(make_payload(kind.value, board_id, data)))


def make_config(tmp_path: Path) -> RelayConfig:
    return RelayConfig(
        trello=TrelloConfig(key="key", token="token", secret=SECRET, callback_url=CALLBACK_URL),
        users={"alice": "123", "bob": "456"},
        destinations=[
            Destination(name="graphics", board_id=GRAPHICS_BOARD, hook=GRAPHICS_HOOK),
            Destination(name="general", board_id=GENERAL_BOARD, hook=GENERAL_HOOK),
        ],
        boards=[
            BoardPolicy(
                board_id=GRAPHICS_BOARD,
                allowed_actions=frozenset({ActionKind.LABEL_ADDED, ActionKind.CARD_ARCHIVED}),
                track_messages=True,
                release_label_color="green",
                release_label_text="Sent",
                release_title="New KTO Graphic!",
                gallery_url=GALLERY_URL,
            ),
        ],
        public_base_url=PUBLIC_BASE_URL,
        asset_dir=str(tmp_path / "img"),
    )


class FakeRedis:
    """In-memory stand-in for the handful of Redis set commands the store uses."""

    def __init__(self) -> None:
        self.sets: Dict[str, Set[str]] = {}
        self.closed = False
        self.fail_writes = False

    async def sadd(self, key: str, *values: str) -> int:
        if self.fail_writes:
            raise RedisConnectionError("Connection refused")
        members = self.sets.setdefault(key, set())
        added = len(set(values) - members)
        members.update(values)
        return added

    async def smembers(self, key: str) -> Set[str]:
        return set(self.sets.get(key, set()))

    async def srem(self, key: str, *values: str) -> int:
        members = self.sets.get(key, set())
        removed = len(members & set(values))
        members.difference_update(values)
        return removed

    async def aclose(self) -> None:
        self.closed = True


class FakeRemote:
    """Answers Trello and Discord calls and records every request."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.card: dict = {"id": "card1", "name": "Summer Poster", "cover": {"idAttachment": None, "scaled": None}}
        self.attachments: List[dict] = []
        self.downloads: Dict[str, bytes] = {}
        self.default_download = PNG_BYTES
        self.delete_status: Dict[str, int] = {}
        self.send_status = 200
        self.sent_ids: List[str] = []

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = request.url

        if request.method == "POST":
            if self.send_status != 200:
                return httpx.Response(self.send_status, json={"message": "error"})
            message_id = f"msg-{len(self.sent_ids) + 1}"
            self.sent_ids.append(message_id)
            return httpx.Response(200, json={"id": message_id, "type": 0})

        if request.method == "DELETE":
            message_id = url.path.rsplit("/", 1)[-1]
            return httpx.Response(self.delete_status.get(message_id, 204))

        if url.host == TRELLO_HOST:
            parts = url.path.split("/")
            if len(parts) == 4:
                return httpx.Response(200, json=self.card)
            if len(parts) == 5 and parts[4] == "attachments":
                return httpx.Response(200, json=self.attachments)

        plain_url = str(url.copy_with(query=None))
        return httpx.Response(200, content=self.downloads.get(plain_url, self.default_download))

    @property
    def sends(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]

    @property
    def deletes(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "DELETE"]

    @property
    def downloads_requested(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "GET" and "Authorization" in r.headers]
