from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

import yaml
from dotenv import load_dotenv

from .models.events import ActionKind

# Load environment variables from .env file
load_dotenv()

DEFAULT_ALLOWED_ACTIONS: FrozenSet[ActionKind] = frozenset(
    kind for kind in ActionKind if kind is not ActionKind.CARD_ARCHIVED
)


def _load_file(path: str | Path) -> dict:
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def _load_json(name: str) -> dict:
    raw = os.getenv(name, "").strip()
    if not raw:
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"{name} must be a JSON object")
    return data


@dataclass
class TrelloConfig:
    """Credentials for the Trello API and webhook verification."""

    key: str = ""
    token: str = ""
    secret: str = ""
    callback_url: str = ""
    api_url: str = "https://api.trello.com/1"

    def auth_params(self) -> Dict[str, str]:
        return {"key": self.key, "token": self.token}

    def oauth_header(self) -> Dict[str, str]:
        return {
            "Authorization": f'OAuth oauth_consumer_key="{self.key}", oauth_token="{self.token}"'
        }


@dataclass
class Destination:
    """A Discord webhook that receives the messages of one Trello board."""

    name: str
    board_id: str
    hook: str


@dataclass
class BoardPolicy:
    """Routing rules for a single Trello board."""

    board_id: str
    allowed_actions: FrozenSet[ActionKind] = DEFAULT_ALLOWED_ACTIONS
    track_messages: bool = False
    release_label_color: Optional[str] = None
    release_label_text: Optional[str] = None
    release_title: str = "New Graphic!"
    gallery_url: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "BoardPolicy":
        data = data.copy()
        actions = data.pop("allowed_actions", None)
        policy = cls(**data)
        if actions is not None:
            policy.allowed_actions = frozenset(ActionKind(a) for a in actions)
        return policy

    def allows(self, kind: ActionKind) -> bool:
        return kind in self.allowed_actions

    def is_release_label(self, color: Optional[str], text: Optional[str]) -> bool:
        if self.release_label_color is None or self.release_label_text is None:
            return False
        return color == self.release_label_color and text == self.release_label_text


@dataclass
class RelayConfig:
    """Top level application configuration."""

    trello: TrelloConfig = field(default_factory=TrelloConfig)
    users: Dict[str, str] = field(default_factory=dict)
    destinations: List[Destination] = field(default_factory=list)
    boards: List[BoardPolicy] = field(default_factory=list)

    redis_url: str = "redis://localhost:6379"
    public_base_url: str = "http://localhost:4500"
    asset_dir: str = "public/img"
    footer_text: str = "♥ Nahana"
    request_timeout: float = 10.0

    # Server settings
    host: str = "0.0.0.0"
    port: int = 4500
    log_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Create configuration from environment variables."""
        trello = TrelloConfig(
            key=os.getenv("API_KEY", ""),
            token=os.getenv("API_TOKEN", ""),
            secret=os.getenv("API_SECRET", ""),
            callback_url=os.getenv("END_POINT", ""),
        )

        destinations = [
            Destination(name=name, board_id=str(entry["trelloId"]), hook=entry["hook"])
            for name, entry in _load_json("HOOKS").items()
        ]
        users = {name: str(discord_id) for name, discord_id in _load_json("USERS").items()}

        boards: List[BoardPolicy] = []
        boards_file = os.getenv("TRELLOCORD_BOARDS_FILE", "boards.yml")
        if Path(boards_file).exists():
            data = _load_file(boards_file)
            boards = [BoardPolicy.from_dict(b) for b in data.get("boards", [])]

        return cls(
            trello=trello,
            users=users,
            destinations=destinations,
            boards=boards,
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379"),
            public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:4500").rstrip("/"),
            asset_dir=os.getenv("ASSET_DIR", "public/img"),
            footer_text=os.getenv("FOOTER_TEXT", "♥ Nahana"),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT", "10")),
            host=os.getenv("TRELLOCORD_HOST", "0.0.0.0"),
            port=int(os.getenv("TRELLOCORD_PORT", "4500")),
            log_dir=os.getenv("TRELLOCORD_LOG_DIR", "logs"),
        )

    def policy_for(self, board_id: str) -> BoardPolicy:
        """Return the policy for the given board, or the default policy."""

        for policy in self.boards:
            if policy.board_id == board_id:
                return policy
        return BoardPolicy(board_id=board_id)

    def find_destination(self, board_id: str) -> Optional[Destination]:
        """Return the Discord destination for the given board ID."""

        for destination in self.destinations:
            if destination.board_id == board_id:
                return destination
        return None
