#!/usr/bin/env python3
"""
Send a signed Trello-style webhook to a locally running relay server.
"""

import json
import os
import sys

import httpx
from dotenv import load_dotenv

from trellocord.common import compute_trello_digest

# Load environment variables
load_dotenv()


def sample_payload(board_id: str) -> dict:
    """A comment action shaped like the ones Trello delivers."""
    return {
        "model": {
            "id": board_id,
            "name": "Design",
            "shortUrl": "https://trello.com/b/xyz789",
        },
        "action": {
            "id": "6632f0a1b2c3d4e5f6a7b8c9",
            "type": "commentCard",
            "date": "2024-05-02T08:15:30.123Z",
            "display": {"translationKey": "action_comment_on_card"},
            "data": {
                "text": "Testing the relay, @alice",
                "card": {"id": "6632e0a1b2c3d4e5f6a7b8c0", "name": "Summer Poster", "shortLink": "Qw3rTy12"},
                "list": {"id": "6632d0a1b2c3d4e5f6a7b8c1", "name": "Review"},
            },
            "memberCreator": {
                "id": "5a1b2c3d4e5f6a7b8c9d0e1f",
                "fullName": "Alice Smith",
                "avatarUrl": "https://trello-members.s3.amazonaws.com/5a1b2c3d4e5f6a7b8c9d0e1f/0123456789abcdef",
            },
        },
    }


def main():
    secret = os.getenv("API_SECRET")
    callback_url = os.getenv("END_POINT", "")
    if not secret:
        print("Error: API_SECRET not found in environment variables")
        sys.exit(1)

    board_id = sys.argv[1] if len(sys.argv) > 1 else "5f1e2d3c4b5a697887766554"
    url = sys.argv[2] if len(sys.argv) > 2 else "http://localhost:4500/api"

    body = json.dumps(sample_payload(board_id)).encode('utf-8')
    signature = compute_trello_digest(body, callback_url, secret)

    print(f"Board: {board_id}")
    print(f"Payload length: {len(body)} bytes")
    print(f"x-trello-webhook: {signature}")

    try:
        response = httpx.post(
            url,
            headers={
                "x-trello-webhook": signature,
                "Content-Type": "application/json"
            },
            content=body,
            timeout=10
        )

        print(f"\nResponse status: {response.status_code}")
        print(f"Response body: {response.text}")

    except httpx.ConnectError:
        print(f"\nError: Could not connect to server. Make sure the relay is running at {url}")


if __name__ == "__main__":
    main()
