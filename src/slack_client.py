"""Slack client for delivering composed notifications."""

from __future__ import annotations

import json
import logging

import requests

from models import ComposedMessage

logger = logging.getLogger(__name__)

POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"


class SlackDeliveryError(Exception):
    """Raised when Slack does not accept a message."""


class SlackClient:
    """Client for sending messages to Slack via the chat.postMessage API."""

    def __init__(self, bot_token: str, timeout: int = 10) -> None:
        """
        Initialize Slack client with bot token.

        Args:
            bot_token: Slack Bot User OAuth Token (xoxb-...)
            timeout: Request timeout in seconds (default: 10)
        """
        self.bot_token = bot_token
        self.timeout = timeout

    def deliver(self, channel: str, message: ComposedMessage) -> str:
        """
        Post a composed message to a channel.

        Args:
            channel: Slack channel ID
            message: BlockMessage or TextMessage

        Returns:
            Timestamp (ts) of the posted message

        Raises:
            SlackDeliveryError: If the HTTP call fails or Slack reports ok=false
            requests.RequestException: On network errors
        """
        payload = message.to_payload(channel)
        response = requests.post(
            POST_MESSAGE_URL,
            json=payload,
            headers={
                "Authorization": f"Bearer {self.bot_token}",
                "Content-Type": "application/json; charset=utf-8",
            },
            timeout=self.timeout,
        )

        if response.status_code != 200:
            msg = f"Failed to send Slack message: {response.status_code} - {response.text}"
            raise SlackDeliveryError(msg)

        try:
            body = response.json()
        except ValueError as e:
            msg = f"Failed to send Slack message: invalid response body - {response.text}"
            raise SlackDeliveryError(msg) from e

        # chat.postMessage reports most errors with HTTP 200 and ok=false
        if not body.get("ok"):
            msg = f"Failed to send Slack message to {channel}: {body.get('error', 'unknown_error')}"
            raise SlackDeliveryError(msg)

        ts = body.get("ts", "")
        logger.debug(f"Posted message to {channel} (ts={ts})")
        return ts


class DryRunSlackClient:
    """Prints payloads to stdout instead of sending them."""

    def deliver(self, channel: str, message: ComposedMessage) -> str:
        payload = message.to_payload(channel)
        json_output = json.dumps(payload, indent=2, ensure_ascii=False)

        print("\n" + "=" * 80)
        print(f"DRY RUN MODE - chat.postMessage payload for {channel}")
        print("=" * 80)
        print(json_output)
        print("=" * 80)
        if "blocks" in payload:
            print(f"\nℹ️  Block count: {len(payload['blocks'])}/50 (max limit)")
            print("🔗 Test visually: https://app.slack.com/block-kit-builder")
        print()

        return "dry-run"
