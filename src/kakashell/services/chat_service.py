"""Chat service: OpenAI-compatible chat completions with a rolling context."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

import requests

from kakashell.core.exceptions import ChatError
from kakashell.models.message import Message

logger = logging.getLogger(__name__)

RECENT_PREFIX = "Recent interactions:"


class ChatService:
    """Sends questions to the chat endpoint and keeps the conversation short.

    ``context`` is the persistent message list sent with every request;
    ``recent_interactions`` is a bounded log of the latest questions and
    command runs, summarized into the context as a single user message.
    """

    def __init__(self, config: dict[str, Any], session: requests.Session | None = None) -> None:
        openai_cfg = config.get("openai", {})
        assistant_cfg = config.get("assistant", {})
        self.api_key: str = openai_cfg.get("api_key", "")
        self.api_base: str = openai_cfg.get("api_base", "")
        self.model: str = openai_cfg.get("model", "")
        self.timeout: float = float(openai_cfg.get("timeout", 60))
        self.system_prompt: str = assistant_cfg.get("system_prompt", "")
        self.max_recent_interactions: int = int(assistant_cfg.get("max_recent_interactions", 5))
        self.max_openai_context: int = int(assistant_cfg.get("max_openai_context", 10))

        self.session = session or requests.Session()
        self.context: list[Message] = [Message(role="system", content=self.system_prompt)]
        self.recent_interactions: deque[str] = deque()

    def build_messages(self, prompt: str) -> list[Message]:
        """Assemble the request messages for ``prompt``."""
        messages = list(self.context)
        if not messages:
            messages.append(Message(role="system", content=self.system_prompt))

        if self.recent_interactions:
            history = "\n".join(self.recent_interactions)
            messages.append(Message(
                role="user",
                content=(
                    f"{RECENT_PREFIX}\n{history}\n"
                    "Please consider this context for the following question about Linux commands."
                ),
            ))

        messages.append(Message(role="user", content=prompt))
        return messages

    def ask(self, prompt: str) -> str:
        """Send ``prompt`` and return the assistant's answer text."""
        if not self.api_key:
            raise ChatError("No API key configured. Set openai.api_key or OPENAI_API_KEY.")

        payload = {
            "model": self.model,
            "messages": [m.model_dump() for m in self.build_messages(prompt)],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        logger.info("POST %s model=%s messages=%d", self.api_base, self.model, len(payload["messages"]))
        try:
            response = self.session.post(self.api_base, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("chat request failed: %s", e)
            raise ChatError(f"Failed to send request: {e}") from e

        body = response.text
        if not response.ok:
            raise ChatError(f"API request failed with status {response.status_code}: {body}")

        try:
            data = response.json()
        except ValueError as e:
            raise ChatError(f"Failed to parse API response: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str):
            raise ChatError("No response content from AI")
        return content

    def update_context(self, user_input: str, response: str) -> None:
        """Record an exchange in the context, then trim it to size."""
        self.context = [
            m for m in self.context
            if not (m.role == "user" and m.content.startswith(RECENT_PREFIX))
        ]

        history = "\n".join(self.recent_interactions)
        self.context.append(Message(role="user", content=f"{RECENT_PREFIX}\n{history}"))
        self.context.append(Message(role="user", content=user_input))
        self.context.append(Message(role="assistant", content=response))

        overflow = len(self.context) - self.max_openai_context
        if overflow > 0:
            del self.context[:overflow]

    def add_recent_interaction(self, interaction: str) -> None:
        self.recent_interactions.append(interaction)
        while len(self.recent_interactions) > self.max_recent_interactions:
            self.recent_interactions.popleft()

    def reset(self) -> None:
        """Forget the whole conversation, system prompt included."""
        self.context.clear()
        self.recent_interactions.clear()
