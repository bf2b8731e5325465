"""Pre-send middleware — hooks the capitalizer into a message send path.

Usage as a function wrapper:

    mw = CapitalizeMiddleware.create()
    outgoing = mw.pre_send(messages)

Usage with a host event bus:

    events = PreSendEvents()
    mw.start(events)                     # subscribe
    events.dispatch(channel_id, message) # message["content"] is rewritten
    mw.stop(events)                      # unsubscribe
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable

from .capitalizer import Capitalizer, CapitalizerConfig
from .extensions import ExtensionOracle

PreSendListener = Callable[[Any, dict], None]


class PreSendEvents:
    """Minimal pre-send listener registry."""

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        self._listeners: list[PreSendListener] = []

    def add_pre_send_listener(self, listener: PreSendListener) -> PreSendListener:
        self._listeners.append(listener)
        return listener

    def remove_pre_send_listener(self, listener: PreSendListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, channel_id: Any, message: dict) -> dict:
        """Run every listener, in registration order, over one message."""
        for listener in list(self._listeners):
            listener(channel_id, message)
        return message

    def __len__(self) -> int:
        return len(self._listeners)


@dataclass
class CapitalizeMiddleware:
    """Middleware that sits between the composer and the send pipeline."""

    capitalizer: Capitalizer
    content_key: str = "content"
    _listener: PreSendListener | None = field(default=None, init=False, repr=False)

    @classmethod
    def create(
        cls,
        *,
        config: CapitalizerConfig | None = None,
        oracle: ExtensionOracle | None = None,
    ) -> "CapitalizeMiddleware":
        """Factory — creates a middleware with its own capitalizer."""
        return cls(capitalizer=Capitalizer(config, oracle))

    def pre_send(self, messages: list[dict]) -> list[dict]:
        """Rewrite outbound messages."""
        return self.capitalizer.transform_messages(messages, content_key=self.content_key)

    def transform_text(self, text: str) -> str:
        """Rewrite a single string (convenience)."""
        return self.capitalizer.transform(text)

    def on_pre_send(self, channel_id: Any, message: dict) -> None:
        """Listener body: replace the message content in place."""
        content = message.get(self.content_key)
        if isinstance(content, str) and content:
            message[self.content_key] = self.capitalizer.transform(content)

    def start(self, events: PreSendEvents) -> None:
        if self._listener is None:
            self._listener = events.add_pre_send_listener(self.on_pre_send)

    def stop(self, events: PreSendEvents) -> None:
        if self._listener is not None:
            events.remove_pre_send_listener(self._listener)
            self._listener = None

    @property
    def running(self) -> bool:
        return self._listener is not None
