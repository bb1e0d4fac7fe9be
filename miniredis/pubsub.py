"""Publish/subscribe bookkeeping: subscribers, their channels and patterns."""

from __future__ import annotations

import queue
import re
import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from miniredis.keys import pattern_re

_CLOSED = object()


@dataclass(frozen=True)
class PubsubMessage:
    """A message published on a channel the subscriber subscribed to."""

    channel: str
    message: str


@dataclass(frozen=True)
class PubsubPmessage:
    """A message published on a channel matching a subscribed pattern."""

    pattern: str
    channel: str
    message: str


def _drain(source: queue.Queue) -> Iterator:
    while True:
        item = source.get()
        if item is _CLOSED:
            source.put(_CLOSED)
            return
        yield item


class Subscriber:
    """Holds (p)subscriptions and the queues of messages delivered to them."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._channels: set[str] = set()
        self._patterns: dict[str, re.Pattern[str] | None] = {}
        self._messages: queue.Queue = queue.Queue()
        self._pmessages: queue.Queue = queue.Queue()
        self._closed = False

    def close(self) -> None:
        """Stop the message streams; readers finish after the queued messages."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._messages.put(_CLOSED)
            self._pmessages.put(_CLOSED)

    def count(self) -> int:
        """Total number of subscribed channels and patterns."""
        with self._lock:
            return len(self._channels) + len(self._patterns)

    def subscribe(self, channel: str) -> int:
        """Subscribe to a channel; returns the total number of subscriptions."""
        with self._lock:
            self._channels.add(channel)
            return len(self._channels) + len(self._patterns)

    def unsubscribe(self, channel: str) -> int:
        """Unsubscribe a channel; returns the total number of subscriptions."""
        with self._lock:
            self._channels.discard(channel)
            return len(self._channels) + len(self._patterns)

    def psubscribe(self, pattern: str) -> int:
        """Subscribe to a pattern; returns the total number of subscriptions."""
        with self._lock:
            self._patterns[pattern] = pattern_re(pattern)
            return len(self._channels) + len(self._patterns)

    def punsubscribe(self, pattern: str) -> int:
        """Unsubscribe a pattern; returns the total number of subscriptions."""
        with self._lock:
            self._patterns.pop(pattern, None)
            return len(self._channels) + len(self._patterns)

    def channels(self) -> list[str]:
        """All subscribed channels, alphabetically."""
        with self._lock:
            return sorted(self._channels)

    def patterns(self) -> list[str]:
        """All subscribed patterns, alphabetically."""
        with self._lock:
            return sorted(self._patterns)

    def publish(self, channel: str, message: str) -> int:
        """Deliver a message; returns how often it was sent (0, 1 or 2)."""
        with self._lock:
            if self._closed:
                raise RuntimeError("publish on a closed subscriber")
            found = 0
            if channel in self._channels:
                self._messages.put(PubsubMessage(channel, message))
                found += 1
            for original, compiled in self._patterns.items():
                if compiled is not None and compiled.search(channel):
                    self._pmessages.put(PubsubPmessage(original, channel, message))
                    found += 1
                    break
            return found

    def messages(self) -> Iterator[PubsubMessage]:
        """Iterate over messages for SUBSCRIBEd channels until closed."""
        return _drain(self._messages)

    def pmessages(self) -> Iterator[PubsubPmessage]:
        """Iterate over messages for PSUBSCRIBEd patterns until closed."""
        return _drain(self._pmessages)

    def _channel_set(self) -> set[str]:
        with self._lock:
            return set(self._channels)

    def _pattern_count(self) -> int:
        with self._lock:
            return len(self._patterns)


def active_channels(subscribers: Iterable[Subscriber], pattern: str) -> list[str]:
    """All subscribed channels, alphabetically, filtered by a non-empty pattern."""
    channels: set[str] = set()
    for subscriber in subscribers:
        channels |= subscriber._channel_set()

    compiled = pattern_re(pattern) if pattern else None
    return sorted(
        channel
        for channel in channels
        if compiled is None or compiled.search(channel)
    )


def count_subs(subscribers: Iterable[Subscriber], channel: str) -> int:
    """Number of subscribers SUBSCRIBEd to the given channel."""
    return sum(1 for subscriber in subscribers if channel in subscriber._channel_set())


def count_psubs(subscribers: Iterable[Subscriber]) -> int:
    """Total number of pattern subscriptions over all subscribers."""
    return sum(subscriber._pattern_count() for subscriber in subscribers)