"""Server state: numbered databases, per-connection context and subscribers."""

from __future__ import annotations

import random
import threading
from collections.abc import Callable, MutableSequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, NamedTuple

from miniredis.pubsub import Subscriber


class DbKey(NamedTuple):
    """A key in a specific database."""

    db: int
    key: str


@dataclass(eq=False)
class RedisDB:
    """A single numbered database with its typed key maps."""

    id: int
    master: Miniredis | None = None
    keys: dict[str, str] = field(default_factory=dict)
    string_keys: dict[str, str] = field(default_factory=dict)
    hash_keys: dict[str, dict[str, str]] = field(default_factory=dict)
    list_keys: dict[str, list[str]] = field(default_factory=dict)
    set_keys: dict[str, set[str]] = field(default_factory=dict)
    sortedset_keys: dict[str, dict[str, float]] = field(default_factory=dict)
    ttl: dict[str, timedelta] = field(default_factory=dict)
    key_version: dict[str, int] = field(default_factory=dict)


TxCmd = Callable[..., Any]


@dataclass
class ConnCtx:
    """All state belonging to a single client connection."""

    selected_db: int = 0
    authenticated: bool = False
    transaction: list[TxCmd] | None = None
    dirty_transaction: bool = False
    watched: dict[DbKey, int] | None = None
    subscriber: Subscriber | None = None

    def start_tx(self) -> None:
        """Enter MULTI: start collecting queued commands."""
        self.transaction = []
        self.dirty_transaction = False

    def stop_tx(self) -> None:
        """Leave the transaction and forget all watched keys."""
        self.transaction = None
        self.unwatch()

    def in_tx(self) -> bool:
        """Whether a MULTI is in progress."""
        return self.transaction is not None

    def add_tx_cmd(self, callback: TxCmd) -> None:
        """Queue a command callback for EXEC."""
        if self.transaction is None:
            raise RuntimeError("not in a transaction")
        self.transaction.append(callback)

    def watch(self, db: RedisDB, key: str) -> None:
        """Remember the current version of a key (0 if it never changed)."""
        if self.watched is None:
            self.watched = {}
        self.watched[DbKey(db.id, key)] = db.key_version.get(key, 0)

    def unwatch(self) -> None:
        """Forget all watched keys."""
        self.watched = None

    def mark_dirty(self) -> None:
        """Flag that an error happened while queueing commands."""
        self.dirty_transaction = True


class Miniredis:
    """In-memory Redis state shared by all connections."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.signal = threading.Condition(self._lock)
        self.password = ""
        self.dbs: dict[int, RedisDB] = {}
        self.selected_db = 0
        self.scripts: dict[str, str] = {}
        self.now: datetime | None = None
        self.subscribers: set[Subscriber] = set()
        self._rand: random.Random | None = None

    def __enter__(self) -> Miniredis:
        self._lock.acquire()
        return self

    def __exit__(self, *exc: object) -> None:
        self._lock.release()

    def require_auth(self, password: str) -> None:
        """Make every connection AUTH first; an empty string disables it."""
        with self._lock:
            self.password = password

    def db(self, index: int) -> RedisDB:
        """Return the database with the given id, creating it if needed."""
        with self._lock:
            found = self.dbs.get(index)
            if found is None:
                found = RedisDB(id=index, master=self)
                self.dbs[index] = found
            return found

    def swap_db(self, i: int, j: int) -> bool:
        """Swap two databases by id."""
        with self._lock:
            db1 = self.db(i)
            db2 = self.db(j)
            db1.id = j
            db2.id = i
            self.dbs[i] = db2
            self.dbs[j] = db1
            return True

    def set_time(self, moment: datetime) -> None:
        """Set the time EXPIREAT values are compared against."""
        with self._lock:
            self.now = moment

    def new_subscriber(self) -> Subscriber:
        """Register and return a fresh subscriber. Close it when done."""
        subscriber = Subscriber()
        self.add_subscriber(subscriber)
        return subscriber

    def add_subscriber(self, subscriber: Subscriber) -> None:
        """Register a subscriber so it receives published messages."""
        with self._lock:
            self.subscribers.add(subscriber)

    def remove_subscriber(self, subscriber: Subscriber) -> None:
        """Unregister a subscriber, closing it if it was registered."""
        with self._lock:
            if subscriber in self.subscribers:
                self.subscribers.discard(subscriber)
                subscriber.close()

    def publish(self, channel: str, message: str) -> int:
        """Publish to all subscribers; returns how often it was delivered."""
        with self._lock:
            return sum(s.publish(channel, message) for s in self.subscribers)

    def all_subscribers(self) -> list[Subscriber]:
        """All registered subscribers."""
        with self._lock:
            return list(self.subscribers)

    def seed(self, seed: int) -> None:
        """Make the random choices deterministic."""
        with self._lock:
            self._rand = random.Random(seed)

    def rand_intn(self, n: int) -> int:
        """A random int in [0, n)."""
        if n <= 0:
            raise ValueError("invalid argument to rand_intn")
        source = self._rand if self._rand is not None else random
        return source.randrange(n)

    def shuffle(self, items: MutableSequence[Any]) -> None:
        """Shuffle a sequence in place. Kinda."""
        for _ in range(len(items)):
            i = self.rand_intn(len(items))
            j = self.rand_intn(len(items))
            items[i], items[j] = items[j], items[i]