# miniredis

Building blocks for an in-memory Redis stand-in used in unit tests: the
shared state (numbered databases, per-connection context, pub/sub
subscribers), Redis glob patterns, Redis-style formatting helpers, and
tooling to start a real `redis-server` and compare replies.

It has no dependencies outside the standard library.

## Installation

```
pip install miniredis
```

For running the test suite:

```
pip install "miniredis[test]"
pytest
```

## Modules

- `miniredis.core` — `Miniredis`, `RedisDB` and `ConnCtx`.
- `miniredis.keys` — `pattern_re` and `match_keys` for glob patterns.
- `miniredis.pubsub` — `Subscriber`, `PubsubMessage`, `PubsubPmessage`,
  `active_channels`, `count_subs` and `count_psubs`.
- `miniredis.common` — error message constants, `err_wrong_number`,
  `err_lua_parse_error`, `format_float` and `redis_range`.
- `miniredis.ephemeral` — `start_redis`, `start_redis_auth`,
  `EphemeralRedis` and `arbitrary_port`.
- `miniredis.compare` — `Command`, its constructors, `loosely_equal` and
  `round_floats`.

## Usage

### State: databases, auth and randomness

```python
from miniredis.core import Miniredis

m = Miniredis()

db0 = m.db(0)          # created on first use; a RedisDB with typed key maps
m.swap_db(0, 1)        # exchange two databases (ids are updated too)

password = "password"
m.require_auth(password)   # "" disables it again

m.seed(42)             # rand_intn and shuffle become reproducible
items = ["a", "b", "c"]
m.shuffle(items)
```

`Miniredis` can be used as a context manager to hold its (reentrant) lock.
`set_time` stores the moment that expiry times are meant to be compared
against.

### Per-connection context

`ConnCtx` holds the selected database, authentication state, the queued
transaction and watched keys:

```python
from miniredis.core import ConnCtx

ctx = ConnCtx()
ctx.watch(m.db(0), "foo")   # remembers the key's version (0 if never changed)
ctx.start_tx()              # MULTI
ctx.add_tx_cmd(lambda *a: None)
ctx.in_tx()                 # True
ctx.stop_tx()               # leaves the transaction and unwatches
```

`add_tx_cmd` raises `RuntimeError` outside a transaction; `mark_dirty`
flags an error seen while queueing.

### Pub/sub

```python
sub = m.new_subscriber()
sub.subscribe("news")
sub.psubscribe("sport*")
sub.channels(), sub.patterns(), sub.count()   # (['news'], ['sport*'], 2)

m.publish("news", "hello")        # number of deliveries over all subscribers
next(sub.messages())              # PubsubMessage(channel='news', message='hello')
m.remove_subscriber(sub)          # unregisters and closes it
```

A subscriber delivers at most one message per publish for its channels and
one for its first matching pattern. After `close()` the `messages()` and
`pmessages()` iterators end once their queued messages are read, and
`publish` on it raises `RuntimeError`.

`active_channels(subscribers, pattern)`, `count_subs(subscribers, channel)`
and `count_psubs(subscribers)` give the answers for `PUBSUB CHANNELS`,
`NUMSUB` and `NUMPAT`.

### Glob patterns

```python
from miniredis.keys import match_keys, pattern_re

match_keys(["aap", "aapnoot", "noot"], "aap*")   # ['aap', 'aapnoot']
pattern_re("[]ap")                               # None: matches nothing
```

`*`, `?`, `[...]` classes and `\` escapes are supported. `pattern_re`
returns `None` for patterns that never match (an empty class, an unclosed
class, a trailing `\`); `match_keys` raises `ValueError` for them.

### Formatting helpers

```python
from miniredis.common import format_float, redis_range

format_float(3.5)                    # "3.5"
format_float(float("inf"))           # "inf"
redis_range(10, -3, -1, False)       # (7, 10), ready for slicing
```

### Comparing against a real server

`start_redis(extra_config)` runs a memory-only `redis-server` on a free
local port and returns an `EphemeralRedis` (closeable, or usable in a
`with` block) together with its `"127.0.0.1:port"` address; it raises
`RuntimeError` if the server does not accept connections within a second.
`start_redis_auth(password)` also sets `requirepass`. A `redis-server`
binary must be available; one in `./redis_src/` is preferred over the
`PATH`.

`miniredis.compare` describes expected outcomes with `succ`,
`succ_sorted`, `succ_loosely`, `succ_round3`, `fail`, `fail_with`,
`fail_loosely` and `receive`. `loosely_equal` compares replies by
structure only, and `round_floats` rounds float-looking bytes values.

## What this package does not do

There is no network server and no command handling: nothing listens for
clients, parses the Redis protocol or executes commands such as `GET`,
`SET` or `EVAL`. Key values, expiry and Lua scripting are not implemented;
`RedisDB` only holds the maps where such data would live. Likewise
`miniredis.compare` only describes commands and compares replies — it does
not send commands to servers itself.