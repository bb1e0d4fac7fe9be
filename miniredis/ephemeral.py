"""Start a throw-away, memory-only redis-server on a random local port."""

from __future__ import annotations

import os
import socket
import subprocess
import time

LOCAL_SRC = "./redis_src/"
EXECUTABLE = "redis-server"
START_TIMEOUT = 1.0
_POLL_INTERVAL = 0.001


class EphemeralRedis:
    """A running redis-server process. Close it when done."""

    def __init__(self, process: subprocess.Popen, addr: str) -> None:
        self.process = process
        self.addr = addr

    def close(self) -> None:
        """Kill the server and wait for it to exit."""
        if self.process.poll() is None:
            self.process.kill()
        self.process.wait()

    def __enter__(self) -> EphemeralRedis:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def arbitrary_port() -> int:
    """Return a local TCP port that was free a moment ago."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind(("127.0.0.1", 0))
        return listener.getsockname()[1]


def _can_connect(host: str, port: int) -> bool:
    try:
        with socket.create_connection((host, port), timeout=0.1):
            return True
    except OSError:
        return False


def start_redis(extra_config: str = "") -> tuple[EphemeralRedis, str]:
    """Start a memory-only redis-server on a random port.

    Returns the running server and the 'host:port' address to dial.
    The executable in ./redis_src/ is preferred over the one on PATH.
    Raises RuntimeError if the server doesn't accept connections in time.
    """
    port = arbitrary_port()
    env = dict(os.environ)
    env["PATH"] = LOCAL_SRC + os.pathsep + env.get("PATH", "")

    process = subprocess.Popen(
        [EXECUTABLE, "-"],
        stdin=subprocess.PIPE,
        env=env,
    )
    config = f"port {port}\nbind 127.0.0.1\nappendonly no\n{extra_config}"
    try:
        assert process.stdin is not None
        process.stdin.write(config.encode())
        process.stdin.close()
    except BrokenPipeError:
        pass

    addr = f"127.0.0.1:{port}"
    deadline = time.monotonic() + START_TIMEOUT
    while time.monotonic() < deadline:
        if _can_connect("127.0.0.1", port):
            return EphemeralRedis(process, addr), addr
        time.sleep(_POLL_INTERVAL)

    process.kill()
    process.wait()
    raise RuntimeError(f"No connection on port {port}")


def start_redis_auth(password: str) -> tuple[EphemeralRedis, str]:
    """Like start_redis, with authentication enabled."""
    return start_redis(f"requirepass {password}")