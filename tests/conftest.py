# tests/conftest.py
from __future__ import annotations

import ipaddress
import os
import socket
import sys
from pathlib import Path

import pytest

# Make `lrumap`, `configs` and `scripts` importable without an install.
_ROOT = str(Path(__file__).resolve().parents[1])
if _ROOT not in sys.path:
    sys.path.insert(0, _ROOT)

# Preserve the original connect so we can delegate when allowed
_ORIG_CONNECT = socket.socket.connect

# Explicit allowlist for loopback
_LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}


def _is_loopback_host(host: str) -> bool:
    """
    Return True if `host` is a loopback literal (IPv4/IPv6) or 'localhost' (case-insensitive).
    Avoid DNS to keep things strictly offline.
    """
    h = host.strip().lower()
    if h in _LOOPBACK_HOSTS:
        return True
    try:
        return ipaddress.ip_address(h).is_loopback
    except ValueError:
        return False


@pytest.fixture(autouse=True)
def _ban_external_network(monkeypatch: pytest.MonkeyPatch):
    """
    Ban all outbound network connections when LRUMAP_NETWORK_BAN=1; the cache is
    strictly in-process, so nothing in the suite should ever open a socket.
    """
    if os.environ.get("LRUMAP_NETWORK_BAN", "0") != "1":
        yield
        return

    def _connect_guard(self: socket.socket, address):
        # Allow Unix domain sockets outright (local IPC)
        if isinstance(address, str):
            return _ORIG_CONNECT(self, address)
        host = address[0] if isinstance(address, tuple) and address else ""
        if _is_loopback_host(str(host)):
            return _ORIG_CONNECT(self, address)
        raise AssertionError(f"Network calls are banned in CI (attempted connect to {address!r})")

    monkeypatch.setattr(socket.socket, "connect", _connect_guard, raising=True)
    yield


@pytest.fixture(autouse=True)
def _isolated_log_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Route JSONL event logs into the test's tmp dir."""
    d = tmp_path / "logs"
    monkeypatch.setenv("LRUMAP_LOG_DIR", str(d))
    monkeypatch.delenv("LRUMAP_CAPACITY", raising=False)
    return d


@pytest.fixture
def value_of():
    """value(k) = 5k, the mapping used by the reference scenarios."""
    return lambda k: 5 * k
