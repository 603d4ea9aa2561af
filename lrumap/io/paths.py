import os
import tempfile
from pathlib import Path


def _ensure(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p.resolve()


def logs_dir() -> Path:
    """
    Directory for JSONL event logs, created on demand:
    1) LRUMAP_LOG_DIR (env)
    2) ./.logs under the current working directory
    3) {tempdir}/lrumap/logs when the working directory is not writable
    """
    env = os.environ.get("LRUMAP_LOG_DIR")
    if env:
        return _ensure(Path(env))
    try:
        return _ensure(Path.cwd() / ".logs")
    except OSError:
        return _ensure(temp_root() / "lrumap" / "logs")


def temp_root() -> Path:
    """Platform temp directory; LRUMAP_TMP overrides it for tests/CI."""
    env = os.environ.get("LRUMAP_TMP")
    return Path(env) if env else Path(tempfile.gettempdir())
