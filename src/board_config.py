"""Environment-driven configuration for the bulletin board server."""

import os
from pathlib import Path

DEFAULT_PORT = 3000
DEFAULT_MAX_UPLOAD_MB = 10
# Room for the title/content fields and multipart boundaries around the file.
FORM_OVERHEAD_BYTES = 64 * 1024
_TRUTHY = {"1", "true", "yes", "on"}

# Every variable this project reads, with its meaning; rendered into the docs.
ENV_KEYS = {
    "PORT": "listening port (default 3000)",
    "HOST": "bind address (default 0.0.0.0)",
    "BOARD_DATA_DIR": "directory holding one <board>.json per board (default data)",
    "BOARD_UPLOAD_DIR": "directory for attachments (default public/uploads)",
    "BOARD_MAX_UPLOAD_MB": "largest accepted attachment in MiB (default 10)",
    "FLASK_DEBUG": "run the dev server in debug mode when 1/true/yes/on",
}


def _parse_env_line(raw_line):
    """Split one ``.env`` line into ``(key, value)``.

    Blank lines, comments and lines without ``=`` yield ``None``. A leading
    ``export`` is accepted so the same file can be sourced by a shell.

    :param raw_line: Line from the file.
    :type raw_line: str
    :returns: Key/value pair, or ``None`` for lines to skip.
    :rtype: tuple[str, str] | None
    """
    line = raw_line.strip()
    if not line or line.startswith("#") or "=" not in line:
        return None
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    key, value = line.split("=", 1)
    key = key.strip()
    if not key:
        return None
    return key, value.strip().strip('"').strip("'")


def _load_env_file(path: Path) -> list:
    """Load KEY=VALUE pairs from a .env-style file into os.environ.

    Variables already exported in the environment win over the file.

    :param path: Filesystem path to the ``.env``-style file.
    :type path: pathlib.Path
    :returns: Keys that were set from the file.
    :rtype: list[str]
    """
    if not path.exists():
        return []
    loaded = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        pair = _parse_env_line(raw_line)
        if pair is None or pair[0] in os.environ:
            continue
        os.environ[pair[0]] = pair[1]
        loaded.append(pair[0])
    return loaded


def _autoload_env() -> None:
    """Load local .env defaults when variables were not pre-exported."""
    src_dir = Path(__file__).resolve().parent
    env_candidates = (
        src_dir.parent / ".env",  # project root
        src_dir / ".env",         # src/.env (optional local override)
    )
    for env_path in env_candidates:
        _load_env_file(env_path)


_autoload_env()


def get_port() -> int:
    """Return the listening port from ``PORT``.

    :returns: Port number, ``3000`` when unset.
    :rtype: int
    """
    return int(os.getenv("PORT", str(DEFAULT_PORT)))


def get_host() -> str:
    """Return the bind address from ``HOST``."""
    return os.getenv("HOST", "0.0.0.0")


def get_data_dir() -> str:
    """Return the directory holding one ``<board>.json`` file per board.

    :returns: Value of ``BOARD_DATA_DIR`` or ``data``.
    :rtype: str
    """
    return os.getenv("BOARD_DATA_DIR", "data")


def get_upload_dir() -> str:
    """Return the directory uploaded attachments are written to.

    :returns: Value of ``BOARD_UPLOAD_DIR`` or ``public/uploads``.
    :rtype: str
    """
    return os.getenv("BOARD_UPLOAD_DIR", os.path.join("public", "uploads"))


def get_max_upload_size() -> int:
    """Return the largest accepted attachment in bytes.

    ``BOARD_MAX_UPLOAD_MB`` is read in mebibytes; a file of exactly that size
    is accepted.

    :returns: Maximum attachment size in bytes.
    :rtype: int
    """
    megabytes = int(os.getenv("BOARD_MAX_UPLOAD_MB", str(DEFAULT_MAX_UPLOAD_MB)))
    return megabytes * 1024 * 1024


def get_max_request_size() -> int:
    """Return the whole-request cap: attachment limit plus form overhead."""
    return get_max_upload_size() + FORM_OVERHEAD_BYTES


def is_debug() -> bool:
    """Return ``True`` when ``FLASK_DEBUG`` holds a truthy value."""
    return os.getenv("FLASK_DEBUG", "0").strip().lower() in _TRUTHY
