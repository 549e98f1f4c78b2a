"""Environment loading for palette-tool.

Load order (first wins):
  1. Existing OS environment variables — never overwritten.
  2. The .env file given by --env-file, if any.
  3. The first .env found walking up from the working directory. The walk
     stops at the repository root (a .git dir or file) and never goes above it.

Only PALETTE_TOOL_* settings are read by the tool, but every key in the file
is exported so wrappers can share one .env.
"""

import os
from pathlib import Path

ENV_FILENAME = '.env'


def _find_dotenv(start: Path) -> Path | None:
    """Walk up from start, return first .env found, stop at .git boundary."""
    current = start.resolve()
    while True:
        candidate = current / ENV_FILENAME
        if candidate.is_file():
            return candidate
        # .git is a dir in a normal clone and a file in a worktree
        if (current / '.git').exists():
            return None
        parent = current.parent
        if parent == current:
            return None
        current = parent


def _strip_value(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    # Unquoted: drop trailing ' # comment'
    if ' #' in value:
        value = value.split(' #', 1)[0].rstrip()
    return value


def _parse_dotenv(path: Path) -> dict[str, str]:
    """Parse KEY=value lines. Accepts quotes, 'export ' prefixes and comments."""
    result: dict[str, str] = {}
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#'):
            continue
        if line.startswith('export '):
            line = line[len('export ') :].lstrip()
        if '=' not in line:
            continue
        key, _, raw_value = line.partition('=')
        key = key.strip()
        if key:
            result[key] = _strip_value(raw_value)
    return result


def load_env(env_file: str | None = None, start: Path | None = None) -> Path | None:
    """Export .env keys that are not already set.

    Returns the file that was loaded, or None if none was found.
    """
    if env_file:
        path = Path(env_file)
        if not path.is_file():
            return None
    else:
        path = _find_dotenv(start or Path.cwd())
        if path is None:
            return None

    for key, value in _parse_dotenv(path).items():
        os.environ.setdefault(key, value)

    return path
