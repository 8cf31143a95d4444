"""
File-backed storage of expected snapshots.

Baselines live in ``<directory>/<name>.aria.yml``. Files written by older
tooling use a plain ``.yml`` suffix; they are still read when no
``.aria.yml`` file exists, but new baselines are always written with the
``.aria.yml`` suffix.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

BASELINE_SUFFIX = ".aria.yml"
LEGACY_SUFFIX = ".yml"

_UNSAFE_CHARS = re.compile(r"[^\w.-]+")


def sanitize_name(name: str) -> str:
    """Turn an arbitrary snapshot name into a file-system safe stem."""
    for suffix in (BASELINE_SUFFIX, LEGACY_SUFFIX):
        if name.endswith(suffix):
            name = name[: -len(suffix)]
            break
    return _UNSAFE_CHARS.sub("-", name).strip("-") or "snapshot"


class BaselineStore:
    """
    Reads and writes baseline snapshots under one directory.

    Unnamed baselines are numbered per store: ``<prefix>-1``,
    ``<prefix>-2`` and so on, in call order.
    """

    def __init__(self, directory: str | Path, prefix: str = "snapshot") -> None:
        self.directory = Path(directory)
        self.prefix = sanitize_name(prefix)
        self._index = 0

    def next_name(self) -> str:
        self._index += 1
        return f"{self.prefix}-{self._index}"

    def path_for(self, name: str) -> Path:
        return self.directory / f"{sanitize_name(name)}{BASELINE_SUFFIX}"

    def legacy_path_for(self, name: str) -> Path:
        return self.directory / f"{sanitize_name(name)}{LEGACY_SUFFIX}"

    def resolve(self, name: str) -> Path:
        """
        Path to read the baseline for ``name`` from.

        The ``.aria.yml`` path is returned unless only the legacy file exists.
        """
        path = self.path_for(name)
        legacy = self.legacy_path_for(name)
        if not path.exists() and legacy.exists():
            logger.debug(f"Using legacy baseline {legacy}")
            return legacy
        return path

    def read(self, name: str) -> str:
        """Baseline text, or an empty string when no baseline exists."""
        path = self.resolve(name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ""

    def write(self, name: str, text: str, path: Path | None = None) -> Path:
        """
        Write a baseline, creating the directory as needed.

        ``path`` overrides the default ``.aria.yml`` location, so that a
        baseline read from a legacy file is updated in place.
        """
        path = path or self.path_for(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        logger.info(f"Wrote baseline {path}")
        return path
