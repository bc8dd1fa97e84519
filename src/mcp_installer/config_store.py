"""Host configuration storage.

Reads and rewrites the host's YAML config file. Only the ``extensions``
section is interpreted; every other section is passed through unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml

from mcp_installer.config import get_settings
from mcp_installer.errors import ConfigIOFailure
from mcp_installer.launch import LaunchSpec

logger = logging.getLogger(__name__)

EXTENSIONS_KEY = "extensions"


@dataclass
class ConfigStore:
    """Load-merge-write access to the host configuration file.

    The document is re-read for every operation because the file is edited
    by hand and by the host. Upserts hold ``_lock`` from load to write so
    concurrent installs in this process cannot drop each other's entries.
    """

    path: Path
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def load(self) -> Dict[str, Any]:
        """Load the document; a missing or broken file yields ``{}``."""

        def _read() -> Dict[str, Any]:
            if not self.path.exists():
                return {}
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError, UnicodeDecodeError) as e:
                logger.warning(f"Ignoring unreadable config {self.path}: {e}")
                return {}
            if data is None:
                return {}
            if not isinstance(data, dict):
                logger.warning(f"Ignoring config {self.path}: top level is {type(data).__name__}, not a mapping")
                return {}
            return data

        return await asyncio.to_thread(_read)

    async def write(self, document: Dict[str, Any]) -> None:
        """Serialize the whole document and atomically replace the file."""

        def _write() -> None:
            try:
                text = yaml.safe_dump(
                    document,
                    sort_keys=False,
                    default_flow_style=False,
                    allow_unicode=True,
                )
                # Replace the file behind a symlink, not the link itself
                target = self.path.resolve()
                target.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{target.name}.",
                    suffix=".tmp",
                    dir=target.parent,
                )
                try:
                    # mkstemp creates 0600; keep the existing file's mode
                    if target.exists():
                        os.chmod(tmp_name, target.stat().st_mode & 0o777)
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        f.write(text)
                        f.flush()
                        os.fsync(f.fileno())
                    os.replace(tmp_name, target)
                except BaseException:
                    try:
                        os.unlink(tmp_name)
                    except OSError:
                        pass
                    raise
            except (OSError, yaml.YAMLError) as e:
                raise ConfigIOFailure(f"Failed to write {self.path}: {e}") from e

        await asyncio.to_thread(_write)

    async def upsert_extension(self, spec: LaunchSpec) -> None:
        """Insert or replace a single extension entry."""
        await self.upsert_extensions([spec])

    async def upsert_extensions(self, specs: Iterable[LaunchSpec]) -> None:
        """Insert or replace several extension entries in one write."""
        specs = list(specs)
        async with self._lock:
            document = await self.load()
            extensions = document.get(EXTENSIONS_KEY)
            if not isinstance(extensions, dict):
                if extensions is not None:
                    logger.warning(f"Replacing non-mapping '{EXTENSIONS_KEY}' section in {self.path}")
                extensions = {}
                document[EXTENSIONS_KEY] = extensions

            for spec in specs:
                extensions[spec.name] = spec.to_entry()

            await self.write(document)

        logger.info(f"Wrote {', '.join(s.name for s in specs)} to {self.path}")

    async def get_extension(self, name: str) -> Optional[Dict[str, Any]]:
        """Get a stored extension entry by name."""
        extensions = (await self.load()).get(EXTENSIONS_KEY)
        if isinstance(extensions, dict):
            entry = extensions.get(name)
            if isinstance(entry, dict):
                return entry
        return None


# Singleton
_store: Optional[ConfigStore] = None


def get_config_store() -> ConfigStore:
    """Get the singleton ConfigStore for the configured path."""
    global _store
    if _store is None:
        _store = ConfigStore(path=get_settings().config_path)
    return _store
