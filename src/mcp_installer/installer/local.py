"""
Local package resolution.

Installs the dependencies of a local Node package and works out which
files can be launched as MCP servers.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

from ..errors import BuildFailure, ManifestMissing
from ..launch import display_name
from .classifier import MANIFEST_NAME
from .runner import CommandError, CommandRunner, get_command_runner

logger = logging.getLogger(__name__)


class LocalBuildResolver:
    """Builds a local package and maps its entry points to absolute paths."""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self._runner = runner or get_command_runner()

    async def resolve(self, directory: Path) -> dict[str, str]:
        """
        Run ``npm install`` in ``directory`` and resolve its entry points.

        Returns:
            Mapping of entry-point name to absolute file path. Empty when the
            manifest declares neither ``bin`` nor ``main``.

        Raises:
            BuildFailure: npm install failed
            ManifestMissing: package.json is absent or unreadable
        """
        directory = directory.resolve()
        manifest_path = directory / MANIFEST_NAME
        if not manifest_path.is_file():
            raise ManifestMissing(f"No {MANIFEST_NAME} found in {directory}")

        logger.info(f"Installing dependencies in {directory}")
        try:
            await self._runner.run("npm", ["install"], cwd=str(directory), check=True)
        except CommandError as e:
            raise BuildFailure(f"npm install failed in {directory}: {e}") from e

        manifest = await asyncio.to_thread(self._read_manifest, manifest_path)
        return self.entry_points(directory, manifest)

    @staticmethod
    def _read_manifest(manifest_path: Path) -> dict:
        try:
            with open(manifest_path, "r", encoding="utf-8") as f:
                manifest = json.load(f)
        except FileNotFoundError as e:
            raise ManifestMissing(f"No {MANIFEST_NAME} found in {manifest_path.parent}") from e
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ManifestMissing(f"Cannot read {manifest_path}: {e}") from e

        if not isinstance(manifest, dict):
            raise ManifestMissing(f"{manifest_path} does not contain a JSON object")
        return manifest

    @staticmethod
    def entry_points(directory: Path, manifest: dict) -> dict[str, str]:
        """Derive launchable entry points from a parsed package.json."""
        package_name = manifest.get("name")
        if not isinstance(package_name, str) or not package_name:
            package_name = directory.name
        bin_field = manifest.get("bin")

        if isinstance(bin_field, dict) and bin_field:
            return {
                str(name): str((directory / rel_path).resolve())
                for name, rel_path in bin_field.items()
                if isinstance(rel_path, str) and rel_path
            }

        # A single string bin is keyed by the package name, as npm does
        if isinstance(bin_field, str) and bin_field:
            return {display_name(package_name): str((directory / bin_field).resolve())}

        main = manifest.get("main")
        if isinstance(main, str) and main:
            return {display_name(package_name): str((directory / main).resolve())}

        return {}


# Singleton
_resolver: Optional[LocalBuildResolver] = None


def get_local_build_resolver() -> LocalBuildResolver:
    """Get the singleton LocalBuildResolver."""
    global _resolver
    if _resolver is None:
        _resolver = LocalBuildResolver()
    return _resolver
