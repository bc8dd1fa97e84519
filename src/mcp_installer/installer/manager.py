"""
Install manager - the entry point for every installation request.

This is the main orchestrator that:
- Checks the runtimes a package needs
- Decides between npx, uvx and a local node entry point
- Writes the resulting launch specs into the host configuration
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from ..config import Settings, get_settings
from ..config_store import ConfigStore, get_config_store
from ..errors import (
    ClassificationAmbiguous,
    InstallerError,
    ManifestMissing,
    NoResolvableEntries,
    PathNotFound,
    PrerequisiteMissing,
)
from ..launch import NODE, NPX, UVX, LaunchSpec, build_launch_spec
from .classifier import MANIFEST_NAME, PackageClassifier, get_package_classifier
from .local import LocalBuildResolver, get_local_build_resolver
from .runtime import RuntimeManager, get_runtime_manager

logger = logging.getLogger(__name__)

UV_INSTALL_URL = "https://docs.astral.sh/uv/getting-started/installation/"


@dataclass
class InstallOutcome:
    """Text result of an installation request."""

    message: str
    is_error: bool = False
    code: Optional[str] = None
    installed: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: InstallerError) -> "InstallOutcome":
        return cls(message=str(error), is_error=True, code=error.code)


class InstallManager:
    """
    Installs MCP servers into the host configuration.

    Every public method returns an InstallOutcome and never raises;
    expected failures come back as outcomes with ``is_error`` set.
    """

    def __init__(
        self,
        store: Optional[ConfigStore] = None,
        runtime_manager: Optional[RuntimeManager] = None,
        classifier: Optional[PackageClassifier] = None,
        resolver: Optional[LocalBuildResolver] = None,
        settings: Optional[Settings] = None,
    ):
        self._store = store or get_config_store()
        self._runtime_manager = runtime_manager or get_runtime_manager()
        self._classifier = classifier or get_package_classifier()
        self._resolver = resolver or get_local_build_resolver()
        self._settings = settings or get_settings()

    @property
    def config_path(self) -> Path:
        return self._store.path

    async def install_from_registry(
        self,
        name: str,
        args: Optional[Sequence[str]] = None,
        env: Optional[Sequence[str]] = None,
    ) -> InstallOutcome:
        """
        Install a package from npm (via npx) or PyPI (via uvx).

        Args:
            name: Package identifier, e.g. '@modelcontextprotocol/server-github'
            args: Extra command-line arguments for the server
            env: KEY=VALUE environment variables for the server

        Returns:
            InstallOutcome naming the executor used
        """
        return await self._guarded(self._install_from_registry(name, args, env))

    async def install_from_local(
        self,
        path: str,
        args: Optional[Sequence[str]] = None,
        env: Optional[Sequence[str]] = None,
    ) -> InstallOutcome:
        """
        Install every entry point of a local Node package (run with node).

        Args:
            path: Directory containing package.json
            args: Extra command-line arguments, applied to every entry point
            env: KEY=VALUE environment variables, applied to every entry point

        Returns:
            InstallOutcome listing the installed names
        """
        return await self._guarded(self._install_from_local(path, args, env))

    async def repair_installer_extension(self) -> InstallOutcome:
        """Rewrite this installer's own extension entry."""
        return await self._guarded(self._repair_installer_extension())

    async def _guarded(self, flow) -> InstallOutcome:
        try:
            return await flow
        except InstallerError as e:
            logger.warning(f"Install failed ({e.code}): {e}")
            return InstallOutcome.failure(e)
        except Exception as e:
            logger.exception("Unexpected install failure")
            return InstallOutcome(message=f"Installation failed: {e}", is_error=True, code="internal_error")

    async def _install_from_registry(
        self,
        name: str,
        args: Optional[Sequence[str]],
        env: Optional[Sequence[str]],
    ) -> InstallOutcome:
        name = name.strip()

        node = await self._runtime_manager.detect_node()
        if not node.available:
            raise PrerequisiteMissing(
                f"Node.js is not installed, please install it first.\n{node.install_hint}"
            )

        if await self._classifier.is_registry_package(name):
            executor = NPX
        else:
            uvx = await self._runtime_manager.detect_uvx()
            if not uvx.available:
                raise PrerequisiteMissing(
                    f"{name} is not an npm package and uvx is not installed. "
                    f"Install uv from {UV_INSTALL_URL}\n{uvx.install_hint}"
                )
            if not self._classifier.is_secondary_candidate(name):
                raise ClassificationAmbiguous(
                    f"{name} is not in the npm registry and is not a Python package name uvx can run"
                )
            executor = UVX

        spec = build_launch_spec(name, executor, name, args, env)
        await self._store.upsert_extension(spec)

        logger.info(f"Installed {spec.name} with {executor}")
        return InstallOutcome(
            message=(
                f"Installed MCP server {name} via {executor} as extension '{spec.name}' "
                f"in {self.config_path}. Restart the host to load it."
            ),
            installed=[spec.name],
        )

    async def _install_from_local(
        self,
        path: str,
        args: Optional[Sequence[str]],
        env: Optional[Sequence[str]],
    ) -> InstallOutcome:
        directory = Path(path).expanduser().absolute()

        if not directory.exists():
            raise PathNotFound(f"Path does not exist: {directory}")

        if not self._classifier.is_local_package(directory):
            raise ManifestMissing(
                f"Cannot determine how to install {directory}: no {MANIFEST_NAME} found"
            )

        entries = await self._resolver.resolve(directory)
        if not entries:
            raise NoResolvableEntries(
                f"{directory}/{MANIFEST_NAME} declares neither 'bin' nor 'main', nothing to install"
            )

        specs: list[LaunchSpec] = [
            build_launch_spec(entry_name, NODE, entry_path, args, env)
            for entry_name, entry_path in entries.items()
        ]
        await self._store.upsert_extensions(specs)

        names = [s.name for s in specs]
        logger.info(f"Installed local package {directory}: {names}")
        return InstallOutcome(
            message=(
                f"Installed MCP server(s) {', '.join(names)} from {directory} "
                f"in {self.config_path}. Restart the host to load them."
            ),
            installed=names,
        )

    async def _repair_installer_extension(self) -> InstallOutcome:
        settings = self._settings
        spec = LaunchSpec(
            name=settings.self_name,
            cmd=settings.self_cmd,
            args=list(settings.self_args),
        )
        await self._store.upsert_extension(spec)
        return InstallOutcome(
            message=f"Repaired extension '{spec.name}' ({spec.cmd} {' '.join(spec.args)}) in {self.config_path}",
            installed=[spec.name],
        )


# Singleton
_manager: Optional[InstallManager] = None


def get_install_manager() -> InstallManager:
    """Get the singleton InstallManager."""
    global _manager
    if _manager is None:
        _manager = InstallManager()
    return _manager
