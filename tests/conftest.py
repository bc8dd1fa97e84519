"""Pytest configuration for mcp_installer tests."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest

from mcp_installer.config import Settings
from mcp_installer.config_store import ConfigStore
from mcp_installer.installer.classifier import PackageClassifier
from mcp_installer.installer.local import LocalBuildResolver
from mcp_installer.installer.manager import InstallManager
from mcp_installer.installer.runner import CommandError, CommandResult
from mcp_installer.installer.runtime import Runtime, RuntimeType


class FakeRunner:
    """Records commands instead of running them."""

    def __init__(self, exit_code: int = 0, stderr: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        self.calls: List[Dict[str, Any]] = []

    async def run(
        self,
        cmd: str,
        args: Sequence[str] = (),
        cwd: Optional[str] = None,
        check: bool = False,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        self.calls.append({"cmd": cmd, "args": list(args), "cwd": cwd})
        result = CommandResult(cmd=[cmd, *args], exit_code=self.exit_code, stderr=self.stderr)
        if check and not result.ok:
            raise CommandError(f"{cmd} exited with code {self.exit_code}: {self.stderr}", result)
        return result


class FakeRuntimeManager:
    """Reports node/uvx availability without spawning anything."""

    def __init__(self, node: bool = True, uvx: bool = True):
        self.node = node
        self.uvx = uvx
        self.detected: List[str] = []

    async def detect_node(self) -> Runtime:
        self.detected.append("node")
        return Runtime(type=RuntimeType.NODE, available=self.node, install_hint="install node")

    async def detect_uvx(self) -> Runtime:
        self.detected.append("uvx")
        return Runtime(type=RuntimeType.UVX, available=self.uvx, install_hint="install uv")


class FakeClassifier(PackageClassifier):
    """Classifier whose registry lookup is a fixed set of names."""

    def __init__(self, registry_packages: Sequence[str] = ()):
        super().__init__(registry_url="http://registry.invalid")
        self.registry_packages = set(registry_packages)
        self.lookups: List[str] = []

    async def is_registry_package(self, name: str) -> bool:
        self.lookups.append(name)
        return name in self.registry_packages


@pytest.fixture
def tmp_dir() -> Path:
    """Create a temporary directory for a test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_path(tmp_dir: Path) -> Path:
    """Path of a config file that does not exist yet."""
    return tmp_dir / "goose" / "config.yaml"


@pytest.fixture
def store(config_path: Path) -> ConfigStore:
    return ConfigStore(path=config_path)


@pytest.fixture
def settings(config_path: Path) -> Settings:
    return Settings(config_path=config_path)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


def make_manager(
    store: ConfigStore,
    settings: Settings,
    runner: Optional[FakeRunner] = None,
    node: bool = True,
    uvx: bool = True,
    registry_packages: Sequence[str] = (),
) -> InstallManager:
    """Build an InstallManager wired to fake collaborators."""
    return InstallManager(
        store=store,
        runtime_manager=FakeRuntimeManager(node=node, uvx=uvx),
        classifier=FakeClassifier(registry_packages),
        resolver=LocalBuildResolver(runner=runner or FakeRunner()),
        settings=settings,
    )


def write_package(directory: Path, manifest: Dict[str, Any]) -> Path:
    """Write a package.json into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "package.json").write_text(json.dumps(manifest), encoding="utf-8")
    return directory
