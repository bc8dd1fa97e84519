"""
Runtime detection.

Checks whether the executors we launch servers with (Node.js, uvx) are
available and provides information about how to install missing ones.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import get_settings
from .runner import CommandRunner, get_command_runner

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 10.0


class RuntimeType(str, Enum):
    """Runtimes the installer depends on."""
    NODE = "node"
    UVX = "uvx"


@dataclass
class Runtime:
    """Information about a detected runtime."""
    type: RuntimeType
    available: bool
    version: Optional[str] = None
    install_hint: Optional[str] = None


class RuntimeManager:
    """Probes the host for the executors used to run MCP servers."""

    INSTALL_HINTS = {
        RuntimeType.NODE: {
            "darwin": "Install with: brew install node\nOr: https://nodejs.org/",
            "linux": "Install with: curl -fsSL https://deb.nodesource.com/setup_lts.x | sudo -E bash - && sudo apt-get install -y nodejs\nOr: https://nodejs.org/",
            "win32": "Download from: https://nodejs.org/",
        },
        RuntimeType.UVX: {
            "darwin": "Install uv (provides uvx): curl -LsSf https://astral.sh/uv/install.sh | sh\nSee: https://docs.astral.sh/uv/",
            "linux": "Install uv (provides uvx): curl -LsSf https://astral.sh/uv/install.sh | sh\nSee: https://docs.astral.sh/uv/",
            "win32": "Install uv (provides uvx): powershell -c \"irm https://astral.sh/uv/install.ps1 | iex\"\nSee: https://docs.astral.sh/uv/",
        },
    }

    def __init__(
        self,
        runner: Optional[CommandRunner] = None,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
    ):
        self._runner = runner or get_command_runner()
        self._timeout = timeout

    async def probe(self, executable: str) -> bool:
        """Return True if ``executable --version`` runs and exits cleanly."""
        return await self._get_version(executable) is not None

    async def detect_node(self) -> Runtime:
        """Detect Node.js."""
        return await self._detect(RuntimeType.NODE, "node")

    async def detect_uvx(self) -> Runtime:
        """Detect uvx (part of uv)."""
        return await self._detect(RuntimeType.UVX, "uvx")

    async def _detect(self, runtime_type: RuntimeType, executable: str) -> Runtime:
        version = await self._get_version(executable)
        runtime = Runtime(
            type=runtime_type,
            available=version is not None,
            version=version or None,
            install_hint=self.get_install_hint(runtime_type),
        )
        logger.debug(f"Runtime {runtime_type.value}: available={runtime.available} version={runtime.version}")
        return runtime

    async def _get_version(self, executable: str) -> Optional[str]:
        """Version string of an executable, '' if it printed nothing, None if unavailable."""
        try:
            result = await self._runner.run(executable, ["--version"], timeout=self._timeout)
        except Exception as e:
            logger.debug(f"Probe of {executable} failed: {e}")
            return None

        if not result.ok:
            logger.debug(f"Probe of {executable} exited with code {result.exit_code}")
            return None

        output = result.stdout.strip() or result.stderr.strip()
        # "v20.11.0" from node, "uvx 0.4.18" from uvx
        for prefix in (f"{executable} ", "v"):
            if output.startswith(prefix):
                output = output[len(prefix):]
        return output.split()[0] if output else ""

    def get_install_hint(self, runtime_type: RuntimeType) -> str:
        """Get install hint for current platform."""
        platform = sys.platform
        if platform.startswith("linux"):
            platform = "linux"
        hints = self.INSTALL_HINTS.get(runtime_type, {})
        return hints.get(platform, hints.get("linux", ""))


# Singleton
_manager: Optional[RuntimeManager] = None


def get_runtime_manager() -> RuntimeManager:
    """Get the singleton RuntimeManager."""
    global _manager
    if _manager is None:
        _manager = RuntimeManager(timeout=get_settings().probe_timeout)
    return _manager
