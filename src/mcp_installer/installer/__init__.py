"""
MCP Server Installer

This module provides:
- Runtime detection (node, uvx)
- Package classification (npm registry, PyPI, local tree)
- Local package builds and entry-point resolution
- The install manager that writes launch specs to the host config
"""

from .runtime import RuntimeManager, Runtime, RuntimeType, get_runtime_manager
from .runner import CommandRunner, CommandResult, CommandError, get_command_runner
from .classifier import PackageClassifier, get_package_classifier
from .local import LocalBuildResolver, get_local_build_resolver
from .manager import InstallManager, InstallOutcome, get_install_manager

__all__ = [
    # Runtime
    "RuntimeManager",
    "Runtime",
    "RuntimeType",
    "get_runtime_manager",
    # Runner
    "CommandRunner",
    "CommandResult",
    "CommandError",
    "get_command_runner",
    # Classification
    "PackageClassifier",
    "get_package_classifier",
    "LocalBuildResolver",
    "get_local_build_resolver",
    # Manager
    "InstallManager",
    "InstallOutcome",
    "get_install_manager",
]
