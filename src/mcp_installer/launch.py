"""Launch specs - how the host should spawn an installed server."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

# Launchers we write into the host configuration
NPX = "npx"
UVX = "uvx"
NODE = "node"

EXTENSION_TYPE = "stdio"


@dataclass
class LaunchSpec:
    """A single entry under the host's ``extensions`` section."""

    name: str
    cmd: str
    args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    enabled: bool = True
    type: str = EXTENSION_TYPE

    def to_entry(self) -> Dict[str, Any]:
        """Convert to the mapping stored in the config file."""
        return {
            "name": self.name,
            "cmd": self.cmd,
            "args": list(self.args),
            "enabled": self.enabled,
            "type": self.type,
            "envs": dict(self.env),
        }


def display_name(identifier: str) -> str:
    """Strip a leading ``scope/`` segment: ``@org/server`` becomes ``server``."""
    scope, sep, rest = identifier.partition("/")
    if sep and rest:
        return rest
    return identifier


def parse_env_pairs(pairs: Optional[Sequence[str]]) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` strings, splitting on the first ``=`` only.

    Pairs without ``=`` or with an empty key are skipped.
    """
    env: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            logger.warning(f"Ignoring malformed env pair: {pair!r}")
            continue
        env[key] = value
    return env


def build_launch_spec(
    name: str,
    executable: str,
    primary_arg: str,
    args: Optional[Sequence[str]] = None,
    env: Optional[Sequence[str]] = None,
) -> LaunchSpec:
    """
    Build the launch spec for an installed server.

    Args:
        name: Package identifier or entry-point name; any scope is stripped
        executable: Launcher program (npx, uvx or node)
        primary_arg: Full package identifier or absolute entry-point path
        args: Passthrough arguments, appended in order
        env: ``KEY=VALUE`` environment pairs

    Returns:
        LaunchSpec ready to be upserted
    """
    return LaunchSpec(
        name=display_name(name),
        cmd=executable,
        args=[primary_arg, *(args or [])],
        env=parse_env_pairs(env),
    )
