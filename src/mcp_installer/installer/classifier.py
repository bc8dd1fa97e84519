"""
Package classification.

Decides whether a package name can be launched from the npm registry with
npx, or should be handed to uvx, and whether a path is a local Node package.
"""

import logging
import re
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import aiohttp

from ..config import DEFAULT_NPM_REGISTRY, get_settings

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"

# Abbreviated package metadata, much smaller than the full document
NPM_ACCEPT = "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8"

DEFAULT_TIMEOUT = 15.0

# PEP 508 name, optional extras, optional "==1.2" or "@1.2" pin
_PYPI_REQUIREMENT_RE = re.compile(
    r"^[A-Za-z0-9](?:[A-Za-z0-9._-]*[A-Za-z0-9])?"
    r"(?:\[[A-Za-z0-9._,\s-]+\])?"
    r"(?:(?:==|@)[A-Za-z0-9.*+!_-]+)?$"
)


class PackageClassifier:
    """Routes an install request to the right executor."""

    def __init__(
        self,
        registry_url: str = DEFAULT_NPM_REGISTRY,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._registry_url = registry_url.rstrip("/")
        self._timeout = timeout

    def package_url(self, name: str) -> str:
        """Registry URL for a package; the scope separator is encoded."""
        return f"{self._registry_url}/{quote(name, safe='@')}"

    async def is_registry_package(self, name: str) -> bool:
        """True if the npm registry knows at least one version of ``name``."""
        if not name:
            return False

        url = self.package_url(name)
        logger.debug(f"Looking up {name} at {url}")

        try:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, headers={"Accept": NPM_ACCEPT}) as response:
                    if response.status != 200:
                        logger.debug(f"Registry returned HTTP {response.status} for {name}")
                        return False
                    data = await response.json(content_type=None)
        except Exception as e:
            logger.debug(f"Registry lookup failed for {name}: {e}")
            return False

        if not isinstance(data, dict):
            return False

        dist_tags = data.get("dist-tags") or {}
        if isinstance(dist_tags, dict) and dist_tags.get("latest"):
            return True
        return bool(data.get("versions"))

    def is_secondary_candidate(self, name: str) -> bool:
        """True if ``name`` is a PyPI-style requirement uvx can run."""
        return bool(_PYPI_REQUIREMENT_RE.match(name))

    def is_local_package(self, path: Path) -> bool:
        """True if ``path`` is a directory with a package.json."""
        return path.is_dir() and (path / MANIFEST_NAME).is_file()


# Singleton
_classifier: Optional[PackageClassifier] = None


def get_package_classifier() -> PackageClassifier:
    """Get the singleton PackageClassifier."""
    global _classifier
    if _classifier is None:
        settings = get_settings()
        _classifier = PackageClassifier(
            registry_url=settings.npm_registry_url,
            timeout=settings.registry_timeout,
        )
    return _classifier
