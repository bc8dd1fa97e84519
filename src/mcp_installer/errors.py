"""Error taxonomy for installation requests.

Every error carries a stable ``code`` that is returned to the caller
alongside the human-readable message.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base exception for installation failures."""

    code = "install_error"


class PrerequisiteMissing(InstallerError):
    """Raised when a required executor is not available on the host."""

    code = "prerequisite_missing"


class ClassificationAmbiguous(InstallerError):
    """Raised when a package is neither an npm package nor runnable with uvx."""

    code = "classification_ambiguous"


class BuildFailure(InstallerError):
    """Raised when installing dependencies of a local package fails."""

    code = "build_failure"


class ManifestMissing(InstallerError):
    """Raised when a local package has no usable package.json."""

    code = "manifest_missing"


class NoResolvableEntries(InstallerError):
    """Raised when a local package declares nothing that can be launched."""

    code = "no_resolvable_entries"


class PathNotFound(InstallerError):
    """Raised when a local path does not exist."""

    code = "path_not_found"


class ConfigIOFailure(InstallerError):
    """Raised when the configuration file cannot be written."""

    code = "config_io_failure"


class UnknownOperation(InstallerError):
    """Raised when a request names an operation we do not handle."""

    code = "unknown_operation"
