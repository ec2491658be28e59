"""Exceptions raised by the check-updates core."""


class CheckUpdatesError(Exception):
    """Base class for all check-updates errors."""


class ManifestError(CheckUpdatesError):
    """A manifest (or its subtree) cannot be processed."""


class InvalidManifest(ManifestError):
    """The manifest content is not a valid package.json object."""


class DuplicateRegistration(ManifestError):
    """A package name was registered twice in the same workspace."""


class ManifestStateError(ManifestError):
    """A manifest operation was invoked in the wrong lifecycle state."""


class RegistryConsistencyError(CheckUpdatesError):
    """Workspace versions were used in a way that breaks their contract."""


class UnknownPackage(RegistryConsistencyError):
    """An update referenced a package that was never registered."""


class RegressionError(RegistryConsistencyError):
    """A version was asked to move backwards."""


class FetchError(CheckUpdatesError):
    """Package metadata could not be retrieved from the registry."""
