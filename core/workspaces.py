"""Versions of the packages in a workspace tree."""

import logging
from collections.abc import Callable, Iterator

import semantic_version

from .config import DEFAULT_VERSION
from .errors import DuplicateRegistration, RegressionError, UnknownPackage

logger = logging.getLogger(__name__)

Observer = Callable[[str, str], None]


class WorkspaceRegistry:
    """Tracks the current version of every package in a workspace.

    All version changes go through ``record_update``, which notifies every
    subscribed observer synchronously, in subscription order.
    """

    def __init__(self):
        self._versions: dict[str, str] = {}
        self._observers: list[Observer] = []

    def __len__(self) -> int:
        return len(self._versions)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(list(self._versions.items()))

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def has(self, name: str) -> bool:
        return name in self._versions

    def get(self, name: str) -> str:
        if name not in self._versions:
            raise UnknownPackage(f'Package "{name}" not registered')
        return self._versions[name]

    def subscribe(self, observer: Observer) -> None:
        self._observers.append(observer)

    def register(self, name: str, version: str | None = None) -> None:
        """Register a package with its initial version."""
        if name in self._versions:
            raise DuplicateRegistration(f'Package "{name}" already registered')
        self._versions[name] = version or DEFAULT_VERSION

    def record_update(self, name: str, version: str) -> None:
        """Move a registered package forward to a new version.

        Raises:
            UnknownPackage: if the package was never registered
            RegressionError: if the new version is lower than the current one
        """
        if name not in self._versions:
            raise UnknownPackage(f'Package "{name}" not registered')

        current = self._versions[name]
        new, old = semantic_version.Version(version), semantic_version.Version(current)
        if new < old:
            raise RegressionError(
                f'Package "{name}" new version {version} less than old {current}'
            )
        if new == old:
            return

        self._versions[name] = version
        logger.debug("Workspace package %s updated to %s", name, version)
        for observer in list(self._observers):
            observer(name, version)

    def max_version(self) -> str:
        """Return the highest version of all registered packages."""
        aligned = semantic_version.Version(DEFAULT_VERSION)
        for _, version in self:
            parsed = semantic_version.Version(version)
            if parsed > aligned:
                aligned = parsed
        return str(aligned)
