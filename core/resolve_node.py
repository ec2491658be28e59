"""npm dependency range resolution."""

import logging
import re
from dataclasses import dataclass

import semantic_version

from .versions import VersionCatalog

logger = logging.getLogger(__name__)

# Caret or tilde followed by a (possibly partial) version and prerelease tag
RANGE_PATTERN = re.compile(
    r"^\s*(?P<operator>[~^])\s*"
    r"(?P<version>\d+(?:\.\d+(?:\.\d+)?)?)"
    r"(?P<prerelease>-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?\s*$"
)


@dataclass(frozen=True)
class DeclaredRange:
    """A parsed caret or tilde range."""

    operator: str
    version: str
    prerelease: str = ""

    @property
    def anchor(self) -> str:
        """The lowest version in the range, padded to three components."""
        parts = self.version.split(".")
        parts += ["0"] * (3 - len(parts))
        return ".".join(parts) + self.prerelease

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def window(self, strict: bool) -> str:
        """Return the npm range expression versions are matched against."""
        if strict:
            # Partial versions cannot carry a prerelease tag in npm ranges
            version = self.anchor if self.prerelease else self.version
            return f"{self.operator}{version}"
        if self.operator == "~":
            major = semantic_version.Version(self.anchor).major
            return f">={self.anchor} <{major + 1}.0.0"
        return f">={self.anchor}"


def parse_range(declared: str) -> DeclaredRange | None:
    """Parse a declared caret or tilde range, None for anything else."""
    match = RANGE_PATTERN.match(declared)
    if not match:
        return None
    return DeclaredRange(
        operator=match.group("operator"),
        version=match.group("version"),
        prerelease=match.group("prerelease") or "",
    )


class RangeResolver:
    """Resolves declared ranges to the newest published matching version."""

    def __init__(self, catalog: VersionCatalog, strict: bool = False):
        """Initialize the resolver.

        Args:
            catalog: Version catalog shared by the whole run
            strict: Use literal caret/tilde semantics instead of widened ones
        """
        self.catalog = catalog
        self.strict = strict

    async def resolve(
        self,
        name: str,
        declared: str,
        npmrc: dict[str, str] | None = None,
        workspace_member: bool = False,
        strict: bool | None = None,
    ) -> str:
        """Resolve a single declared range.

        Args:
            name: Name of the dependency
            declared: The range as written in the manifest
            npmrc: Registry configuration for the catalog
            workspace_member: Whether the dependency lives in the workspace
            strict: Override the resolver's matching policy

        Returns:
            The updated range, or the declared one when nothing applies
        """
        if workspace_member:
            logger.debug("Not processing workspace package %s", name)
            return declared

        parsed = parse_range(declared)
        if parsed is None:
            logger.debug("Not processing range %s for %s", declared, name)
            return declared

        strict = self.strict if strict is None else strict
        try:
            window = parsed.window(strict)
            spec = semantic_version.NpmSpec(window)
        except ValueError:
            logger.debug("Unable to parse range %s for %s", declared, name)
            return declared

        if not strict:
            logger.debug("Extending version for %s from %s to %s", name, declared, window)

        versions = await self.catalog.get_versions(
            name, npmrc, include_prerelease=parsed.is_prerelease
        )
        for version in versions:
            if spec.match(semantic_version.Version(version)):
                return f"{parsed.operator}{version}"

        logger.debug("No version of %s satisfies %s", name, window)
        return declared


def retarget_range(declared: str, version: str) -> str:
    """Point a declared dependency at a new version, keeping its operator.

    Caret and tilde ranges keep their operator, bare versions are replaced
    and anything else is returned unchanged.
    """
    parsed = parse_range(declared)
    if parsed is not None:
        return f"{parsed.operator}{version}"
    if semantic_version.validate(declared.strip()):
        return version
    return declared
