"""Core data models for check-updates."""

from dataclasses import dataclass
from enum import Enum

DEPENDENCY_TYPES = (
    "dependencies",
    "devDependencies",
    "peerDependencies",
    "optionalDependencies",
)

# Short labels used when reporting changes
DEPENDENCY_KINDS = {
    "dependencies": "main",
    "devDependencies": "dev",
    "peerDependencies": "peer",
    "optionalDependencies": "optional",
}


class BumpLevel(str, Enum):
    """Semantic version component advanced when a package changes."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


@dataclass
class UpdaterOptions:
    """Options shared by every manifest processed in one run."""

    bump: BumpLevel | None = None
    strict: bool = False
    quick: bool = False
    workspaces: bool = True
    align: bool = False
    align_version: str | None = None
    dry_run: bool = False
    debug: bool = False


@dataclass(frozen=True)
class DependencyChange:
    """A single dependency whose declared range was rewritten."""

    name: str
    declared: str
    updated: str
    type: str  # one of DEPENDENCY_TYPES

    @property
    def kind(self) -> str:
        return DEPENDENCY_KINDS.get(self.type, "main")
