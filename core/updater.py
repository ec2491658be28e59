"""Updating of package.json manifests and their workspaces."""

import asyncio
import logging
import os
from enum import Enum
from pathlib import Path

import semantic_version
from rich.markup import escape

from .config import DEFAULT_MANIFEST, DEFAULT_VERSION
from .errors import ManifestStateError, RegressionError
from .models import DEPENDENCY_TYPES, BumpLevel, DependencyChange, UpdaterOptions
from .npmrc import read_npmrc
from .parse_node import parse_package_json, serialize_package_json, workspace_paths
from .report import Reporter
from .resolve_node import RangeResolver, retarget_range
from .versions import VersionCatalog
from .workspaces import WorkspaceRegistry

logger = logging.getLogger(__name__)


class NodeState(Enum):
    """Lifecycle of a manifest node. States are only ever entered forward."""

    UNLOADED = "unloaded"
    LOADED = "loaded"
    UPDATED = "updated"
    ALIGNED = "aligned"
    WRITTEN = "written"


class ManifestNode:
    """One package.json file, together with its workspace children.

    Nodes in the same tree share a WorkspaceRegistry: the version of every
    named package is tracked there and changes are broadcast to every node
    declaring a dependency on it.
    """

    def __init__(
        self,
        package_file: Path | str,
        options: UpdaterOptions,
        catalog: VersionCatalog,
        workspaces: WorkspaceRegistry | None = None,
        reporter: Reporter | None = None,
    ):
        self._package_file = Path(package_file).resolve()
        self.options = options
        self.catalog = catalog
        self.workspaces = workspaces if workspaces is not None else WorkspaceRegistry()
        self.reporter = reporter or Reporter()
        self.resolver = RangeResolver(catalog, strict=options.strict)

        self.children: list[ManifestNode] = []
        self.changes: list[DependencyChange] = []
        self.state = NodeState.UNLOADED

        self._data: dict | None = None
        self._npmrc: dict[str, str] = {}
        self._original_version = DEFAULT_VERSION
        self._changed = False
        self._dirty = False

    @property
    def package_file(self) -> str:
        return os.path.relpath(self._package_file)

    @property
    def data(self) -> dict:
        self._require(NodeState.LOADED, NodeState.UPDATED, NodeState.ALIGNED, NodeState.WRITTEN)
        return self._data

    @property
    def name(self) -> str | None:
        return self.data.get("name")

    @property
    def original_version(self) -> str:
        return self._original_version

    @property
    def version(self) -> str:
        return self.data.get("version") or DEFAULT_VERSION

    @version.setter
    def version(self, version: str) -> None:
        self._require(NodeState.LOADED, NodeState.UPDATED, NodeState.ALIGNED)

        new = semantic_version.Version(version)
        original = semantic_version.Version(self._original_version)
        if new < original:
            raise RegressionError(
                f'Unable to set version for "{self.package_file}" to "{version}" '
                f'as it\'s less than original version "{self._original_version}"'
            )

        if new == original or new == semantic_version.Version(self.version):
            return

        name = self.name
        if name and new < semantic_version.Version(self.workspaces.get(name)):
            raise RegressionError(
                f'Unable to set version for "{self.package_file}" to "{version}" '
                f'as it\'s less than current version "{self.workspaces.get(name)}"'
            )

        self._changed = True
        self._dirty = True
        self.reporter.version_updated(self._details, version)
        self._data["version"] = version
        if self.name:
            self.workspaces.record_update(self.name, version)

    @property
    def changed(self) -> bool:
        """Whether this node, or any of its descendants, changed."""
        return self._changed or any(child.changed for child in self.children)

    @property
    def dirty(self) -> bool:
        """Whether any value in this manifest was modified."""
        return self._dirty

    @property
    def _details(self) -> str:
        details = f"[green]{escape(self.package_file)}[/green]"
        label = " ".join(part for part in (self.name, self.data.get("version")) if part)
        if label:
            details += f" \\[[yellow]{escape(label)}[/yellow]]"
        return details

    def _require(self, *states: NodeState) -> None:
        if self.state not in states:
            raise ManifestStateError(
                f"Manifest {self._package_file} is {self.state.value}, expected "
                + " or ".join(state.value for state in states)
            )

    def load(self) -> "ManifestNode":
        """Read the manifest and, recursively, all of its workspaces."""
        self._require(NodeState.UNLOADED)
        logger.debug("Reading package file %s", self.package_file)

        content = self._package_file.read_text(encoding="utf-8")
        data = parse_package_json(content, self.package_file)
        npmrc = read_npmrc(self._package_file)

        if data.get("name"):
            self.workspaces.register(data["name"], data.get("version"))
        self._original_version = data.get("version") or DEFAULT_VERSION

        self._data = data
        self._npmrc = npmrc
        self.state = NodeState.LOADED
        self.workspaces.subscribe(self._on_workspace_update)

        if self.options.workspaces:
            for package_file in self._workspace_files():
                child = ManifestNode(
                    package_file, self.options, self.catalog, self.workspaces, self.reporter
                )
                self.children.append(child.load())

        return self

    def _workspace_files(self) -> list[Path]:
        base = self._package_file.parent
        files = []
        for path in workspace_paths(self._data):
            if path.startswith("!"):
                logger.debug("Ignoring workspace exclusion %s in %s", path, self.package_file)
                continue
            if any(char in path for char in "*?["):
                for match in sorted(base.glob(path)):
                    if (match / DEFAULT_MANIFEST).is_file():
                        files.append(match / DEFAULT_MANIFEST)
            else:
                files.append(base / path / DEFAULT_MANIFEST)
        return files

    def _on_workspace_update(self, name: str, version: str) -> None:
        if self.state is NodeState.WRITTEN:
            return

        for dependency_type in DEPENDENCY_TYPES:
            dependencies = self._data.get(dependency_type)
            if not dependencies or name not in dependencies:
                continue

            updated = retarget_range(dependencies[name], version)
            if updated == dependencies[name]:
                continue

            logger.debug(
                "Workspace dependency %s in %s now %s", name, self.package_file, updated
            )
            dependencies[name] = updated
            self._changed = True
            self._dirty = True
            self._bump()

    async def update(self) -> list[DependencyChange]:
        """Update dependencies of all workspaces, then of this manifest.

        Returns:
            The changes of this manifest, sorted by dependency name
        """
        self._require(NodeState.LOADED, NodeState.UPDATED)

        for child in self.children:
            await child.update()

        self.reporter.processing(self._details)

        changes = await self._update_group("dependencies")
        incidental: list[DependencyChange] = []
        for dependency_type in DEPENDENCY_TYPES[1:]:
            incidental.extend(await self._update_group(dependency_type))

        # In quick mode, dev/peer/optional changes only count with main ones
        if changes or not self.options.quick:
            changes.extend(incidental)
        elif incidental:
            logger.debug(
                "Not reporting %d non-main changes in %s", len(incidental), self.package_file
            )

        changes.sort(key=lambda change: change.name)
        self.changes = changes
        self.state = NodeState.UPDATED

        if not changes:
            self.reporter.no_changes()
            return changes

        self._changed = True
        self.reporter.changes(changes)
        self._bump()
        return changes

    async def _update_group(self, dependency_type: str) -> list[DependencyChange]:
        dependencies = self._data.get(dependency_type)
        if not dependencies:
            return []

        entries = list(dependencies.items())
        resolved = await asyncio.gather(
            *(
                self.resolver.resolve(
                    name, declared, self._npmrc, workspace_member=self.workspaces.has(name)
                )
                for name, declared in entries
            )
        )

        changes = []
        for (name, declared), updated in zip(entries, resolved):
            if updated == declared:
                continue
            dependencies[name] = updated
            self._dirty = True
            changes.append(DependencyChange(name, declared, updated, dependency_type))
        return changes

    def _bump(self) -> None:
        if not self.options.bump:
            return

        original = semantic_version.Version(self._original_version)
        level = BumpLevel(self.options.bump)
        if level is BumpLevel.MAJOR:
            bumped = original.next_major()
        elif level is BumpLevel.MINOR:
            bumped = original.next_minor()
        else:
            bumped = original.next_patch()

        # Never move back from a version set by alignment
        if bumped <= semantic_version.Version(self.version):
            return
        self.version = str(bumped)

    def align(self, version: str | None = None) -> str | None:
        """Set this manifest and all its workspaces to the same version.

        Args:
            version: Target version, defaults to the highest registered one

        Returns:
            The version aligned to, None when this is not a workspace
        """
        self._require(NodeState.LOADED, NodeState.UPDATED, NodeState.ALIGNED)

        if len(self.workspaces) < 2:
            logger.debug("No workspaces found in %s", self.package_file)
            return None

        target = version or self.workspaces.max_version()
        self._align_to(target)
        self.reporter.aligned(target)
        return target

    def _align_to(self, version: str) -> None:
        self.version = version
        self.state = NodeState.ALIGNED
        for child in self.children:
            child._align_to(version)

    def write(self) -> None:
        """Write this manifest, then all of its workspaces."""
        self._require(NodeState.LOADED, NodeState.UPDATED, NodeState.ALIGNED)

        content = serialize_package_json(self._data)
        logger.debug(">>> %s <<<\n%s", self.package_file, content)
        self._package_file.write_text(content, encoding="utf-8")
        self.state = NodeState.WRITTEN

        for child in self.children:
            child.write()
