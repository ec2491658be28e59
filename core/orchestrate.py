"""Processing of a number of package files, one by one."""

import glob
import logging
from pathlib import Path

from .models import UpdaterOptions
from .report import Reporter
from .updater import ManifestNode
from .versions import VersionCatalog
from .workspaces import WorkspaceRegistry

logger = logging.getLogger(__name__)


def find_package_files(patterns: list[str]) -> list[str]:
    """Expand glob patterns into files, keeping order and dropping duplicates.

    A pattern matching nothing is kept as is, so that a missing file is
    reported when it is read.
    """
    files: list[str] = []
    for pattern in patterns:
        magic = any(char in pattern for char in "*?[")
        matches = sorted(glob.glob(pattern, recursive=True)) if magic else []
        for file in matches or [pattern]:
            if file not in files:
                files.append(file)
    return files


async def process_packages(
    patterns: list[str],
    options: UpdaterOptions,
    catalog: VersionCatalog | None = None,
    reporter: Reporter | None = None,
) -> bool:
    """Update every package file matched by the given patterns.

    Args:
        patterns: File names or glob patterns of package.json files
        options: Options applied to every package
        catalog: Version catalog, shared by all packages of the run
        reporter: Where progress is reported

    Returns:
        True if any package changed
    """
    catalog = catalog or VersionCatalog()
    reporter = reporter or Reporter()

    changed = False
    for package_file in find_package_files(patterns):
        node = ManifestNode(
            Path(package_file), options, catalog, WorkspaceRegistry(), reporter
        ).load()

        await node.update()

        if options.align or options.align_version:
            node.align(options.align_version)

        if options.dry_run:
            reporter.dry_run(node.package_file)
        else:
            node.write()

        logger.debug("Package %s changed: %s", node.package_file, node.changed)
        changed = changed or node.changed

    return changed
