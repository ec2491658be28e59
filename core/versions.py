"""Per-run cache of the published versions of npm packages."""

import asyncio
import logging
from collections.abc import Iterable, Mapping

import semantic_version

from .config import DEFAULT_MAX_CONCURRENCY
from .npm_registry import NpmRegistryClient

logger = logging.getLogger(__name__)


def _cache_key(name: str, include_prerelease: bool) -> str:
    return f"{name}+prerelease" if include_prerelease else name


def sort_versions(
    versions: Mapping[str, dict] | Iterable[str], include_prerelease: bool = False
) -> tuple[str, ...]:
    """Filter and sort versions, newest first.

    Deprecated versions (when metadata is available), versions that are not
    valid semantic versions and, unless requested, prereleases are dropped.
    """
    if isinstance(versions, Mapping):
        names = [v for v, info in versions.items() if not (info or {}).get("deprecated")]
    else:
        names = list(versions)

    parsed = []
    for name in names:
        try:
            version = semantic_version.Version(name)
        except ValueError:
            continue
        if version.prerelease and not include_prerelease:
            continue
        parsed.append(version)

    parsed.sort(reverse=True)
    return tuple(str(version) for version in parsed)


class VersionCatalog:
    """Fetches and caches the available versions of packages.

    Concurrent requests for the same package share a single fetch. Completed
    entries never change for the lifetime of the catalog; failed fetches are
    forgotten so a later call can retry.
    """

    def __init__(
        self,
        client: NpmRegistryClient | None = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        self.client = client or NpmRegistryClient()
        self.max_concurrency = max_concurrency
        self._versions: dict[str, tuple[str, ...]] = {}
        self._pending: dict[str, asyncio.Task] = {}
        self._semaphore: asyncio.Semaphore | None = None

    def seed(
        self,
        name: str,
        versions: Mapping[str, dict] | Iterable[str],
        include_prerelease: bool = False,
    ) -> None:
        """Populate an entry without fetching it."""
        key = _cache_key(name, include_prerelease)
        self._versions[key] = sort_versions(versions, include_prerelease)

    async def get_versions(
        self,
        name: str,
        npmrc: dict[str, str] | None = None,
        include_prerelease: bool = False,
    ) -> tuple[str, ...]:
        """Return the available versions of a package, newest first.

        Args:
            name: Name of the package
            npmrc: Registry configuration, passed through to the client
            include_prerelease: Whether prerelease versions are included

        Returns:
            Sorted version strings
        """
        key = _cache_key(name, include_prerelease)

        if key in self._versions:
            logger.debug("Returning cached versions for %s", name)
            return self._versions[key]

        task = self._pending.get(key)
        if task is None:
            logger.debug("Retrieving versions for package %s", name)
            task = asyncio.ensure_future(self._fetch(name, npmrc, include_prerelease))
            self._pending[key] = task
            task.add_done_callback(lambda done: self._settle(key, done))
        else:
            logger.debug("Awaiting in-flight versions for %s", name)

        return await asyncio.shield(task)

    def _settle(self, key: str, task: asyncio.Task) -> None:
        self._pending.pop(key, None)
        if not task.cancelled() and task.exception() is None:
            self._versions.setdefault(key, task.result())

    async def _fetch(
        self, name: str, npmrc: dict[str, str] | None, include_prerelease: bool
    ) -> tuple[str, ...]:
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)

        async with self._semaphore:
            metadata = await self.client.fetch_versions(name, npmrc)
        return sort_versions(metadata, include_prerelease)
