"""npm registry metadata retrieval."""

import logging
from urllib.parse import urlsplit

import httpx

from .config import DEFAULT_REGISTRY, DEFAULT_TIMEOUT, PACKUMENT_ACCEPT
from .errors import FetchError

logger = logging.getLogger(__name__)


def registry_url(name: str, npmrc: dict[str, str]) -> str:
    """Return the registry base URL serving a package, honouring scopes."""
    if name.startswith("@") and "/" in name:
        scope = name.split("/", 1)[0]
        scoped = npmrc.get(f"{scope}:registry")
        if scoped:
            return scoped if scoped.endswith("/") else scoped + "/"

    registry = npmrc.get("registry") or DEFAULT_REGISTRY
    return registry if registry.endswith("/") else registry + "/"


def auth_headers(registry: str, npmrc: dict[str, str]) -> dict[str, str]:
    """Build authorization headers for a registry from npmrc credentials.

    Credentials are keyed by the registry URL without its scheme, for
    example "//registry.example.com/npm/:_authToken". The longest matching
    path prefix wins.
    """
    parts = urlsplit(registry)
    path = parts.path if parts.path.endswith("/") else parts.path + "/"
    nerf = f"//{parts.netloc}{path}"

    while nerf.startswith("//") and len(nerf) > 2:
        token = npmrc.get(f"{nerf}:_authToken")
        if token:
            return {"Authorization": f"Bearer {token}"}
        basic = npmrc.get(f"{nerf}:_auth")
        if basic:
            return {"Authorization": f"Basic {basic}"}
        # Strip the last path segment and try again
        trimmed = nerf.rstrip("/").rsplit("/", 1)[0] + "/"
        if trimmed == nerf or trimmed == "//":
            break
        nerf = trimmed

    if npmrc.get("_authToken"):
        return {"Authorization": f"Bearer {npmrc['_authToken']}"}
    return {}


class NpmRegistryClient:
    """Fetches version metadata for packages from an npm registry."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT):
        """Initialize the registry client.

        Args:
            timeout: Request timeout in seconds
        """
        self.timeout = timeout

    async def fetch_versions(
        self, name: str, npmrc: dict[str, str] | None = None
    ) -> dict[str, dict]:
        """Fetch the "versions" mapping of a package packument.

        Args:
            name: Name of the package
            npmrc: Merged npmrc configuration for the requesting manifest

        Returns:
            Mapping from version string to its metadata
        """
        npmrc = npmrc or {}
        registry = registry_url(name, npmrc)
        url = registry + name.replace("/", "%2f")
        headers = {"Accept": PACKUMENT_ACCEPT, **auth_headers(registry, npmrc)}

        logger.debug("Fetching %s", url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=headers)
                if response.status_code == 404:
                    raise FetchError(f"Package {name} not found")
                response.raise_for_status()
                data = response.json()

        except httpx.TimeoutException as e:
            raise FetchError(f"Timeout fetching metadata for {name}") from e
        except httpx.HTTPStatusError as e:
            raise FetchError(f"HTTP error fetching {name}: {e}") from e
        except httpx.HTTPError as e:
            raise FetchError(f"Network error fetching {name}: {e}") from e
        except ValueError as e:
            raise FetchError(f"Invalid metadata for {name}: {e}") from e

        versions = data.get("versions") if isinstance(data, dict) else None
        if not isinstance(versions, dict):
            raise FetchError(f"No versions found for package {name}")
        return versions
