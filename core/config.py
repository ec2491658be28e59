"""Defaults for check-updates."""

DEFAULT_REGISTRY = "https://registry.npmjs.org/"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_CONCURRENCY = 6
DEFAULT_MANIFEST = "package.json"
DEFAULT_VERSION = "0.0.0"
DEFAULT_GLOBAL_NPMRC = "/etc/npmrc"

# Accept header for the abbreviated ("corgi") packument
PACKUMENT_ACCEPT = (
    "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
)
