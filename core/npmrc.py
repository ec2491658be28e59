"""Reading and merging of ".npmrc" configuration files."""

import configparser
import logging
import os
import re
from pathlib import Path

from .config import DEFAULT_GLOBAL_NPMRC

logger = logging.getLogger(__name__)

_ENV_REFERENCE = re.compile(r"^\$\{?([^}]*)\}?$")


def _substitute_env(value: str) -> str:
    """Replace a whole-value "${VAR}" or "$VAR" reference with its value."""
    return _ENV_REFERENCE.sub(lambda match: os.environ.get(match.group(1), ""), value)


def _unquote(value: str) -> str:
    """Remove one pair of matching surrounding quotes."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def read_ini_file(path: Path | str | None) -> dict[str, str]:
    """Read a single npmrc file, returning an empty mapping if it is missing."""
    if not path:
        return {}

    try:
        content = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}

    # npmrc files have no sections and keys may contain ":"
    parser = configparser.ConfigParser(
        delimiters=("=",),
        comment_prefixes=("#", ";"),
        interpolation=None,
        allow_no_value=True,
        strict=False,
    )
    parser.optionxform = str
    # Indented lines would otherwise continue the previous value
    lines = "\n".join(line.strip() for line in content.splitlines())
    parser.read_string("[npmrc]\n" + lines, source=str(path))

    logger.debug("Read npmrc file %s", path)
    return {
        key: _substitute_env(_unquote((value or "").strip()))
        for key, value in parser["npmrc"].items()
    }


def read_npmrc(package_file: Path | str) -> dict[str, str]:
    """Merge the global, user and package-local npmrc files.

    Args:
        package_file: Path of the package.json the configuration is for

    Returns:
        Merged configuration, local values overriding user and global ones
    """
    global_file = os.environ.get("NPM_CONFIG_GLOBALCONFIG") or DEFAULT_GLOBAL_NPMRC

    user_file = os.environ.get("NPM_CONFIG_USERCONFIG")
    if not user_file and os.environ.get("HOME"):
        user_file = str(Path(os.environ["HOME"]) / ".npmrc")

    local_file = Path(package_file).resolve().parent / ".npmrc"

    merged: dict[str, str] = {}
    for path in (global_file, user_file, local_file):
        merged.update(read_ini_file(path))
    return merged
