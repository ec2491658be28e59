"""Node.js package.json parsing and serialization."""

import json

import semantic_version

from .errors import InvalidManifest
from .models import DEPENDENCY_TYPES


def parse_package_json(content: str, filename: str = "package.json") -> dict:
    """Parse package.json content.

    Args:
        content: The package.json file content
        filename: Name used in error messages

    Returns:
        The manifest as a mutable dict
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidManifest(f'File {filename} is not a valid "package.json" file: {e}') from e

    if not isinstance(data, dict):
        raise InvalidManifest(f'File {filename} is not a valid "package.json" file')

    version = data.get("version")
    if version is not None:
        if not isinstance(version, str) or not semantic_version.validate(version):
            raise InvalidManifest(f'File {filename} has an invalid version "{version}"')

    for dependency_type in DEPENDENCY_TYPES:
        dependencies = data.get(dependency_type)
        if dependencies is None:
            continue
        if not isinstance(dependencies, dict) or not all(
            isinstance(value, str) for value in dependencies.values()
        ):
            raise InvalidManifest(f'File {filename} has an invalid "{dependency_type}" group')

    return data


def workspace_paths(data: dict) -> list[str]:
    """Return the workspace paths declared by a manifest.

    Both the plain list form and the ``{"packages": [...]}`` form are
    accepted.
    """
    workspaces = data.get("workspaces") or []
    if isinstance(workspaces, dict):
        workspaces = workspaces.get("packages") or []
    if not isinstance(workspaces, list):
        raise InvalidManifest('"workspaces" must be a list of paths')
    return [str(path) for path in workspaces]


def serialize_package_json(data: dict) -> str:
    """Serialize a manifest, sorting dependency groups and dropping empty ones."""
    for dependency_type in DEPENDENCY_TYPES:
        dependencies = data.get(dependency_type)
        if dependencies:
            data[dependency_type] = dict(sorted(dependencies.items()))
        else:
            data.pop(dependency_type, None)

    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
