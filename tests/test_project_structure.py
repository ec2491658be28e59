"""Test that project structure is correct and modules can be imported."""

import core.models
import core.parse_node
import core.resolve_node
import core.updater
import core.versions
import core.workspaces
from core.models import DEPENDENCY_TYPES, DependencyChange, UpdaterOptions


def test_core_modules_importable():
    """Ensure core modules can be imported."""
    # This will fail if modules have syntax errors or missing dependencies

    # Basic smoke test - ensure key classes exist
    assert hasattr(core.versions, "VersionCatalog")
    assert hasattr(core.resolve_node, "RangeResolver")
    assert hasattr(core.workspaces, "WorkspaceRegistry")
    assert hasattr(core.updater, "ManifestNode")
    assert hasattr(core.parse_node, "parse_package_json")


def test_model_creation():
    """Test that basic models can be instantiated."""
    change = DependencyChange(name="lib", declared="^1.0.0", updated="^2.0.0", type="devDependencies")
    assert change.name == "lib"
    assert change.kind == "dev"

    options = UpdaterOptions()
    assert options.bump is None
    assert options.workspaces is True
    assert DEPENDENCY_TYPES[0] == "dependencies"
