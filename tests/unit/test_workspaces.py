"""Tests for the workspace version registry."""

import pytest

from core.errors import DuplicateRegistration, RegressionError, UnknownPackage
from core.workspaces import WorkspaceRegistry


class TestWorkspaceRegistry:
    """Test registration and propagation of workspace versions."""

    def setup_method(self):
        """Setup test fixtures."""
        self.registry = WorkspaceRegistry()
        self.calls = []
        self.registry.subscribe(lambda name, version: self.calls.append((name, version)))

    def test_register_defaults_version(self):
        """Should default a missing version to 0.0.0."""
        self.registry.register("lib")

        assert self.registry.has("lib")
        assert "lib" in self.registry
        assert self.registry.get("lib") == "0.0.0"
        assert len(self.registry) == 1

    def test_register_twice_fails(self):
        """Should reject duplicate package names."""
        self.registry.register("lib", "1.0.0")

        with pytest.raises(DuplicateRegistration):
            self.registry.register("lib", "2.0.0")

    def test_update_unknown_package_fails(self):
        """Should reject updates of unregistered packages."""
        with pytest.raises(UnknownPackage):
            self.registry.record_update("lib", "1.0.0")

    def test_update_to_lower_version_fails(self):
        """Should reject versions moving backwards."""
        self.registry.register("lib", "1.2.0")

        with pytest.raises(RegressionError):
            self.registry.record_update("lib", "1.1.9")
        assert self.registry.get("lib") == "1.2.0"
        assert self.calls == []

    def test_update_to_equal_version_is_silent(self):
        """Should not notify when the version does not change."""
        self.registry.register("lib", "1.2.0")
        self.registry.record_update("lib", "1.2.0")

        assert self.calls == []

    def test_update_notifies_once(self):
        """Should store the new version and notify exactly once."""
        self.registry.register("lib", "1.2.0")
        self.registry.record_update("lib", "1.10.0")

        assert self.registry.get("lib") == "1.10.0"
        assert self.calls == [("lib", "1.10.0")]

    def test_observers_notified_in_subscription_order(self):
        """Should deliver updates in subscription order."""
        order = []
        self.registry.subscribe(lambda name, version: order.append("second"))
        self.registry.subscribe(lambda name, version: order.append("third"))
        self.registry.register("lib", "1.0.0")

        self.registry.record_update("lib", "1.0.1")

        assert self.calls == [("lib", "1.0.1")]
        assert order == ["second", "third"]

    def test_iteration_and_max_version(self):
        """Should iterate all packages and compute the highest version."""
        self.registry.register("a", "1.0.0")
        self.registry.register("b", "1.10.0")
        self.registry.register("c", "1.9.0")

        assert dict(self.registry) == {"a": "1.0.0", "b": "1.10.0", "c": "1.9.0"}
        assert self.registry.max_version() == "1.10.0"
