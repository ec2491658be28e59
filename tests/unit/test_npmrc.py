"""Tests for npmrc configuration merging."""

from core.npmrc import read_ini_file, read_npmrc


class TestNpmrc:
    """Test reading and merging of npmrc files."""

    def test_missing_file(self, tmp_path):
        """Should treat a missing file as empty."""
        assert read_ini_file(tmp_path / "missing") == {}
        assert read_ini_file(None) == {}

    def test_read_keys_with_colons(self, tmp_path):
        """Should keep keys containing colons and ignore comments."""
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text(
            "; a comment\n"
            "# another comment\n"
            "registry=https://npm.example.com/\n"
            "@acme:registry = https://acme.example.com/\n"
            "//acme.example.com/:_authToken=abc\n"
        )

        assert read_ini_file(npmrc) == {
            "registry": "https://npm.example.com/",
            "@acme:registry": "https://acme.example.com/",
            "//acme.example.com/:_authToken": "abc",
        }

    def test_environment_substitution(self, tmp_path, monkeypatch):
        """Should replace environment variable references."""
        monkeypatch.setenv("NPM_TOKEN", "from-env")
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text("//registry.npmjs.org/:_authToken=${NPM_TOKEN}\nother=$MISSING_VARIABLE\n")

        assert read_ini_file(npmrc) == {
            "//registry.npmjs.org/:_authToken": "from-env",
            "other": "",
        }

    def test_merge_order(self, tmp_path, monkeypatch):
        """Should let local settings override user and global ones."""
        (tmp_path / "global.npmrc").write_text("registry=https://global.example.com/\nglobal=yes\n")
        (tmp_path / "user.npmrc").write_text("registry=https://user.example.com/\nuser=yes\n")
        project = tmp_path / "project"
        project.mkdir()
        (project / ".npmrc").write_text("registry=https://local.example.com/\n")

        merged = read_npmrc(project / "package.json")

        assert merged == {
            "registry": "https://local.example.com/",
            "global": "yes",
            "user": "yes",
        }

    def test_quoted_values(self, tmp_path):
        """Should strip one pair of surrounding quotes from values."""
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text(
            'registry="https://r.example/"\n'
            "@acme:registry='https://acme.example.com/'\n"
            'always-auth=""\n'
        )

        assert read_ini_file(npmrc) == {
            "registry": "https://r.example/",
            "@acme:registry": "https://acme.example.com/",
            "always-auth": "",
        }

    def test_indented_keys(self, tmp_path):
        """Should read indented lines as keys of their own."""
        npmrc = tmp_path / ".npmrc"
        npmrc.write_text(
            'registry="https://r.example/"\n'
            "  @x:registry=https://x/\n"
            "strict-ssl=false\n"
        )

        assert read_ini_file(npmrc) == {
            "registry": "https://r.example/",
            "@x:registry": "https://x/",
            "strict-ssl": "false",
        }
