"""
Unit tests for theme persistence
"""
from HLP.preferences import DEFAULT_THEME, read_theme, theme_config_path, write_theme


class TestThemePreference:
    """Test read_theme / write_theme"""

    def test_default_path(self, tmp_path):
        """Test the preference file location"""
        assert theme_config_path(tmp_path) == tmp_path / ".config" / "logs-parser" / "theme"

    def test_missing_file_gives_default(self, tmp_path):
        """Test the default when nothing was saved"""
        assert read_theme(tmp_path / "theme") == DEFAULT_THEME == "textual-dark"

    def test_round_trip(self, tmp_path):
        """Test a saved theme is read back, creating parent directories"""
        path = tmp_path / "nested" / "dir" / "theme"
        assert write_theme("nord", path)
        assert read_theme(path) == "nord"

    def test_blank_file_gives_default(self, tmp_path):
        """Test an empty preference file"""
        path = tmp_path / "theme"
        path.write_text("  \n")
        assert read_theme(path) == DEFAULT_THEME

    def test_unreadable_path_gives_default(self, tmp_path):
        """Test a directory in place of the file falls back to the default"""
        path = tmp_path / "theme"
        path.mkdir()
        assert read_theme(path) == DEFAULT_THEME

    def test_write_failure(self, tmp_path):
        """Test write errors are reported, not raised"""
        blocker = tmp_path / "file"
        blocker.write_text("x")
        assert not write_theme("nord", blocker / "theme")
