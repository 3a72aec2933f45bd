"""Tests for zodforge.config module."""

import pytest

from zodforge.config import CONFIG_ENV_VAR, find_config_file, load_conversion_options


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Run every test from an empty directory with no config override."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


class TestFindConfigFile:
    """Test config file lookup."""

    def test_no_config(self):
        assert find_config_file() is None

    def test_file_in_working_directory(self, tmp_path):
        (tmp_path / "zodforge.yml").write_text("strict_objects: true\n")
        assert find_config_file() == tmp_path / "zodforge.yml"

    def test_environment_variable_wins(self, monkeypatch, tmp_path):
        (tmp_path / "zodforge.yml").write_text("strict_objects: true\n")
        custom = tmp_path / "custom.yml"
        monkeypatch.setenv(CONFIG_ENV_VAR, str(custom))

        assert find_config_file() == custom


class TestLoadConversionOptions:
    """Test loading options from YAML."""

    def test_defaults_without_config(self):
        options = load_conversion_options()

        assert options.with_default_values
        assert not options.strict_objects
        assert options.complexity_threshold == 4

    def test_values_from_file(self, tmp_path):
        (tmp_path / "zodforge.yml").write_text(
            "strict_objects: true\nwith_description: true\ncomplexity_threshold: -1\n"
        )

        options = load_conversion_options()

        assert options.strict_objects
        assert options.with_description
        assert options.complexity_threshold == -1
        assert options.with_default_values

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "options.yml"
        path.write_text("all_readonly: true\n")

        assert load_conversion_options(path).all_readonly

    def test_empty_file(self, tmp_path):
        path = tmp_path / "options.yml"
        path.write_text("")

        assert load_conversion_options(path).additional_properties_default

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_conversion_options(tmp_path / "missing.yml")

    def test_unknown_option(self, tmp_path):
        path = tmp_path / "options.yml"
        path.write_text("strict: true\n")

        with pytest.raises(ValueError, match="Invalid config file"):
            load_conversion_options(path)

    def test_threshold_below_minus_one(self, tmp_path):
        path = tmp_path / "options.yml"
        path.write_text("complexity_threshold: -2\n")

        with pytest.raises(ValueError, match="Invalid config file"):
            load_conversion_options(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "options.yml"
        path.write_text("strict_objects: [true\n")

        with pytest.raises(ValueError, match="Failed to parse YAML config file"):
            load_conversion_options(path)
