from pathlib import Path

import pytest

from config.config import (
    DEFAULT_API_URL,
    DEFAULT_CONFIG_FILE,
    DEFAULT_STORE_URL,
    AppdbConfig,
    _deep_merge,
    _expand_env_vars,
    get_config,
    load_config,
    load_yaml,
    parse_optional_bool,
    reset_config,
    set_config,
)

# =========================================================================
# load_yaml
# =========================================================================


class TestLoadYaml:
    def test_returns_empty_dict_for_nonexistent_file(self):
        assert load_yaml(Path("/nonexistent/path/config.yaml")) == {}

    def test_loads_yaml_file(self, tmp_path):
        config_file = tmp_path / "test.yaml"
        config_file.write_text("key: value\nnested:\n  a: 1\n")
        assert load_yaml(config_file) == {"key": "value", "nested": {"a": 1}}

    def test_returns_empty_dict_for_empty_file(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")
        assert load_yaml(config_file) == {}


# =========================================================================
# _expand_env_vars
# =========================================================================


class TestExpandEnvVars:
    def test_expands_set_variable(self, monkeypatch):
        monkeypatch.setenv("APPDB_CUSTOMER_ID", "cust-1")
        assert _expand_env_vars("${APPDB_CUSTOMER_ID}") == "cust-1"

    def test_uses_default_when_unset(self):
        assert _expand_env_vars("${APPDB_LANG:-en}") == "en"

    def test_empty_default(self):
        assert _expand_env_vars("${APPDB_DEVICE_ID:-}") == ""

    def test_leaves_unset_without_default(self):
        assert _expand_env_vars("${APPDB_DEVICE_ID}") == "${APPDB_DEVICE_ID}"

    def test_recurses_into_containers(self, monkeypatch):
        monkeypatch.setenv("APPDB_APP_ID", "42")
        data = {"sdk": {"ids": ["${APPDB_APP_ID}", 7]}}
        assert _expand_env_vars(data) == {"sdk": {"ids": ["42", 7]}}


# =========================================================================
# parse_optional_bool / _deep_merge
# =========================================================================


class TestParseOptionalBool:
    @pytest.mark.parametrize("value", [True, "true", "1", "YES", " on "])
    def test_true_values(self, value):
        assert parse_optional_bool(value) is True

    @pytest.mark.parametrize("value", [False, "false", "0", "no", "Off"])
    def test_false_values(self, value):
        assert parse_optional_bool(value) is False

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_unset_values(self, value):
        assert parse_optional_bool(value) is None

    def test_rejects_garbage(self):
        with pytest.raises(ValueError, match="Invalid boolean"):
            parse_optional_bool("maybe")


class TestDeepMerge:
    def test_merges_nested_dicts(self):
        base = {"appdb": {"lang": "en", "brand": "appdb"}}
        overlay = {"appdb": {"lang": "de"}}
        assert _deep_merge(base, overlay) == {"appdb": {"lang": "de", "brand": "appdb"}}

    def test_does_not_mutate_base(self):
        base = {"a": 1}
        _deep_merge(base, {"a": 2})
        assert base == {"a": 1}


# =========================================================================
# AppdbConfig.validate
# =========================================================================


class TestValidate:
    def test_defaults_are_valid(self):
        AppdbConfig().validate()

    def test_rejects_url_without_scheme(self):
        with pytest.raises(ValueError, match="api_url"):
            AppdbConfig(api_url="api.dbservices.to/v1.7").validate()

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError, match="timeout_seconds"):
            AppdbConfig(timeout_seconds=0).validate()

    @pytest.mark.parametrize("step", [0, -0.1, 1.5])
    def test_rejects_bad_step(self, step):
        with pytest.raises(ValueError, match="progress.step"):
            AppdbConfig(progress_step=step).validate()

    def test_rejects_negative_interval(self):
        with pytest.raises(ValueError, match="interval_seconds"):
            AppdbConfig(progress_interval_seconds=-1).validate()

    @pytest.mark.parametrize("filename", ["", "dir/pairingFile.plist"])
    def test_rejects_bad_filename(self, filename):
        with pytest.raises(ValueError, match="storage.filename"):
            AppdbConfig(pairing_filename=filename).validate()

    def test_rejects_bad_installed_flag(self):
        with pytest.raises(ValueError):
            AppdbConfig(sdk={"installed_via_appdb": "sometimes"}).validate()

    def test_rejects_bad_update_flag(self):
        with pytest.raises(ValueError, match="sdk.update_available"):
            AppdbConfig(sdk={"update_available": "maybe"}).validate()


# =========================================================================
# load_config
# =========================================================================


class TestLoadConfig:
    def test_explicit_missing_path_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_missing_default_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr("config.config.DEFAULT_CONFIG_FILE", tmp_path / "absent.yaml")
        config = load_config()

        assert config.api_url == DEFAULT_API_URL
        assert config.store_url == DEFAULT_STORE_URL
        assert config.pairing_filename == "pairingFile.plist"
        assert config.sdk == {}

    def test_loads_sections(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "appdb:\n"
            "  api_url: https://api.example.test/v2/\n"
            "  lang: de\n"
            "  timeout_seconds: 5\n"
            "storage:\n"
            "  documents_dir: /data/docs\n"
            "  filename: pair.plist\n"
            "progress:\n"
            "  step: 0.5\n"
            "  interval_seconds: 0\n"
            "sdk:\n"
            "  persistent_customer_identifier: cust\n"
        )
        config = load_config(config_file)

        assert config.api_url == "https://api.example.test/v2"
        assert config.lang == "de"
        assert config.brand == "appdb"
        assert config.timeout_seconds == 5.0
        assert config.documents_dir == "/data/docs"
        assert config.pairing_filename == "pair.plist"
        assert config.progress_step == 0.5
        assert config.progress_interval_seconds == 0.0
        assert config.sdk == {"persistent_customer_identifier": "cust"}

    def test_env_expansion_and_numeric_strings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APPDB_TIMEOUT_SECONDS", "12")
        monkeypatch.setenv("APPDB_DEVICE_ID", "dev-9")
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "appdb:\n"
            "  timeout_seconds: ${APPDB_TIMEOUT_SECONDS:-30}\n"
            "sdk:\n"
            "  persistent_device_identifier: ${APPDB_DEVICE_ID:-}\n"
        )
        config = load_config(config_file)

        assert config.timeout_seconds == 12.0
        assert config.sdk["persistent_device_identifier"] == "dev-9"

    def test_overrides(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("appdb:\n  lang: en\n")
        config = load_config(config_file, overrides={"appdb": {"lang": "fr"}})
        assert config.lang == "fr"

    def test_invalid_values_raise(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("appdb:\n  api_url: ftp://nope\n")
        with pytest.raises(ValueError):
            load_config(config_file)

    def test_zero_timeout_is_rejected(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("appdb:\n  timeout_seconds: 0\n")
        with pytest.raises(ValueError, match="timeout_seconds"):
            load_config(config_file)

    def test_zero_step_is_rejected(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("progress:\n  step: 0\n")
        with pytest.raises(ValueError, match="progress.step"):
            load_config(config_file)

    def test_empty_numeric_values_use_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "appdb:\n  timeout_seconds:\nprogress:\n  step:\n  interval_seconds: \"\"\n"
        )
        config = load_config(config_file)

        assert config.timeout_seconds == 30.0
        assert config.progress_step == 0.025
        assert config.progress_interval_seconds == 0.05

    def test_non_numeric_value_raises_value_error(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("progress:\n  step: [1, 2]\n")
        with pytest.raises(ValueError, match="progress.step must be a number"):
            load_config(config_file)

    def test_shipped_default_file_loads(self, monkeypatch):
        monkeypatch.setenv("APPDB_CUSTOMER_ID", "cust-1")
        config = load_config(DEFAULT_CONFIG_FILE)

        assert config.api_url == DEFAULT_API_URL
        assert config.timeout_seconds == 30.0
        assert config.documents_dir == ""
        assert config.sdk["persistent_customer_identifier"] == "cust-1"
        assert config.sdk["installed_via_appdb"] == ""


# =========================================================================
# Singleton
# =========================================================================


class TestSingleton:
    def setup_method(self):
        reset_config()

    def teardown_method(self):
        reset_config()

    def test_set_and_get(self):
        config = AppdbConfig(lang="de")
        set_config(config)
        assert get_config() is config

    def test_get_loads_once(self, tmp_path, monkeypatch):
        monkeypatch.setattr("config.config.DEFAULT_CONFIG_FILE", tmp_path / "absent.yaml")
        first = get_config()
        assert get_config() is first

    def test_reset_forces_reload(self, tmp_path, monkeypatch):
        monkeypatch.setattr("config.config.DEFAULT_CONFIG_FILE", tmp_path / "absent.yaml")
        first = get_config()
        reset_config()
        assert get_config() is not first
