"""
Test Configuration Loading

Verifies access.yaml parsing, defaults and environment interpolation.
"""

import pytest

from content_access.config import (
    EngineConfig,
    TreeConfig,
    load_config,
    load_config_from_file,
    interpolate_env_vars,
    write_default_config,
)


class TestInterpolation:
    """${VAR} and ${VAR:-default} substitution"""

    def test_set_variable_substituted(self, monkeypatch):
        """Set variables replace their placeholder"""
        monkeypatch.setenv("PUBLISH_PERMISSION", "workflow-publish")
        assert interpolate_env_vars({"a": ["${PUBLISH_PERMISSION}"]}) == {"a": ["workflow-publish"]}

    def test_default_used_when_unset(self, monkeypatch):
        """Unset variables fall back to their default"""
        monkeypatch.delenv("ACCOUNTS_ID", raising=False)
        assert interpolate_env_vars("${ACCOUNTS_ID:-29}") == "29"

    def test_required_variable_missing(self, monkeypatch):
        """Unset variables without default are an error"""
        monkeypatch.delenv("ACCOUNTS_ID", raising=False)
        with pytest.raises(KeyError):
            interpolate_env_vars("${ACCOUNTS_ID}")


class TestEngineConfig:
    """Schema and loader"""

    def test_defaults(self):
        """Defaults match the standard permission names"""
        config = EngineConfig()
        assert config.permissions.edit == "page-edit"
        assert config.permissions.publish == "page-publish"
        assert config.superuser_role == "superuser"
        assert config.tree.root_id == 1

    def test_load_from_file(self, tmp_path, monkeypatch):
        """YAML values and interpolated variables are applied"""
        monkeypatch.setenv("ACCOUNTS_ID", "30")
        path = tmp_path / "access.yaml"
        path.write_text(
            "superuser_role: root\n"
            "permissions:\n"
            "  publish: page-approve\n"
            "tree:\n"
            "  root_id: 1\n"
            "  accounts_container_id: \"${ACCOUNTS_ID}\"\n"
            "  protected_ids: [2, 27]\n"
        )

        config = load_config_from_file(path)
        assert config.superuser_role == "root"
        assert config.permissions.publish == "page-approve"
        assert config.permissions.edit == "page-edit"
        assert config.tree.accounts_container_id == 30
        assert config.tree.protected_ids == [2, 27]

    def test_unknown_permission_key_rejected(self, tmp_path):
        """Typos in permission keys are reported"""
        path = tmp_path / "access.yaml"
        path.write_text("permissions:\n  pubilsh: page-publish\n")
        with pytest.raises(KeyError):
            load_config_from_file(path)

    def test_missing_file(self, tmp_path):
        """An explicit path must exist"""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_search_working_dir(self, tmp_path):
        """config/access.yaml in the working dir is found"""
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "access.yaml").write_text("superuser_role: wizard\n")
        assert load_config(working_dir=tmp_path).superuser_role == "wizard"

    def test_no_file_uses_defaults(self, tmp_path, monkeypatch):
        """Without any access.yaml, defaults apply"""
        monkeypatch.chdir(tmp_path)
        assert load_config().to_dict() == EngineConfig().to_dict()

    def test_round_trip(self):
        """to_dict output loads back to the same config"""
        config = EngineConfig.from_dict({"tree": {"accounts_container_id": 29, "trash_id": 7}})
        assert EngineConfig.from_dict(config.to_dict()) == config

    def test_write_default_config(self, tmp_path):
        """A written config loads back unchanged"""
        config = EngineConfig(superuser_role="root", tree=TreeConfig(accounts_container_id=29, protected_ids=[2]))
        path = write_default_config(tmp_path / "access.yaml", config)

        assert path.exists()
        assert load_config_from_file(path) == config
        assert load_config_from_file(write_default_config(tmp_path / "default.yaml")) == EngineConfig()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
