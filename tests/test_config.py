"""Tests for config.yaml loading."""

import pytest

from vm_batch import config as config_module
from vm_batch.config import BatchConfig, load_config
from vm_batch.errors import ConfigError


class TestLoadConfig:
    """Defaults, overrides and invalid files."""

    def test_missing_default_file_uses_builtins(self, tmp_path, monkeypatch):
        monkeypatch.setattr(config_module, "DEFAULT_CONFIG_PATH", tmp_path / "absent.yaml")
        cfg = load_config()
        assert cfg.proxmox.template_id == 5000
        assert cfg.proxmox.start_id == 5050
        assert cfg.proxmox.storage == "local-lvm"
        assert cfg.defaults.ram == "4096M"
        assert cfg.defaults.bridge == "vmbr1"
        assert cfg.limits.max_cpu_cores == 32

    def test_partial_override(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "proxmox:\n"
            "  node: pve2\n"
            "  template_id: 9000\n"
            "defaults:\n"
            "  bridge: vmbr0\n"
            "limits:\n"
            "  max_ram_mb: 65536\n"
        )
        cfg = load_config(path)
        assert cfg.proxmox.node == "pve2"
        assert cfg.proxmox.template_id == 9000
        assert cfg.proxmox.start_id == 5050
        assert cfg.defaults.bridge == "vmbr0"
        assert cfg.defaults.cpu_cores == 2
        assert cfg.limits.max_ram_mb == 65536
        assert cfg.limits.min_ram_mb == 256

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path).defaults == BatchConfig().defaults

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("proxmox: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("proxmox:\n  template_id: abc\n")
        with pytest.raises(ConfigError, match="template_id"):
            load_config(path)

    def test_non_mapping_document(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_config(path)
