# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Unit tests for pmm.yml loading and writing."""

from __future__ import annotations

import stat
from pathlib import Path

import pytest
import yaml
from pydantic import SecretStr

from pmm_admin.config import CONFIG_FILE_MODE, load_config, write_config
from pmm_admin.errors import ProtocolConfigurationError
from pmm_admin.models import ModelPmmConfig


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    return tmp_path / "pmm-client" / "pmm.yml"


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, config_file: Path) -> None:
        config = load_config(config_file)
        assert config == ModelPmmConfig()
        assert config.client_name == ""

    def test_empty_file(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text("")
        assert load_config(config_file) == ModelPmmConfig()

    def test_reads_values(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text(
            "server_address: pmm.example.com:8443\n"
            "client_address: 10.0.0.5\n"
            "client_name: db-host\n"
            "server_ssl: true\n"
            "unknown_key: ignored\n"
        )
        config = load_config(config_file)
        assert config.server_url == "https://pmm.example.com:8443"
        assert config.bind_address == "10.0.0.5"

    def test_invalid_yaml(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text("server_address: [unclosed\n")
        with pytest.raises(ProtocolConfigurationError, match="Invalid YAML"):
            load_config(config_file)

    def test_not_a_mapping(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text("- a\n- b\n")
        with pytest.raises(ProtocolConfigurationError, match="must be a mapping"):
            load_config(config_file)

    def test_invalid_client_name(self, config_file: Path) -> None:
        config_file.parent.mkdir(parents=True)
        config_file.write_text("client_name: 'bad name!'\n")
        with pytest.raises(ProtocolConfigurationError, match="Client name must be"):
            load_config(config_file)


class TestWriteConfig:
    """Tests for write_config."""

    def test_roundtrip_keeps_passwords(self, config_file: Path) -> None:
        config = ModelPmmConfig(
            server_address="pmm.example.com",
            client_address="10.0.0.5",
            client_name="db-host",
            server_user="admin",
            server_password=SecretStr("s3cret"),
            mysql_password=SecretStr("generated"),
        )
        write_config(config, config_file)

        loaded = load_config(config_file)
        assert loaded == config
        assert loaded.server_auth == ("admin", "s3cret")

    def test_file_mode(self, config_file: Path) -> None:
        write_config(ModelPmmConfig(client_name="db-host"), config_file)
        assert stat.S_IMODE(config_file.stat().st_mode) == CONFIG_FILE_MODE

    def test_empty_optional_fields_omitted(self, config_file: Path) -> None:
        write_config(ModelPmmConfig(client_name="db-host"), config_file)
        document = yaml.safe_load(config_file.read_text())
        assert document == {
            "server_address": "",
            "client_address": "",
            "bind_address": "",
            "client_name": "db-host",
        }

    def test_unwritable_location(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        with pytest.raises(ProtocolConfigurationError, match="cannot write config file"):
            write_config(ModelPmmConfig(), blocker / "pmm.yml")
