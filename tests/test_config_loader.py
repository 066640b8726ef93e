from __future__ import annotations

import tomllib
from pathlib import Path

import pytest

from loudspin.core.config_loader import dump_config, load_config
from loudspin.core.errors import ConfigLoadError, ConfigValidationError, format_error_chain
from loudspin.core.model import Config, Loudness


def _write_config(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_load_toml_config(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path / "loudspin.conf",
        """
devices = ["/dev/disk/by-id/ata-WDC*", "/dev/sd?"]
hdparm_path = "/usr/sbin/hdparm"
""",
    )

    config = load_config(path, Loudness.QUIET)
    assert config == Config(
        devices=("/dev/disk/by-id/ata-WDC*", "/dev/sd?"),
        tool_path="/usr/sbin/hdparm",
        command_arg=Loudness.QUIET,
        source=path,
    )


def test_tool_path_defaults_to_sbin_hdparm(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "loudspin.conf", 'devices = ["/dev/sda"]\n')

    config = load_config(path)
    assert config.tool_path == "/sbin/hdparm"
    assert config.command_arg == Loudness.SHOW


def test_empty_device_list_is_valid(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "loudspin.conf", "devices = []\n")

    assert load_config(path).devices == ()


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "loudspin.conf", 'devices = ["/dev/sda"]\nspindown = 120\n')

    assert load_config(path).devices == ("/dev/sda",)


def test_load_yaml_config(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path / "loudspin.yaml",
        """
devices:
  - /dev/sd?
hdparm_path: /opt/bin/hdparm
""",
    )

    config = load_config(path, "loud")
    assert config.devices == ("/dev/sd?",)
    assert config.tool_path == "/opt/bin/hdparm"
    assert config.command_arg == "loud"


def test_yaml_duplicate_keys_rejected(tmp_path: Path) -> None:
    path = _write_config(
        tmp_path / "loudspin.yml",
        """
devices: [/dev/sda]
devices: [/dev/sdb]
""",
    )

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(path)
    assert "Duplicate key 'devices'" in format_error_chain(excinfo.value)


def test_missing_devices_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "loudspin.conf", 'hdparm_path = "/sbin/hdparm"\n')

    with pytest.raises(ConfigValidationError, match="Schema validation failed"):
        load_config(path)


def test_non_string_device_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "loudspin.conf", "devices = [1]\n")

    with pytest.raises(ConfigValidationError, match=r"\(devices\.0\)"):
        load_config(path)


def test_non_mapping_root_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "loudspin.yaml", "- /dev/sda\n- /dev/sdb\n")

    with pytest.raises(ConfigValidationError, match="must contain a mapping"):
        load_config(path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    path = _write_config(tmp_path / "loudspin.conf", "devices = [\n")

    with pytest.raises(ConfigValidationError) as excinfo:
        load_config(path)
    assert str(excinfo.value) == "error parsing the configuration"
    assert isinstance(excinfo.value.__cause__, Exception)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError) as excinfo:
        load_config(tmp_path / "absent.conf")
    chain = format_error_chain(excinfo.value)
    assert chain.startswith("error opening the configuration file: ")
    assert "No such file or directory" in chain


def test_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "loudspin.conf"
    path.write_bytes(b"devices = [\"\xff\xfe\"]\n")

    with pytest.raises(ConfigLoadError, match="error reading from the configuration file"):
        load_config(path)


def test_dump_config_lists_persisted_fields() -> None:
    dumped = dump_config(Config(devices=("/dev/sd?",), command_arg=Loudness.LOUD))

    assert dumped.splitlines() == ['devices = ["/dev/sd?"]', 'hdparm_path = "/sbin/hdparm"']
    assert tomllib.loads(dumped) == {"devices": ["/dev/sd?"], "hdparm_path": "/sbin/hdparm"}
