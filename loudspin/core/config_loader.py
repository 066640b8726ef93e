"""Configuration loading and validation for loudspin."""

from __future__ import annotations

import json
import logging
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from loudspin.core.errors import ConfigLoadError, ConfigValidationError
from loudspin.core.model import DEFAULT_TOOL_PATH, Config, Loudness

DEFAULT_CONFIG_PATH = Path("/etc/loudspin.conf")
_YAML_SUFFIXES = {".yml", ".yaml"}
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("loudspin.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _read_text(path: Path) -> str:
    try:
        handle = path.open(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError("error opening the configuration file") from exc

    with handle:
        try:
            return handle.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigLoadError("error reading from the configuration file") from exc


def _parse(content: str, path: Path) -> dict[str, Any]:
    try:
        if path.suffix in _YAML_SUFFIXES:
            loaded = yaml.load(content, Loader=UniqueKeyLoader)
        else:
            loaded = tomllib.loads(content)
    except (ConfigValidationError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
        raise ConfigValidationError("error parsing the configuration") from exc

    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Configuration file {path} must contain a mapping at root")
    return loaded


def _validate(doc: dict[str, Any], source: Path) -> None:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        where = ".".join(str(p) for p in exc.path)
        where = f" ({where})" if where else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def load_config(
    path: Path = DEFAULT_CONFIG_PATH,
    loudness: Loudness | str = Loudness.SHOW,
) -> Config:
    """Load the device configuration from ``path``.

    The loudness level comes from the command line and is attached to the
    returned value; it is never read from the file.
    """
    path = Path(path)
    doc = _parse(_read_text(path), path)
    _validate(doc, path)
    LOGGER.debug("loaded configuration from %s", path)
    return Config(
        devices=tuple(doc["devices"]),
        tool_path=doc.get("hdparm_path", DEFAULT_TOOL_PATH),
        command_arg=loudness,
        source=path,
    )


def dump_config(config: Config) -> str:
    """Render the persisted part of ``config`` as TOML ``key = value`` lines."""
    return "".join(f"{key} = {json.dumps(value)}\n" for key, value in config.as_document().items())
