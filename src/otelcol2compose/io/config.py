"""Loading and saving otelcol2compose.yaml, and layered setting lookup."""

import os

import yaml

from otelcol2compose.pacts.errors import InvalidConfigurationError
from otelcol2compose.pacts.types import CollectorSettings, EndpointSettings, ImageRef
from otelcol2compose.core.constants import (
    DEFAULT_CERTIFICATE_FILE_LOCATOR, DEFAULT_COLLECTOR_IMAGE, DEFAULT_COLLECTOR_TAG,
    DEFAULT_GRPC_PORT, DEFAULT_HTTP_PORT, DEFAULT_KEY_FILE_LOCATOR,
)

VERSION_KEY = "otelcol2ComposeVersion"


def load_config(path: str) -> dict:
    """Load otelcol2compose.yaml or return empty config."""
    if os.path.exists(path):
        try:
            with open(path, encoding="utf-8") as f:
                cfg = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise InvalidConfigurationError(f"{path} is not valid YAML: {exc}") from exc
        if not isinstance(cfg, dict):
            raise InvalidConfigurationError(f"{path} must contain a mapping at the top level")
    else:
        cfg = {}
    cfg.setdefault(VERSION_KEY, "v1")
    cfg.setdefault("dashboard", {})
    cfg.setdefault("collectors", {})
    cfg.setdefault("services", {})
    return cfg


def save_config(path: str, config: dict) -> None:
    """Write otelcol2compose.yaml."""
    header = "# Configuration descriptor for otelcol2compose\n\n"
    # Ensure version key comes first
    ordered = {VERSION_KEY: config.get(VERSION_KEY, "v1")}
    for k, v in config.items():
        if k != VERSION_KEY:
            ordered[k] = v
    with open(path, "w", encoding="utf-8") as f:
        f.write(header)
        yaml.dump(ordered, f, default_flow_style=False, sort_keys=False)


def get_setting(config: dict, key: str, default: str | None = None) -> str | None:
    """Look up *key* in the environment first, then the ``dashboard`` section.

    ``AppHost:OtlpApiKey`` is read from ``AppHost__OtlpApiKey`` in the
    environment, the usual hierarchical-key convention.
    """
    env_value = os.environ.get(key.replace(":", "__"))
    if env_value:
        return env_value
    value = (config.get("dashboard") or {}).get(key)
    if value is not None and value != "":
        return str(value)
    return default


def _port(entry: dict, key: str, default: int, collector: str) -> int:
    value = entry.get(key, default)
    if isinstance(value, bool):
        raise InvalidConfigurationError(f"collector '{collector}': {key} must be a number")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigurationError(
            f"collector '{collector}': {key} must be a number, got {value!r}") from exc


def collector_settings_from_config(name: str, entry: dict | None) -> CollectorSettings:
    """Parse one ``collectors:`` entry (camelCase keys) into CollectorSettings."""
    entry = entry or {}
    if not isinstance(entry, dict):
        raise InvalidConfigurationError(f"collector '{name}' must be a mapping")
    grpc_port = _port(entry, "grpcPort", DEFAULT_GRPC_PORT, name)
    http_port = _port(entry, "httpPort", DEFAULT_HTTP_PORT, name)
    endpoints = EndpointSettings(
        image=ImageRef(str(entry.get("image", DEFAULT_COLLECTOR_IMAGE)),
                       str(entry.get("version", DEFAULT_COLLECTOR_TAG))),
        grpc_port=grpc_port,
        http_port=http_port,
        # The collector image listens on the defaults regardless of published ports
        target_grpc_port=_port(entry, "targetGrpcPort", DEFAULT_GRPC_PORT, name),
        target_http_port=_port(entry, "targetHttpPort", DEFAULT_HTTP_PORT, name),
    )
    return CollectorSettings(
        endpoints=endpoints,
        certificate_file_locator=entry.get("certificateFileLocator",
                                           DEFAULT_CERTIFICATE_FILE_LOCATOR),
        key_file_locator=entry.get("keyFileLocator", DEFAULT_KEY_FILE_LOCATOR),
    )


def resolve_host_path(path: str, base_dir: str) -> str:
    """Resolve a host path from the config file against the config's directory.

    Compose reads a bare name as a named volume, so bind sources are always
    made absolute.
    """
    path = os.path.expanduser(str(path))
    if os.path.isabs(path):
        return path
    return os.path.abspath(os.path.join(base_dir, path))


def config_files_from_entry(name: str, entry: dict) -> list[str]:
    """Return the ``configs:`` of a collector entry; a single string is one file."""
    configs = entry.get("configs")
    if configs is None:
        return []
    if isinstance(configs, str) and configs:
        return [configs]
    if isinstance(configs, list) and all(isinstance(c, str) and c for c in configs):
        return list(configs)
    raise InvalidConfigurationError(
        f"collector '{name}': configs must be a file path or a list of file paths, "
        f"got {configs!r}")
