"""Public data types for collector resources and hooks."""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from otelcol2compose.pacts.errors import InvalidConfigurationError
from otelcol2compose.core.constants import (
    DEFAULT_CERTIFICATE_FILE_LOCATOR, DEFAULT_COLLECTOR_IMAGE, DEFAULT_COLLECTOR_TAG,
    DEFAULT_GRPC_PORT, DEFAULT_HTTP_PORT, DEFAULT_KEY_FILE_LOCATOR,
    DEVELOPMENT_ENVIRONMENT, MAX_PORT, MIN_PORT,
)


@dataclass(frozen=True)
class ImageRef:
    """Container image reference split into repository and tag."""
    repository: str = DEFAULT_COLLECTOR_IMAGE
    tag: str = DEFAULT_COLLECTOR_TAG

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}"


@dataclass(frozen=True)
class EndpointSettings:
    """Image plus published/in-container port pairs for the two OTLP endpoints."""
    image: ImageRef = field(default_factory=ImageRef)
    grpc_port: int = DEFAULT_GRPC_PORT
    http_port: int = DEFAULT_HTTP_PORT
    target_grpc_port: int = DEFAULT_GRPC_PORT
    target_http_port: int = DEFAULT_HTTP_PORT

    def validate(self) -> None:
        """Raise InvalidConfigurationError unless every port is an int in range."""
        if not self.image.repository or not self.image.tag:
            raise InvalidConfigurationError(f"image reference '{self.image}' is incomplete")
        for attr in ("grpc_port", "http_port", "target_grpc_port", "target_http_port"):
            value = getattr(self, attr)
            # bool is an int subclass, reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfigurationError(f"{attr} must be an integer, got {value!r}")
            if not MIN_PORT <= value <= MAX_PORT:
                raise InvalidConfigurationError(
                    f"{attr} must be between {MIN_PORT} and {MAX_PORT}, got {value}")


@dataclass(frozen=True)
class CollectorSettings:
    """Everything a caller chooses about one collector resource."""
    endpoints: EndpointSettings = field(default_factory=EndpointSettings)
    certificate_file_locator: str = DEFAULT_CERTIFICATE_FILE_LOCATOR
    key_file_locator: str = DEFAULT_KEY_FILE_LOCATOR


@dataclass(frozen=True)
class Endpoint:
    """A named network endpoint published by a resource."""
    name: str
    port: int
    target_port: int
    scheme: str = "http"


@dataclass(frozen=True)
class CertificateMaterial:
    """Host paths of a development certificate/key pair."""
    cert_file_path: str
    key_file_path: str


@dataclass(frozen=True)
class ConfigOverride:
    """A single YAML key-path assignment passed to the collector command line."""
    path: str
    value: str

    def as_arg(self) -> str:
        return f'--config=yaml:{self.path}: "{self.value}"'


@dataclass(frozen=True)
class BindMount:
    """Host file or directory bind-mounted into a container."""
    host_path: str
    container_path: str
    read_only: bool = True


@dataclass(frozen=True)
class RunContext:
    """How the composer is being invoked.

    ``run_mode`` is False when output is generated for publishing rather than
    for launching resources locally.
    """
    run_mode: bool = True
    environment: str = "Production"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == DEVELOPMENT_ENVIRONMENT.lower()


@dataclass(frozen=True)
class ResourceDescription:
    """Terminal, immutable description of one collector container.

    Extension operations never mutate an instance; they return an updated copy
    via ``evolve``. The environment is a read-only view over a private copy.
    """
    name: str
    image: ImageRef
    endpoints: tuple = ()
    environment: Mapping = field(default_factory=dict, hash=False)
    config_overrides: tuple = ()
    mounts: tuple = ()
    args: tuple = ()
    app_forwarding: bool = False

    def __post_init__(self):
        object.__setattr__(self, "environment", MappingProxyType(dict(self.environment)))

    def evolve(self, **changes) -> "ResourceDescription":
        """Return a copy with *changes* applied; the environment is always copied."""
        changes.setdefault("environment", dict(self.environment))
        return replace(self, **changes)

    def endpoint(self, name: str) -> Endpoint:
        for ep in self.endpoints:
            if ep.name == name:
                return ep
        raise KeyError(f"resource '{self.name}' has no endpoint '{name}'")


@dataclass
class HookContext:
    """Shared state passed to lifecycle hooks before resources start."""
    config: dict
    collectors: dict
    run_context: RunContext
    warnings: list
