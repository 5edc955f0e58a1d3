"""Public contracts for hooks and extensions."""

from otelcol2compose.pacts.errors import (
    CollectorError, InvalidConfigurationError, CertificateProvisioningError,
)
from otelcol2compose.pacts.types import (
    ImageRef, EndpointSettings, CollectorSettings, Endpoint, CertificateMaterial,
    ConfigOverride, BindMount, RunContext, ResourceDescription, HookContext,
)
from otelcol2compose.pacts.helpers import rewrite_loopback, is_secure_url
from otelcol2compose.pacts.hooks import LifecycleHook, HookRegistry, apply_hooks

__all__ = [
    "CollectorError",
    "InvalidConfigurationError",
    "CertificateProvisioningError",
    "ImageRef",
    "EndpointSettings",
    "CollectorSettings",
    "Endpoint",
    "CertificateMaterial",
    "ConfigOverride",
    "BindMount",
    "RunContext",
    "ResourceDescription",
    "HookContext",
    "rewrite_loopback",
    "is_secure_url",
    "LifecycleHook",
    "HookRegistry",
    "apply_hooks",
]
