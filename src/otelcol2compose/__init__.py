"""otelcol2compose — compose OpenTelemetry Collector containers into compose.yml.

Re-exports the public API. Extensions can import directly from here or from
otelcol2compose.pacts.
"""

from otelcol2compose.pacts.errors import (
    CollectorError, InvalidConfigurationError, CertificateProvisioningError,
)
from otelcol2compose.pacts.types import (
    CollectorSettings, EndpointSettings, ImageRef, ResourceDescription, RunContext,
)
from otelcol2compose.pacts.helpers import rewrite_loopback, is_secure_url
from otelcol2compose.pacts.hooks import LifecycleHook, HookRegistry
from otelcol2compose.core.certs import (
    DotnetDevCertProvider, SecureTransportProvisioner, StaticCertProvider,
)
from otelcol2compose.core.collector import CollectorConfigurator, add_config, with_app_forwarding
from otelcol2compose.core.convert import convert

__all__ = [
    "CollectorError",
    "InvalidConfigurationError",
    "CertificateProvisioningError",
    "CollectorSettings",
    "EndpointSettings",
    "ImageRef",
    "ResourceDescription",
    "RunContext",
    "rewrite_loopback",
    "is_secure_url",
    "LifecycleHook",
    "HookRegistry",
    "DotnetDevCertProvider",
    "SecureTransportProvisioner",
    "StaticCertProvider",
    "CollectorConfigurator",
    "add_config",
    "with_app_forwarding",
    "convert",
]
