"""Collector resource composition — settings, dashboard URL, and TLS into one description."""

import os

from otelcol2compose.pacts.errors import InvalidConfigurationError
from otelcol2compose.pacts.helpers import rewrite_loopback
from otelcol2compose.pacts.types import (
    BindMount, CollectorSettings, Endpoint, ResourceDescription, RunContext,
)
from otelcol2compose.core.certs import SecureTransportProvisioner
from otelcol2compose.core.constants import (
    ASPIRE_API_KEY_VAR, ASPIRE_ENDPOINT_VAR, CONTAINER_CONFIG_DIR,
    DEFAULT_CONTAINER_HOST, GRPC_ENDPOINT_NAME, HTTP_ENDPOINT_NAME,
)


class CollectorConfigurator:
    """Build ResourceDescriptions for OpenTelemetry Collector containers."""

    def __init__(self, provisioner: SecureTransportProvisioner | None = None):
        self.provisioner = provisioner or SecureTransportProvisioner(None)

    def build(self, name: str, settings: CollectorSettings, dashboard_url: str, *,
              host_alias: str = DEFAULT_CONTAINER_HOST,
              api_key: str | None = None,
              run_context: RunContext | None = None) -> ResourceDescription:
        """Compose one collector resource.

        The dashboard URL is rewritten for container reachability. When it is
        HTTPS and we run locally in Development, the dev certificate is mounted
        and its locations are passed to the collector as ``--config=yaml:``
        overrides. Anything that fails raises before a description exists.
        """
        if not name:
            raise InvalidConfigurationError("collector name must not be empty")
        run_context = run_context or RunContext()
        ep = settings.endpoints
        ep.validate()

        endpoint_url = rewrite_loopback(dashboard_url, host_alias)
        environment = {ASPIRE_ENDPOINT_VAR: endpoint_url}
        if api_key:
            environment[ASPIRE_API_KEY_VAR] = api_key

        endpoints = (
            Endpoint(GRPC_ENDPOINT_NAME, ep.grpc_port, ep.target_grpc_port),
            Endpoint(HTTP_ENDPOINT_NAME, ep.http_port, ep.target_http_port),
        )

        # The scheme is decided on the raw URL, the rewrite never touches it
        tls = self.provisioner.provision(dashboard_url, run_context,
                                         settings.certificate_file_locator,
                                         settings.key_file_locator)
        overrides: tuple = ()
        mounts: tuple = ()
        if tls is not None:
            environment.update(tls.environment)
            overrides = tls.overrides
            mounts = tls.mounts

        return ResourceDescription(
            name=name,
            image=ep.image,
            endpoints=endpoints,
            environment=environment,
            config_overrides=overrides,
            mounts=mounts,
            args=tuple(o.as_arg() for o in overrides),
        )


def add_config(description: ResourceDescription, config_path: str) -> ResourceDescription:
    """Mount an extra collector config file and pass it with ``--config``.

    Adding the same file twice is a no-op; two different files sharing a
    basename would collide under /config and are rejected.
    """
    if not config_path:
        raise InvalidConfigurationError("config path must not be empty")
    file_name = os.path.basename(os.path.normpath(config_path))
    target = f"{CONTAINER_CONFIG_DIR}/{file_name}"
    arg = f"--config={target}"

    for mount in description.mounts:
        if mount.container_path != target:
            continue
        if mount.host_path == config_path:
            return description
        raise InvalidConfigurationError(
            f"config '{config_path}' collides with '{mount.host_path}' on "
            f"{description.name} (both mount to {target})")

    return description.evolve(
        mounts=description.mounts + (BindMount(config_path, target),),
        args=description.args + (arg,),
    )


def with_app_forwarding(description: ResourceDescription) -> ResourceDescription:
    """Mark the collector as the forwarding target for every telemetry producer."""
    if description.app_forwarding:
        return description
    return description.evolve(app_forwarding=True)
