"""App forwarding — point telemetry producers at the collector instead of the dashboard."""

from otelcol2compose.pacts.hooks import LifecycleHook
from otelcol2compose.pacts.types import HookContext, ResourceDescription
from otelcol2compose.core.constants import GRPC_ENDPOINT_NAME, OTLP_EXPORTER_ENDPOINT_VAR


def collector_otlp_url(description: ResourceDescription) -> str:
    """gRPC OTLP URL of the collector as seen from the compose network."""
    grpc = description.endpoint(GRPC_ENDPOINT_NAME)
    return f"{grpc.scheme}://{description.name}:{grpc.target_port}"


class AppForwardingHook(LifecycleHook):
    """Rewrite OTEL_EXPORTER_OTLP_ENDPOINT on every service that exports OTLP.

    Only services that already declare the variable are touched; collectors
    themselves are left alone.
    """
    name = "app-forwarding"
    priority = 500

    def __init__(self, collector: ResourceDescription):
        self.collector = collector

    def before_start(self, services, ctx: HookContext):
        url = collector_otlp_url(self.collector)
        additions = {}
        for svc_name, svc in services.items():
            if svc_name in ctx.collectors:
                continue
            env = svc.get("environment") or {}
            if OTLP_EXPORTER_ENDPOINT_VAR in env and env[OTLP_EXPORTER_ENDPOINT_VAR] != url:
                additions[svc_name] = {OTLP_EXPORTER_ENDPOINT_VAR: url}
        return additions
