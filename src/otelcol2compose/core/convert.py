"""Orchestration — config to collector descriptions, hooks, and compose services."""

import os

from otelcol2compose.pacts.errors import CollectorError, InvalidConfigurationError
from otelcol2compose.pacts.hooks import HookRegistry, apply_hooks
from otelcol2compose.pacts.types import HookContext, RunContext
from otelcol2compose.core.certs import CertificateProvider, SecureTransportProvisioner
from otelcol2compose.core.collector import CollectorConfigurator, add_config, with_app_forwarding
from otelcol2compose.core.constants import (
    CONTAINER_HOSTNAME_KEY, DASHBOARD_OTLP_API_KEY_KEY, DASHBOARD_OTLP_URL_DEFAULT,
    DASHBOARD_OTLP_URL_KEY, DEFAULT_CONTAINER_HOST,
)
from otelcol2compose.core.forwarding import AppForwardingHook
from otelcol2compose.io.config import (
    collector_settings_from_config, config_files_from_entry, get_setting, resolve_host_path,
)
from otelcol2compose.io.output import render_service


def _normalize_environment(env) -> dict:
    """Compose accepts env as a mapping or a list of KEY=VALUE strings."""
    if env is None:
        return {}
    if isinstance(env, dict):
        return {str(k): "" if v is None else str(v) for k, v in env.items()}
    if isinstance(env, list):
        result = {}
        for item in env:
            key, _, value = str(item).partition("=")
            result[key] = value
        return result
    raise InvalidConfigurationError(f"environment must be a mapping or a list, got {env!r}")


def _passthrough_services(config: dict, warnings: list[str]) -> dict:
    """Copy user-declared services, normalizing their environment to a mapping."""
    services = {}
    for svc_name, svc in (config.get("services") or {}).items():
        if not isinstance(svc, dict):
            warnings.append(f"service '{svc_name}' is not a mapping — skipped")
            continue
        svc = dict(svc)
        if "environment" in svc:
            try:
                svc["environment"] = _normalize_environment(svc["environment"])
            except InvalidConfigurationError as exc:
                warnings.append(f"service '{svc_name}': {exc} — skipped")
                continue
        services[svc_name] = svc
    return services


def build_collectors(config: dict, run_context: RunContext,
                     provider: CertificateProvider | None,
                     warnings: list[str], base_dir: str = ".") -> dict:
    """Build a ResourceDescription per ``collectors:`` entry.

    Relative ``configs:`` paths are resolved against *base_dir*, the directory
    of the config file. A collector that fails is reported in *warnings* and
    left out; the others are unaffected.
    """
    dashboard_url = get_setting(config, DASHBOARD_OTLP_URL_KEY, DASHBOARD_OTLP_URL_DEFAULT)
    api_key = get_setting(config, DASHBOARD_OTLP_API_KEY_KEY)
    host_alias = get_setting(config, CONTAINER_HOSTNAME_KEY, DEFAULT_CONTAINER_HOST)

    configurator = CollectorConfigurator(SecureTransportProvisioner(provider))
    collectors = {}
    for name, entry in (config.get("collectors") or {}).items():
        entry = entry or {}
        try:
            settings = collector_settings_from_config(name, entry)
            description = configurator.build(
                name, settings, dashboard_url,
                host_alias=host_alias, api_key=api_key, run_context=run_context)
            for config_path in config_files_from_entry(name, entry):
                description = add_config(description, resolve_host_path(config_path, base_dir))
            if entry.get("appForwarding"):
                description = with_app_forwarding(description)
        except CollectorError as exc:
            warnings.append(f"collector '{name}' skipped: {exc}")
            continue
        collectors[name] = description
    return collectors


def convert(config: dict, run_context: RunContext,
            provider: CertificateProvider | None = None,
            registry: HookRegistry | None = None,
            base_dir: str | None = None) -> tuple[dict, dict, list[str]]:
    """Main conversion: returns (compose_services, collector_descriptions, warnings)."""
    warnings: list[str] = []
    registry = registry or HookRegistry()
    base_dir = base_dir or os.getcwd()

    collectors = build_collectors(config, run_context, provider, warnings, base_dir)
    services = _passthrough_services(config, warnings)
    for name, description in collectors.items():
        if name in services:
            warnings.append(
                f"service '{name}' conflicts with collector of the same name — overwritten")
        services[name] = render_service(description)

    forwarding = [d for d in collectors.values() if d.app_forwarding]
    if len(forwarding) > 1:
        warnings.append(
            "app forwarding enabled on several collectors "
            f"({', '.join(d.name for d in forwarding)}) — using '{forwarding[0].name}'")
    if forwarding:
        registry.try_add(AppForwardingHook(forwarding[0]))

    if len(registry):
        ctx = HookContext(config=config, collectors=collectors,
                          run_context=run_context, warnings=warnings)
        apply_hooks(services, registry, ctx)

    return services, collectors, warnings
