from __future__ import annotations

from pathlib import Path

import pytest

from otelcol2compose.core.convert import convert
from otelcol2compose.pacts.hooks import HookRegistry, LifecycleHook
from otelcol2compose.pacts.types import RunContext

DEV_RUN = RunContext(run_mode=True, environment="Development")


def base_config(**overrides) -> dict:
    config = {
        "otelcol2ComposeVersion": "v1",
        "dashboard": {},
        "collectors": {"otelcollector": {"configs": ["./collector.yaml"], "appForwarding": True}},
        "services": {
            "api": {
                "image": "example/api:1",
                "environment": ["OTEL_EXPORTER_OTLP_ENDPOINT=http://localhost:18889", "MODE=dev"],
            },
        },
    }
    config.update(overrides)
    return config


def test_convert_renders_collector_and_forwards_apps(tmp_path: Path) -> None:
    services, collectors, warnings = convert(base_config(), RunContext(), base_dir=str(tmp_path))

    assert warnings == []
    assert list(collectors) == ["otelcollector"]
    collector = services["otelcollector"]
    assert collector["environment"]["ASPIRE_ENDPOINT"] == "http://host.docker.internal:18889"
    assert collector["command"] == ["--config=/config/collector.yaml"]
    assert collector["volumes"] == [f"{tmp_path / 'collector.yaml'}:/config/collector.yaml:ro"]
    assert services["api"]["environment"] == {
        "OTEL_EXPORTER_OTLP_ENDPOINT": "http://otelcollector:4317",
        "MODE": "dev",
    }


def test_dashboard_settings_from_file_and_env(monkeypatch: pytest.MonkeyPatch) -> None:
    config = base_config(dashboard={
        "DOTNET_DASHBOARD_OTLP_ENDPOINT_URL": "http://localhost:4999",
        "AppHost:OtlpApiKey": "k1",
    })
    monkeypatch.setenv("AppHost__ContainerHostname", "host.containers.internal")

    services, _collectors, _warnings = convert(config, RunContext())

    env = services["otelcollector"]["environment"]
    assert env["ASPIRE_ENDPOINT"] == "http://host.containers.internal:4999"
    assert env["ASPIRE_API_KEY"] == "k1"


def test_https_dev_run_wires_tls(monkeypatch: pytest.MonkeyPatch, provider, cert_pair) -> None:
    monkeypatch.setenv("DOTNET_DASHBOARD_OTLP_ENDPOINT_URL", "https://localhost:18889")
    services, _collectors, warnings = convert(base_config(), DEV_RUN, provider=provider)

    assert warnings == []
    command = services["otelcollector"]["command"]
    assert command[:2] == [
        '--config=yaml:receivers::otlp::protocols::grpc::tls::cert_file: "dev-certs/dev-cert.pem"',
        '--config=yaml:receivers::otlp::protocols::grpc::tls::key_file: "dev-certs/dev-cert.key"',
    ]
    assert f"{cert_pair.cert_file_path}:/dev-certs/dev-cert.pem:ro" in services["otelcollector"]["volumes"]


def test_failing_collector_does_not_affect_others(monkeypatch: pytest.MonkeyPatch,
                                                  failing_provider) -> None:
    monkeypatch.setenv("DOTNET_DASHBOARD_OTLP_ENDPOINT_URL", "https://localhost:18889")
    config = base_config(collectors={"good": {"grpcPort": 5317, "httpPort": 5318},
                                     "bad": {"grpcPort": "nope"}})

    services, collectors, warnings = convert(
        config, RunContext(run_mode=False, environment="Development"), provider=failing_provider)

    assert list(collectors) == ["good"]
    assert "bad" not in services
    assert "api" in services
    assert len(warnings) == 1 and "collector 'bad' skipped" in warnings[0]


def test_certificate_failure_skips_collector(monkeypatch: pytest.MonkeyPatch,
                                             failing_provider) -> None:
    monkeypatch.setenv("DOTNET_DASHBOARD_OTLP_ENDPOINT_URL", "https://localhost:18889")
    services, collectors, warnings = convert(base_config(), DEV_RUN, provider=failing_provider)

    assert collectors == {}
    assert list(services) == ["api"]
    # Nothing to forward to, the app keeps talking to the dashboard
    assert services["api"]["environment"]["OTEL_EXPORTER_OTLP_ENDPOINT"] == "http://localhost:18889"
    assert "not trusted" in warnings[0]


def test_multiple_forwarding_collectors_warn() -> None:
    config = base_config(collectors={
        "first": {"appForwarding": True},
        "second": {"appForwarding": True, "grpcPort": 5317, "httpPort": 5318},
    })
    services, _collectors, warnings = convert(config, RunContext())

    assert "using 'first'" in warnings[0]
    assert services["api"]["environment"]["OTEL_EXPORTER_OTLP_ENDPOINT"] == "http://first:4317"


def test_service_name_conflict_is_overwritten() -> None:
    config = base_config(services={"otelcollector": {"image": "something-else"}})
    services, _collectors, warnings = convert(config, RunContext())
    assert services["otelcollector"]["image"].endswith("opentelemetry-collector-contrib:latest")
    assert "conflicts" in warnings[0]


def test_bad_service_entries_are_skipped() -> None:
    config = base_config(services={"broken": "nope", "weird": {"environment": 5}})
    services, _collectors, warnings = convert(config, RunContext())
    assert "broken" not in services and "weird" not in services
    assert len(warnings) == 2


def test_extension_hooks_run() -> None:
    class Label(LifecycleHook):
        def before_start(self, services, ctx):
            return {"api": {"DEPLOYED_BY": "otelcol2compose"}}

    services, _collectors, _warnings = convert(base_config(), RunContext(),
                                               registry=HookRegistry([Label()]))
    assert services["api"]["environment"]["DEPLOYED_BY"] == "otelcol2compose"


def test_convert_is_repeatable() -> None:
    config = base_config()
    first = convert(config, RunContext())
    second = convert(config, RunContext())
    assert first == second


def test_bare_config_name_resolves_against_config_dir(tmp_path: Path) -> None:
    config = base_config(collectors={"otel": {"configs": ["otel.yaml", "/etc/otel/extra.yaml"]}})
    services, _collectors, warnings = convert(config, RunContext(), base_dir=str(tmp_path))

    assert warnings == []
    assert services["otel"]["volumes"] == [
        f"{tmp_path / 'otel.yaml'}:/config/otel.yaml:ro",
        "/etc/otel/extra.yaml:/config/extra.yaml:ro",
    ]
    for volume in services["otel"]["volumes"]:
        assert volume.startswith(("/", "./", "../"))


def test_single_config_string_is_one_file(tmp_path: Path) -> None:
    config = base_config(collectors={"otel": {"configs": "otel.yaml"}})
    services, _collectors, warnings = convert(config, RunContext(), base_dir=str(tmp_path))

    assert warnings == []
    assert services["otel"]["volumes"] == [f"{tmp_path / 'otel.yaml'}:/config/otel.yaml:ro"]
    assert services["otel"]["command"] == ["--config=/config/otel.yaml"]


@pytest.mark.parametrize("configs", [{"a": "otel.yaml"}, 42, ["ok.yaml", 7], [""]])
def test_malformed_configs_skip_collector(configs) -> None:
    config = base_config(collectors={"otel": {"configs": configs}, "other": {}})
    services, collectors, warnings = convert(config, RunContext())

    assert list(collectors) == ["other"]
    assert "otel" not in services
    assert len(warnings) == 1 and "configs must be" in warnings[0]
