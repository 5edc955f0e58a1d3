from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from otelcol2compose.io.output import emit_warnings, render_service, write_compose
from otelcol2compose.pacts.types import (
    BindMount, Endpoint, ImageRef, ResourceDescription,
)


def make_description() -> ResourceDescription:
    return ResourceDescription(
        name="otelcollector",
        image=ImageRef("otel/opentelemetry-collector-contrib", "0.98.0"),
        endpoints=(Endpoint("grpc", 14317, 4317), Endpoint("http", 4318, 4318)),
        environment={"ASPIRE_ENDPOINT": "http://host.docker.internal:18889"},
        mounts=(BindMount("./a.yaml", "/config/a.yaml"),
                BindMount("./data", "/data", read_only=False)),
        args=("--config=/config/a.yaml",),
    )


def test_render_service() -> None:
    assert render_service(make_description()) == {
        "image": "otel/opentelemetry-collector-contrib:0.98.0",
        "restart": "always",
        "command": ["--config=/config/a.yaml"],
        "environment": {"ASPIRE_ENDPOINT": "http://host.docker.internal:18889"},
        "ports": ["14317:4317", "4318:4318"],
        "volumes": ["./a.yaml:/config/a.yaml:ro", "./data:/data"],
    }


def test_render_service_omits_empty_sections() -> None:
    svc = render_service(ResourceDescription(name="c", image=ImageRef()))
    assert set(svc) == {"image", "restart", "ports"}


def test_write_compose(tmp_path: Path) -> None:
    services = {"otelcollector": render_service(make_description())}
    path = write_compose(services, {"name": "demo", "network": "shared"}, str(tmp_path))

    text = Path(path).read_text(encoding="utf-8")
    assert text.startswith("# Generated by otelcol2compose")
    compose = yaml.safe_load(text)
    assert compose["name"] == "demo"
    assert compose["networks"] == {"default": {"external": True, "name": "shared"}}
    assert compose["services"]["otelcollector"]["command"] == ["--config=/config/a.yaml"]


def test_tls_arg_survives_yaml_round_trip(tmp_path: Path) -> None:
    arg = '--config=yaml:receivers::otlp::protocols::grpc::tls::cert_file: "dev-certs/dev-cert.pem"'
    path = write_compose({"c": {"image": "x", "command": [arg]}}, {}, str(tmp_path),
                         compose_file="custom.yml")
    assert path.endswith("custom.yml")
    assert yaml.safe_load(Path(path).read_text(encoding="utf-8"))["services"]["c"]["command"] == [arg]


def test_emit_warnings(capsys: pytest.CaptureFixture[str]) -> None:
    emit_warnings(["one", "two"])
    assert capsys.readouterr().err == "⚠ one\n⚠ two\n"


def test_bare_host_path_rendered_as_bind_source() -> None:
    description = ResourceDescription(
        name="c", image=ImageRef(), mounts=(BindMount("otel.yaml", "/config/otel.yaml"),))
    assert render_service(description)["volumes"] == ["./otel.yaml:/config/otel.yaml:ro"]
