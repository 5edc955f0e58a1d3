"""Rendering collector descriptions and writing compose.yml."""

import os
import sys

import yaml

from otelcol2compose.pacts.types import ResourceDescription


def _bind_source(host_path: str) -> str:
    """Keep compose from reading a bare name as a named volume."""
    if host_path.startswith(("/", "./", "../", "~")):
        return host_path
    return f"./{host_path}"


def render_service(description: ResourceDescription) -> dict:
    """Translate a ResourceDescription into a compose service dict."""
    svc = {"image": str(description.image), "restart": "always"}
    if description.args:
        svc["command"] = list(description.args)
    if description.environment:
        svc["environment"] = dict(description.environment)
    svc["ports"] = [f"{ep.port}:{ep.target_port}" for ep in description.endpoints]
    if description.mounts:
        svc["volumes"] = [
            f"{_bind_source(m.host_path)}:{m.container_path}" + (":ro" if m.read_only else "")
            for m in description.mounts
        ]
    return svc


def write_compose(services: dict, config: dict, output_dir: str,
                  compose_file: str = "compose.yml") -> str:
    """Write compose file and return its path."""
    compose = {}
    if config.get("name"):
        compose["name"] = config["name"]
    compose["services"] = services

    # External network override
    ext_network = config.get("network")
    if ext_network:
        compose["networks"] = {"default": {"external": True, "name": ext_network}}

    path = os.path.join(output_dir, compose_file)
    with open(path, "w", encoding="utf-8") as f:
        f.write("# Generated by otelcol2compose — do not edit manually\n")
        yaml.dump(compose, f, default_flow_style=False, sort_keys=False)
    print(f"Wrote {path}", file=sys.stderr)
    return path


def emit_warnings(warnings: list[str]) -> None:
    """Print all warnings to stderr."""
    for w in warnings:
        print(f"⚠ {w}", file=sys.stderr)
