"""Command-line entry point."""

import argparse
import os
import sys

from otelcol2compose.pacts.errors import InvalidConfigurationError
from otelcol2compose.pacts.hooks import HookRegistry
from otelcol2compose.pacts.types import RunContext
from otelcol2compose.core.certs import DotnetDevCertProvider, StaticCertProvider
from otelcol2compose.core.convert import convert
from otelcol2compose.core.extensions import load_extensions
from otelcol2compose.io.config import load_config, resolve_host_path, save_config
from otelcol2compose.io.output import emit_warnings, write_compose


def _build_provider(config: dict, cert_dir: str, base_dir: str):
    """User-supplied devCert pair wins over exporting the dotnet dev certificate.

    The pair is resolved against *base_dir*, the directory of the config file.
    """
    dev_cert = config.get("devCert") or {}
    if dev_cert.get("certFile") and dev_cert.get("keyFile"):
        return StaticCertProvider(resolve_host_path(dev_cert["certFile"], base_dir),
                                  resolve_host_path(dev_cert["keyFile"], base_dir))
    return DotnetDevCertProvider(cert_dir)


def _init_first_run(config: dict, output_dir: str) -> None:
    """Set project name and declare a default collector on first run."""
    config["name"] = os.path.basename(os.path.realpath(output_dir))
    if not config["collectors"]:
        config["collectors"]["otelcollector"] = {}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compose OpenTelemetry Collector containers into compose.yml"
    )
    parser.add_argument(
        "--config",
        help="Path to otelcol2compose.yaml (default: <output-dir>/otelcol2compose.yaml)",
    )
    parser.add_argument(
        "--output-dir", default=".",
        help="Where to write compose.yml (default: .)",
    )
    parser.add_argument(
        "--compose-file", default="compose.yml",
        help="Name of the generated compose file (default: compose.yml)",
    )
    parser.add_argument(
        "-e", "--environment",
        default=os.environ.get("DOTNET_ENVIRONMENT", "Production"),
        help="Host environment name; dev certificates are only used in Development "
             "(default: $DOTNET_ENVIRONMENT or Production)",
    )
    parser.add_argument(
        "--publish", action="store_true",
        help="Generate for publishing instead of a local run (never provisions certificates)",
    )
    parser.add_argument(
        "--cert-dir",
        help="Where the exported dev certificate is kept (default: <output-dir>/dev-certs)",
    )
    parser.add_argument(
        "--extensions-dir",
        help="Directory containing lifecycle hook extension modules",
    )
    return parser


def main(argv=None):
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    os.makedirs(args.output_dir, exist_ok=True)
    config_path = args.config or os.path.join(args.output_dir, "otelcol2compose.yaml")
    first_run = not os.path.exists(config_path)
    try:
        config = load_config(config_path)
    except InvalidConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if first_run:
        _init_first_run(config, args.output_dir)

    registry = HookRegistry()
    if args.extensions_dir:
        if not os.path.isdir(args.extensions_dir):
            print(f"Extensions directory not found: {args.extensions_dir}", file=sys.stderr)
            sys.exit(1)
        for hook in load_extensions(args.extensions_dir):
            registry.try_add(hook)

    run_context = RunContext(run_mode=not args.publish, environment=args.environment)
    cert_dir = args.cert_dir or os.path.join(args.output_dir, "dev-certs")
    base_dir = os.path.dirname(os.path.abspath(config_path))
    provider = _build_provider(config, cert_dir, base_dir)

    services, collectors, warnings = convert(config, run_context, provider=provider,
                                             registry=registry, base_dir=base_dir)
    emit_warnings(warnings)

    if not services:
        print("No services generated — nothing to write.", file=sys.stderr)
        sys.exit(1)

    write_compose(services, config, args.output_dir, compose_file=args.compose_file)
    if collectors:
        print(f"Collectors: {', '.join(collectors)}", file=sys.stderr)

    if first_run:
        save_config(config_path, config)
        print(f"Wrote {config_path}", file=sys.stderr)
        print(
            "\n⚠ First run — otelcol2compose.yaml was created with a default collector.\n"
            "  Add your services, extra collector configs, and re-run.",
            file=sys.stderr,
        )


if __name__ == "__main__":
    main()
