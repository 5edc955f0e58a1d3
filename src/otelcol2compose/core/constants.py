"""Constants, defaults, and configuration keys used throughout the composer."""

import re

# Configuration keys (environment variables use "__" in place of ":")
DASHBOARD_OTLP_URL_KEY = "DOTNET_DASHBOARD_OTLP_ENDPOINT_URL"
DASHBOARD_OTLP_API_KEY_KEY = "AppHost:OtlpApiKey"
CONTAINER_HOSTNAME_KEY = "AppHost:ContainerHostname"

DASHBOARD_OTLP_URL_DEFAULT = "http://localhost:18889"
DEFAULT_CONTAINER_HOST = "host.docker.internal"

# Environment handed to the collector container
ASPIRE_ENDPOINT_VAR = "ASPIRE_ENDPOINT"
ASPIRE_API_KEY_VAR = "ASPIRE_API_KEY"
OTLP_EXPORTER_ENDPOINT_VAR = "OTEL_EXPORTER_OTLP_ENDPOINT"

DEFAULT_COLLECTOR_IMAGE = "ghcr.io/open-telemetry/opentelemetry-collector-releases/opentelemetry-collector-contrib"
DEFAULT_COLLECTOR_TAG = "latest"

GRPC_ENDPOINT_NAME = "grpc"
HTTP_ENDPOINT_NAME = "http"
DEFAULT_GRPC_PORT = 4317
DEFAULT_HTTP_PORT = 4318

# YAML key paths into the collector config where TLS file locations live
DEFAULT_CERTIFICATE_FILE_LOCATOR = "receivers::otlp::protocols::grpc::tls::cert_file"
DEFAULT_KEY_FILE_LOCATOR = "receivers::otlp::protocols::grpc::tls::key_file"

# Dev certificate: env var names, in-container mount targets, and the
# relative paths the collector resolves from its working directory (/)
CERT_FILE_ENV = "HTTPS_CERT_FILE"
CERT_KEY_FILE_ENV = "HTTPS_CERT_KEY_FILE"
CONTAINER_CERT_DIR = "/dev-certs"
CONTAINER_CERT_FILE = "/dev-certs/dev-cert.pem"
CONTAINER_KEY_FILE = "/dev-certs/dev-cert.key"
CERT_FILE_CONFIG_VALUE = "dev-certs/dev-cert.pem"
KEY_FILE_CONFIG_VALUE = "dev-certs/dev-cert.key"

# Additional collector config files are mounted here
CONTAINER_CONFIG_DIR = "/config"

DEVELOPMENT_ENVIRONMENT = "Development"

# Loopback forms unreachable from inside a container. Only localhost varies in case.
_LOCALHOST_RE = re.compile(r"localhost", re.IGNORECASE)
_LOOPBACK_LITERALS = ("127.0.0.1", "[::1]")

MIN_PORT = 1
MAX_PORT = 65535
