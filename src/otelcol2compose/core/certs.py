"""Development certificate providers and conditional TLS wiring for collectors."""

import os
import subprocess
import sys
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Protocol

from otelcol2compose.pacts.errors import CertificateProvisioningError
from otelcol2compose.pacts.helpers import is_secure_url
from otelcol2compose.pacts.types import (
    BindMount, CertificateMaterial, ConfigOverride, RunContext,
)
from otelcol2compose.core.constants import (
    CERT_FILE_CONFIG_VALUE, CERT_FILE_ENV, CERT_KEY_FILE_ENV,
    CONTAINER_CERT_FILE, CONTAINER_KEY_FILE, KEY_FILE_CONFIG_VALUE,
)


class CertificateProvider(Protocol):
    """Anything that can hand out a locally-trusted certificate/key pair."""

    def request(self, cert_env: str, key_env: str) -> "Future[CertificateMaterial]":
        ...


def _completed(fn) -> Future:
    """Run *fn* now and return a finished Future holding its result or error."""
    future: Future = Future()
    try:
        future.set_result(fn())
    except Exception as exc:  # pylint: disable=broad-except
        future.set_exception(exc)
    return future


class StaticCertProvider:
    """Serve a certificate pair the user already has on disk."""

    def __init__(self, cert_file: str, key_file: str):
        self.cert_file = cert_file
        self.key_file = key_file

    def request(self, cert_env: str, key_env: str) -> Future:
        return _completed(lambda: CertificateMaterial(self.cert_file, self.key_file))


class DotnetDevCertProvider:
    """Export the ASP.NET Core HTTPS development certificate as PEM.

    The pair lands in *cert_dir* as ``dev-cert.pem`` / ``dev-cert.key`` and is
    reused on later runs.
    """

    def __init__(self, cert_dir: str, dotnet: str = "dotnet"):
        self.cert_dir = cert_dir
        self.dotnet = dotnet

    def request(self, cert_env: str, key_env: str) -> Future:
        return _completed(self._export)

    def _export(self) -> CertificateMaterial:
        cert_path = os.path.abspath(os.path.join(self.cert_dir, "dev-cert.pem"))
        key_path = os.path.abspath(os.path.join(self.cert_dir, "dev-cert.key"))
        if os.path.isfile(cert_path) and os.path.isfile(key_path):
            return CertificateMaterial(cert_path, key_path)

        os.makedirs(self.cert_dir, exist_ok=True)
        cmd = [self.dotnet, "dev-certs", "https", "--export-path", cert_path,
               "--format", "Pem", "--no-password"]
        print(f"Exporting development certificate to {cert_path}", file=sys.stderr)
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise CertificateProvisioningError(
                f"cannot run '{self.dotnet}' to export the development certificate: {exc}"
            ) from exc
        if result.returncode != 0:
            raise CertificateProvisioningError(
                f"'{' '.join(cmd)}' failed ({result.returncode}): {result.stderr.strip()}")
        return CertificateMaterial(cert_path, key_path)


@dataclass(frozen=True)
class TlsProvisioning:
    """Everything TLS adds to a collector, applied as one unit."""
    material: CertificateMaterial
    mounts: tuple
    environment: dict
    overrides: tuple


class SecureTransportProvisioner:
    """Decide whether a collector needs a dev certificate and wire it in."""

    def __init__(self, provider: CertificateProvider | None):
        self.provider = provider

    @staticmethod
    def should_provision(address: str, run_context: RunContext) -> bool:
        return (is_secure_url(address) and run_context.run_mode
                and run_context.is_development)

    def provision(self, address: str, run_context: RunContext,
                  certificate_file_locator: str,
                  key_file_locator: str) -> TlsProvisioning | None:
        """Return the TLS wiring for *address*, or None when none is needed.

        Blocks until the provider's Future resolves so the material exists
        before any description referencing it is built.
        """
        if not self.should_provision(address, run_context):
            return None
        if self.provider is None:
            raise CertificateProvisioningError(
                f"{address} requires TLS but no certificate provider is configured")

        try:
            material = self.provider.request(CERT_FILE_ENV, CERT_KEY_FILE_ENV).result()
        except CertificateProvisioningError:
            raise
        except Exception as exc:  # pylint: disable=broad-except
            raise CertificateProvisioningError(
                f"certificate provider {type(self.provider).__name__} failed: {exc}") from exc
        for path in (material.cert_file_path, material.key_file_path):
            if not os.path.isfile(path):
                raise CertificateProvisioningError(f"certificate file '{path}' does not exist")

        return TlsProvisioning(
            material=material,
            mounts=(
                BindMount(material.cert_file_path, CONTAINER_CERT_FILE),
                BindMount(material.key_file_path, CONTAINER_KEY_FILE),
            ),
            environment={
                CERT_FILE_ENV: CONTAINER_CERT_FILE,
                CERT_KEY_FILE_ENV: CONTAINER_KEY_FILE,
            },
            overrides=(
                ConfigOverride(certificate_file_locator, CERT_FILE_CONFIG_VALUE),
                ConfigOverride(key_file_locator, KEY_FILE_CONFIG_VALUE),
            ),
        )
