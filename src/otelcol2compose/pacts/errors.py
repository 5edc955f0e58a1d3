"""Error types raised while composing collector resources."""


class CollectorError(Exception):
    """Base class for everything otelcol2compose raises on purpose."""


class InvalidConfigurationError(CollectorError, ValueError):
    """Malformed or missing settings (bad port, unusable URL, clashing config file)."""


class CertificateProvisioningError(CollectorError, RuntimeError):
    """The development certificate could not be produced or found."""
