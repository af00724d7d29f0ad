"""Endpoint resolution - maps an environment and a service name to a base URL."""

from typing import NamedTuple

from apps.cdn.exceptions import QCDNConfigError

# Service host names
MEDIA_SITES_SERVICE = "media-sites"
CERT_MANAGER_SERVICE = "cert-manager"
DEVICE_IP_SERVICE = "device-ip"
LOGIN_SERVICE = "login"


class _Environment(NamedTuple):
    domain: str
    prefix: str


ENVIRONMENTS: dict[str, _Environment] = {
    "prod": _Environment(domain="cqloud.com", prefix=""),
    "stage": _Environment(domain="stage.cqloud.com", prefix="stage-"),
    "prestg": _Environment(domain="prestg.cqloud.com", prefix="prestg-"),
    "dev": _Environment(domain="rnd.cqloud.com", prefix="kan11-"),
}


class EndpointBuilder:
    """
    Builds ``https://{prefix}{service}.{domain}`` base URLs.

    The prefix comes from the environment table unless overridden, which is
    how dev deployments other than the default one are reached.
    """

    def __init__(self, env_type: str = "prod", prefix: str | None = None) -> None:
        try:
            environment = ENVIRONMENTS[env_type]
        except KeyError as e:
            supported = ", ".join(ENVIRONMENTS)
            raise QCDNConfigError(
                f"Unknown Qwilt CDN environment type: {env_type}. "
                f"Supported: {supported}"
            ) from e

        self.env_type = env_type
        self.domain = environment.domain
        self.prefix = environment.prefix if prefix is None else prefix

    def build(self, service: str) -> str:
        return f"https://{self.prefix}{service}.{self.domain}"
