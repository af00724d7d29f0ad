"""
Qwilt CDN client settings.

Credentials come from explicit configuration first and the QCDN_* environment
variables second. Environment lookups happen only in QCDNSettings.from_env().
"""

import logging
from typing import Any, Literal

import environ  # type: ignore[import-untyped]
from pydantic import BaseModel

from apps.cdn.exceptions import QCDNConfigError

logger = logging.getLogger(__name__)

EnvType = Literal["prod", "stage", "prestg", "dev"]

DEFAULT_ENV_TYPE: EnvType = "prod"

# Seconds
DEFAULT_HTTP_TIMEOUT = 40.0
DEFAULT_ACCEPTANCE_TIMEOUT = 180.0
DEFAULT_POLL_INTERVAL = 3.0

# Internal accounts must say which environment they mean
INTERNAL_USER_DOMAIN = "qwilt.com"


class QCDNSettings(BaseModel):
    """
    Explicit configuration for a Qwilt CDN client.

    Either ``xapi_token`` or ``username``/``password`` must be set. The API
    key wins when both are present.
    """

    env_type: EnvType = DEFAULT_ENV_TYPE
    env_type_explicit: bool = False
    username: str = ""
    password: str = ""
    xapi_token: str = ""
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    acceptance_timeout: float = DEFAULT_ACCEPTANCE_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    endpoint_prefix: str | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> "QCDNSettings":
        """
        Build settings from QCDN_* environment variables.

        Args:
            **overrides: Explicit values. Anything not None wins over the
                environment.

        Returns:
            Settings with env values filling the gaps.
        """
        env = environ.Env(
            QCDN_ENVTYPE=(str, ""),
            QCDN_USERNAME=(str, ""),
            QCDN_PASSWORD=(str, ""),
            QCDN_XAPI_TOKEN=(str, ""),
            QCDN_HTTP_TIMEOUT=(float, DEFAULT_HTTP_TIMEOUT),
            QCDN_ACCEPTANCE_TIMEOUT=(float, DEFAULT_ACCEPTANCE_TIMEOUT),
        )

        values: dict[str, Any] = {
            "env_type": env("QCDN_ENVTYPE"),
            "username": env("QCDN_USERNAME"),
            "password": env("QCDN_PASSWORD"),
            "xapi_token": env("QCDN_XAPI_TOKEN"),
            "http_timeout": env("QCDN_HTTP_TIMEOUT"),
            "acceptance_timeout": env("QCDN_ACCEPTANCE_TIMEOUT"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        env_type = values.pop("env_type") or ""
        if env_type:
            values["env_type"] = env_type
            values["env_type_explicit"] = True

        try:
            return cls(**values)
        except ValueError as e:
            raise QCDNConfigError(f"Invalid Qwilt CDN settings: {e}") from e

    @property
    def uses_api_key(self) -> bool:
        return bool(self.xapi_token)

    def validate_credentials(self) -> None:
        """
        Check that the settings can authenticate.

        Raises:
            QCDNConfigError: With every problem found, one per line.
        """
        errors: list[str] = []

        if not self.xapi_token:
            logger.warning("No Qwilt CDN API key configured, using login credentials")
            if not self.username:
                errors.append(
                    "Missing username: set QCDN_USERNAME or configure an API "
                    "key with QCDN_XAPI_TOKEN"
                )
            if self.username and not self.password:
                errors.append(
                    "Missing password: set QCDN_PASSWORD to authenticate as "
                    f"{self.username}"
                )
            if INTERNAL_USER_DOMAIN in self.username and not self.env_type_explicit:
                errors.append(
                    "Missing environment type: internal users must set QCDN_ENVTYPE"
                )
        else:
            logger.debug("Using Qwilt CDN API key (length %d)", len(self.xapi_token))

        if errors:
            raise QCDNConfigError("\n".join(errors))
