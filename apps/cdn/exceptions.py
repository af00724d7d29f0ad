"""Qwilt CDN integration exceptions."""

from typing import Any

from qcdn_schemas import ChallengeDelegation, PubOp


class QCDNError(Exception):
    """Base exception for Qwilt CDN integration errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class QCDNConfigError(QCDNError):
    """Provider settings are missing or invalid."""


class QCDNAuthError(QCDNError):
    """Authentication with the Qwilt CDN API failed or the session expired."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QCDNAPIError(QCDNError):
    """API request returned a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class SiteDeletedError(QCDNError):
    """The site exists but has been marked for deletion."""

    def __init__(self, site_id: str) -> None:
        super().__init__(f"Site {site_id} was found but marked for deletion")
        self.site_id = site_id


class MutualExclusionError(QCDNError):
    """Two inputs that cannot be combined were both set."""

    def __init__(self, fields: tuple[str, ...]) -> None:
        names = " or ".join(f"'{name}'" for name in fields)
        super().__init__(f"Only one of {names} can be set. Please unset one of them.")
        self.fields = fields


class CertificateTemplateError(QCDNError):
    """A certificate template cannot provide a certificate yet."""

    def __init__(self, template_id: int, message: str | None = None) -> None:
        super().__init__(
            message
            or f"Certificate template {template_id} has no certificate. "
            "Please upload a certificate to the certificate template."
        )
        self.template_id = template_id


class CertificateTemplatePendingError(CertificateTemplateError):
    """
    An auto-managed certificate template is waiting for domain verification.

    Carries the DNS records the customer has to create so that the message
    can tell them exactly what to fix.
    """

    def __init__(
        self, template_id: int, challenge_delegations: list[ChallengeDelegation]
    ) -> None:
        self.challenge_delegations = challenge_delegations
        super().__init__(
            template_id,
            f"Certificate template {template_id} is pending verification. "
            "Please make sure to have the CNAMEs list configured correctly:\n"
            f"{format_challenge_delegations(challenge_delegations)}",
        )


class AcceptanceTimeoutError(QCDNError):
    """A publishing operation stayed Pending past the acceptance deadline."""

    def __init__(
        self,
        site_id: str,
        publish_id: str,
        timeout: float,
        last_pub_op: PubOp | None = None,
    ) -> None:
        super().__init__(
            f"Publish operation timed out after {timeout:g}s waiting for "
            f"acceptance status for site_id={site_id} publish_id={publish_id}"
        )
        self.site_id = site_id
        self.publish_id = publish_id
        self.timeout = timeout
        self.last_pub_op = last_pub_op


class PublishRejectedError(QCDNError):
    """The CDN refused a publishing operation (Invalid or Dismissed)."""

    def __init__(self, site_id: str, pub_op: PubOp) -> None:
        status_line = ",".join(pub_op.status_line or [])
        super().__init__(
            f"Publish failed for site {site_id}. "
            f"Acceptance status: {pub_op.publish_acceptance_status}. "
            f"Err: {_render(pub_op.validators_err_details)}. "
            f"Status line: {status_line}"
        )
        self.site_id = site_id
        self.pub_op = pub_op


def format_challenge_delegations(delegations: list[ChallengeDelegation]) -> str:
    """Render challenge delegation records as a numbered list."""
    return "".join(
        f"{i}. Record Name: {d.from_domain} Value: {d.to_domain}\n"
        for i, d in enumerate(delegations, start=1)
    )


def _render(value: Any) -> str:
    return "" if value is None else str(value)
