"""
Site activation service - takes a configuration revision live on the CDN.

Handles:
1. Resolving the certificate from an explicit ID or a certificate template
2. Linking and unlinking the site certificate
3. Publishing the revision and waiting for the CDN to accept it
4. Classifying the acceptance result (Invalid/Dismissed are failures)
5. Unpublishing, import lookups and reading the live activation back
"""

import logging
from dataclasses import dataclass

from qcdn_schemas import PubOp, Target

from apps.cdn.client import SiteClientFacade
from apps.cdn.config import DEFAULT_ACCEPTANCE_TIMEOUT
from apps.cdn.exceptions import (
    CertificateTemplateError,
    CertificateTemplatePendingError,
    PublishRejectedError,
)
from apps.cdn.validators import ensure_single_certificate_ref, require_id

logger = logging.getLogger(__name__)


@dataclass
class ActivationState:
    """What is live for a site: the operation and its certificate."""

    pub_op: PubOp
    certificate_id: int | None = None
    certificate_template_id: int | None = None


class SiteActivationService:
    """
    Publish/activation workflow on top of the site facade.

    Every step is a blocking call. The only wait is the acceptance poll,
    bounded by ``acceptance_timeout`` seconds.
    """

    def __init__(
        self,
        facade: SiteClientFacade,
        acceptance_timeout: float = DEFAULT_ACCEPTANCE_TIMEOUT,
    ) -> None:
        self.facade = facade
        self.acceptance_timeout = acceptance_timeout

    # =========================================================================
    # Certificates
    # =========================================================================

    def resolve_certificate_id(
        self,
        certificate_id: int | None = None,
        certificate_template_id: int | None = None,
    ) -> int | None:
        """
        Turn a certificate reference into a concrete certificate ID.

        Args:
            certificate_id: Explicit certificate, used as is.
            certificate_template_id: Template whose last issued certificate
                is used.

        Returns:
            The certificate ID, or None when neither reference is set.

        Raises:
            MutualExclusionError: If both references are set.
            CertificateTemplatePendingError: If an auto-managed template is
                still waiting for domain verification.
            CertificateTemplateError: If a manual template has no certificate.
        """
        ensure_single_certificate_ref(certificate_id, certificate_template_id)

        if certificate_id:
            return certificate_id
        if not certificate_template_id:
            return None

        template = self.facade.certificate_templates.get_certificate_template(
            certificate_template_id
        )
        if template.last_certificate_id is not None:
            return template.last_certificate_id

        if template.auto_managed_certificate_template:
            delegations = self.facade.csrs.get_challenge_delegations_for_template(
                template
            )
            raise CertificateTemplatePendingError(certificate_template_id, delegations)
        raise CertificateTemplateError(certificate_template_id)

    def link_certificate(self, site_id: str, certificate_id: int) -> None:
        """Make ``certificate_id`` the only certificate linked to the site."""
        self.facade.site_certificates.link_site_certificate(site_id, certificate_id)

    def unlink_certificate(self, site_id: str, certificate_id: int) -> None:
        self.facade.site_certificates.unlink_site_certificate(site_id, certificate_id)

    # =========================================================================
    # Publishing
    # =========================================================================

    def _publish_and_wait(
        self, site_id: str, revision_id: str, target: Target | str
    ) -> PubOp:
        pub_op = self.facade.publish_ops.publish(site_id, revision_id, target)
        pub_op = self.facade.publish_ops.wait_for_acceptance(
            site_id, pub_op.publish_id, self.acceptance_timeout
        )

        if pub_op.is_rejected:
            logger.warning(
                "Publishing operation %s of site %s was rejected: %s",
                pub_op.publish_id,
                site_id,
                pub_op.publish_acceptance_status,
            )
            raise PublishRejectedError(site_id, pub_op)

        logger.info(
            "Revision %s of site %s accepted, publish status %s",
            revision_id,
            site_id,
            pub_op.publish_status,
        )
        return pub_op

    def activate(
        self,
        site_id: str,
        revision_id: str,
        target: Target | str,
        certificate_id: int | None = None,
        certificate_template_id: int | None = None,
    ) -> PubOp:
        """
        Link the certificate and publish a revision.

        Returns once the CDN has accepted the operation. Publishing itself
        may still be in progress.

        Returns:
            The accepted publishing operation.

        Raises:
            MutualExclusionError: Before any request if both certificate
                references are set.
            CertificateTemplateError: If the template has no certificate yet.
            AcceptanceTimeoutError: If acceptance does not arrive in time.
            PublishRejectedError: If the CDN refused the operation.
        """
        ensure_single_certificate_ref(certificate_id, certificate_template_id)
        require_id(site_id, "site_id")
        require_id(revision_id, "revision_id")

        resolved = self.resolve_certificate_id(certificate_id, certificate_template_id)
        if resolved is not None:
            self.link_certificate(site_id, resolved)

        return self._publish_and_wait(site_id, revision_id, target)

    def update_activation(
        self,
        site_id: str,
        revision_id: str,
        target: Target | str,
        old_certificate_id: int | None = None,
        old_certificate_template_id: int | None = None,
        new_certificate_id: int | None = None,
        new_certificate_template_id: int | None = None,
    ) -> PubOp:
        """
        Swap the certificate if it changed, then publish the revision.

        The old link is removed before the new one is created. Nothing is
        relinked when both references resolve to the same certificate.
        """
        ensure_single_certificate_ref(new_certificate_id, new_certificate_template_id)
        require_id(site_id, "site_id")
        require_id(revision_id, "revision_id")

        old_id = self.resolve_certificate_id(
            old_certificate_id, old_certificate_template_id
        )
        new_id = self.resolve_certificate_id(
            new_certificate_id, new_certificate_template_id
        )

        if old_id != new_id:
            if old_id is not None:
                self.unlink_certificate(site_id, old_id)
            if new_id is not None:
                self.link_certificate(site_id, new_id)

        return self._publish_and_wait(site_id, revision_id, target)

    def deactivate(
        self,
        site_id: str,
        target: Target | str,
        certificate_id: int | None = None,
    ) -> PubOp:
        """
        Unpublish the site and unlink its certificate.

        Acceptance of the unpublish is not awaited.
        """
        require_id(site_id, "site_id")
        pub_op = self.facade.publish_ops.unpublish(site_id, target)
        if certificate_id:
            self.unlink_certificate(site_id, certificate_id)
        return pub_op

    # =========================================================================
    # Lookups
    # =========================================================================

    def find_latest_pub_op(self, site_id: str, revision_id: str) -> PubOp:
        return self.facade.publish_ops.find_latest_pub_op(site_id, revision_id)

    def resolve_import(self, site_id: str, target: Target | str) -> str:
        """
        Pick the publishing operation to import when only a site is given.

        Returns:
            The active operation's ID unless it is an unpublish, else the
            last operation's ID unless that is an unpublish, else "".
        """
        site = self.facade.sites.get_site(
            site_id, target=Target(target).value, include_publish_details=True
        )
        ops = site.active_and_last_publishing_operation
        if ops is None:
            return ""
        if ops.active is not None and not ops.active.is_unpublish:
            return ops.active.publish_id
        if ops.last is not None and not ops.last.is_unpublish:
            return ops.last.publish_id
        return ""

    def describe_activation(self, site_id: str, publish_id: str) -> ActivationState:
        """
        Read an activation back from the CDN.

        The certificate template is reported only for certificates issued
        from an auto-managed CSR.
        """
        pub_op = self.facade.publish_ops.get_pub_op(site_id, publish_id)
        state = ActivationState(pub_op=pub_op)

        links = self.facade.site_certificates.get_site_certificates(site_id)
        if not links:
            return state

        state.certificate_id = int(links[0].certificate_id)
        certificate = self.facade.certificates.get_certificate(state.certificate_id)
        if certificate.csr_id:
            csr = self.facade.csrs.get_csr(certificate.csr_id)
            if csr.auto_managed_csr:
                state.certificate_template_id = csr.certificate_template_id
        return state
