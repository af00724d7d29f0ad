"""Certificate and publishing of the Qwilt CDN site."""

from typing import Any

import pulumi

from apps.cdn.provider import (
    CertificateTemplate,
    SiteActivation,
    SiteActivationStaging,
    SiteConfiguration,
)


def create_activation(
    env: str, hostname: str, site_config: SiteConfiguration
) -> dict[str, Any]:
    """Publish the site configuration with an auto-managed certificate.

    Prod publishes to GA, every other environment to the staging target.
    The first run fails until the certificate's challenge CNAMEs exist;
    the error lists the records to create.

    Args:
        env: Environment name (dev, prod)
        hostname: Public hostname the certificate is issued for
        site_config: Configuration revision to publish

    Returns:
        Dictionary with the certificate template and the activation
    """
    template = CertificateTemplate(
        f"consult-{env}-cdn-cert-template",
        common_name=hostname,
        auto_managed_certificate_template=True,
    )

    activation_cls = SiteActivation if env == "prod" else SiteActivationStaging
    activation = activation_cls(
        f"consult-{env}-cdn-activation",
        site_id=site_config.site_id,
        revision_id=site_config.revision_id,
        certificate_template_id=template.certificate_template_id,
        opts=pulumi.ResourceOptions(depends_on=[template]),
    )

    return {"certificate_template": template, "activation": activation}
