"""Certificate and CertificateTemplate resources."""

import logging
from typing import Any

import pulumi
from pulumi.dynamic import (
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    Resource,
    UpdateResult,
)

from qcdn_schemas import Certificate as CertificateModel
from qcdn_schemas import CertificateTemplate as CertificateTemplateModel
from qcdn_schemas import (
    CertificateCreateRequest,
    CertificateTemplateCreateRequest,
    CertificateUpdateRequest,
)

from apps.cdn.provider.base import (
    QCDNResourceProvider,
    changed_keys,
    require_inputs,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Certificates
# =============================================================================

CERTIFICATE_MATERIAL = ("certificate", "certificate_chain", "private_key")

CERTIFICATE_OUTPUTS = ("cert_id", "pk_hash", "tenant", "domain", "status", "type")


def certificate_outputs(cert: CertificateModel) -> dict[str, Any]:
    return cert.model_dump(include=set(CERTIFICATE_OUTPUTS))


class CertificateProvider(QCDNResourceProvider):
    """
    Uploaded certificates.

    Key material is immutable, so changing it replaces the certificate. The
    description is updated in place. The API never returns the private key,
    so the configured one is kept as is.
    """

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        return CheckResult(news, require_inputs(news, ("certificate", "private_key")))

    def create(self, props: dict[str, Any]) -> CreateResult:
        request = CertificateCreateRequest(
            certificate=props["certificate"],
            certificate_chain=props.get("certificate_chain") or "",
            private_key=props["private_key"],
            description=props.get("description") or "",
        )
        with self.facade() as facade:
            cert = facade.certificates.create_certificate(request)
        logger.info("Uploaded certificate %s", cert.cert_id)
        return CreateResult(str(cert.cert_id), {**props, **certificate_outputs(cert)})

    def diff(
        self, _id: str, olds: dict[str, Any], news: dict[str, Any]
    ) -> DiffResult:
        changes = changed_keys(olds, news, (*CERTIFICATE_MATERIAL, "description"))
        replaces = [key for key in changes if key in CERTIFICATE_MATERIAL]
        return DiffResult(
            changes=bool(changes), replaces=replaces, delete_before_replace=False
        )

    def update(
        self, id: str, _olds: dict[str, Any], news: dict[str, Any]
    ) -> UpdateResult:
        request = CertificateUpdateRequest(
            certificate=news["certificate"],
            certificate_chain=news.get("certificate_chain") or "",
            private_key=news["private_key"],
            description=news.get("description") or "",
        )
        with self.facade() as facade:
            cert = facade.certificates.update_certificate(int(id), request)
        return UpdateResult({**news, **certificate_outputs(cert)})

    def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        with self.facade() as facade:
            cert = facade.certificates.get_certificate(int(id))
        outputs = {**props, **certificate_outputs(cert)}
        for key in ("certificate", "certificate_chain", "description"):
            value = getattr(cert, key)
            if value is not None:
                outputs[key] = value
        return ReadResult(id, outputs)

    def delete(self, id: str, _props: dict[str, Any]) -> None:
        with self.facade() as facade:
            facade.certificates.delete_certificate(int(id))


class Certificate(Resource):
    """A certificate uploaded to the Qwilt certificate manager."""

    cert_id: pulumi.Output[int]
    domain: pulumi.Output[str]
    status: pulumi.Output[str]

    def __init__(
        self,
        resource_name: str,
        certificate: pulumi.Input[str],
        private_key: pulumi.Input[str],
        certificate_chain: pulumi.Input[str] = "",
        description: pulumi.Input[str] = "",
        opts: pulumi.ResourceOptions | None = None,
        provider: CertificateProvider | None = None,
    ) -> None:
        props: dict[str, Any] = {
            "certificate": certificate,
            "certificate_chain": certificate_chain,
            "private_key": pulumi.Output.secret(private_key),
            "description": description,
        }
        props.update({key: None for key in CERTIFICATE_OUTPUTS})
        super().__init__(
            provider or CertificateProvider(),
            resource_name,
            props,
            pulumi.ResourceOptions.merge(
                opts, pulumi.ResourceOptions(additional_secret_outputs=["private_key"])
            ),
        )


# =============================================================================
# Certificate Templates
# =============================================================================

TEMPLATE_INPUTS = (
    "common_name",
    "auto_managed_certificate_template",
    "country",
    "state",
    "locality",
    "organization_name",
    "sans",
)

TEMPLATE_OUTPUTS = (
    "certificate_template_id",
    "tenant",
    "last_certificate_id",
    "csr_ids",
)


def template_outputs(template: CertificateTemplateModel) -> dict[str, Any]:
    return template.model_dump(include=set(TEMPLATE_OUTPUTS))


class CertificateTemplateProvider(QCDNResourceProvider):
    """Templates cannot be updated, every change replaces the template."""

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        return CheckResult(news, require_inputs(news, ("common_name",)))

    def create(self, props: dict[str, Any]) -> CreateResult:
        request = CertificateTemplateCreateRequest(
            common_name=props["common_name"],
            auto_managed_certificate_template=bool(
                props.get("auto_managed_certificate_template")
            ),
            country=props.get("country") or None,
            state=props.get("state") or None,
            locality=props.get("locality") or None,
            organization_name=props.get("organization_name") or None,
            sans=props.get("sans") or None,
        )
        with self.facade() as facade:
            template = facade.certificate_templates.create_certificate_template(request)
        logger.info("Created certificate template %s", template.certificate_template_id)
        return CreateResult(
            str(template.certificate_template_id),
            {**props, **template_outputs(template)},
        )

    def diff(
        self, _id: str, olds: dict[str, Any], news: dict[str, Any]
    ) -> DiffResult:
        changes = changed_keys(olds, news, TEMPLATE_INPUTS)
        return DiffResult(changes=bool(changes), replaces=changes)

    def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        with self.facade() as facade:
            template = facade.certificate_templates.get_certificate_template(
                int(id)
            )
        outputs = {**props, **template_outputs(template)}
        outputs.update(template.model_dump(include=set(TEMPLATE_INPUTS)))
        return ReadResult(id, outputs)

    def delete(self, id: str, _props: dict[str, Any]) -> None:
        with self.facade() as facade:
            facade.certificate_templates.delete_certificate_template(int(id))


class CertificateTemplate(Resource):
    """A template for issuing certificates, optionally managed by Qwilt."""

    certificate_template_id: pulumi.Output[int]
    last_certificate_id: pulumi.Output[int]
    csr_ids: pulumi.Output[list[int]]

    def __init__(
        self,
        resource_name: str,
        common_name: pulumi.Input[str],
        auto_managed_certificate_template: pulumi.Input[bool] = False,
        sans: pulumi.Input[list[str]] | None = None,
        country: pulumi.Input[str] | None = None,
        state: pulumi.Input[str] | None = None,
        locality: pulumi.Input[str] | None = None,
        organization_name: pulumi.Input[str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
        provider: CertificateTemplateProvider | None = None,
    ) -> None:
        props: dict[str, Any] = {
            "common_name": common_name,
            "auto_managed_certificate_template": auto_managed_certificate_template,
            "sans": sans,
            "country": country,
            "state": state,
            "locality": locality,
            "organization_name": organization_name,
        }
        props.update({key: None for key in TEMPLATE_OUTPUTS})
        super().__init__(
            provider or CertificateTemplateProvider(), resource_name, props, opts
        )

