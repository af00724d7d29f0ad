"""
SiteActivation resources - publish a revision and assign its certificate.

SiteActivation publishes to GA, SiteActivationStaging to the staging
target. Applying can take minutes because the CDN has to accept every
publishing operation before it runs.
"""

import json
import logging
from typing import Any

import pulumi
from pulumi.dynamic import (
    CheckFailure,
    CheckResult,
    CreateResult,
    DiffResult,
    ReadResult,
    Resource,
    UpdateResult,
)

from qcdn_schemas import PubOp, Target

from apps.cdn.config import QCDNSettings
from apps.cdn.exceptions import QCDNError
from apps.cdn.provider.base import (
    FacadeFactory,
    QCDNResourceProvider,
    as_int,
    changed_keys,
    require_inputs,
    split_import_id,
)
from apps.cdn.services import ActivationState
from apps.cdn.validators import CERTIFICATE_REF_FIELDS, mutual_exclusion_errors

logger = logging.getLogger(__name__)

ACTIVATION_OUTPUTS = (
    "publish_id",
    "creation_time_milli",
    "owner_org_id",
    "last_update_time_milli",
    "target",
    "username",
    "publish_state",
    "publish_status",
    "publish_acceptance_status",
    "operation_type",
    "is_active",
    "validators_err_details",
)


def pub_op_outputs(pub_op: PubOp) -> dict[str, Any]:
    outputs = pub_op.model_dump(include=set(ACTIVATION_OUTPUTS))
    details = pub_op.validators_err_details
    outputs["validators_err_details"] = (
        "" if details is None else json.dumps(details)
    )
    return outputs


def certificate_outputs(
    state: ActivationState, props: dict[str, Any]
) -> dict[str, int | None]:
    """
    Report the certificate the way the user referenced it.

    A template reference stays a template reference, even when the linked
    certificate was uploaded to a manual template.
    """
    template_id = state.certificate_template_id
    if template_id is None:
        template_id = as_int(props.get("certificate_template_id"))
    if template_id is not None:
        return {"certificate_id": None, "certificate_template_id": template_id}
    return {"certificate_id": state.certificate_id, "certificate_template_id": None}


class SiteActivationProvider(QCDNResourceProvider):
    """Drives the activation workflow for one publishing target."""

    def __init__(
        self,
        target: Target = Target.GA,
        settings: QCDNSettings | None = None,
        facade_factory: FacadeFactory | None = None,
    ) -> None:
        super().__init__(settings, facade_factory)
        self.target = target

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        failures = require_inputs(news, ("site_id", "revision_id"))
        failures.extend(
            CheckFailure("certificate_id", message)
            for message in mutual_exclusion_errors(news, CERTIFICATE_REF_FIELDS)
        )
        return CheckResult(news, failures)

    def create(self, props: dict[str, Any]) -> CreateResult:
        site_id = props["site_id"]
        logger.info("Activating revision %s of site %s", props["revision_id"], site_id)
        with self.activation_service() as service:
            pub_op = service.activate(
                site_id,
                props["revision_id"],
                self.target,
                certificate_id=as_int(props.get("certificate_id")),
                certificate_template_id=as_int(props.get("certificate_template_id")),
            )
        return CreateResult(
            f"{site_id}:{pub_op.publish_id}", {**props, **pub_op_outputs(pub_op)}
        )

    def diff(
        self, _id: str, olds: dict[str, Any], news: dict[str, Any]
    ) -> DiffResult:
        changes = changed_keys(
            olds, news, ("site_id", "revision_id", *CERTIFICATE_REF_FIELDS)
        )
        replaces = [key for key in changes if key == "site_id"]
        return DiffResult(changes=bool(changes), replaces=replaces)

    def update(
        self, _id: str, olds: dict[str, Any], news: dict[str, Any]
    ) -> UpdateResult:
        with self.activation_service() as service:
            pub_op = service.update_activation(
                news["site_id"],
                news["revision_id"],
                self.target,
                old_certificate_id=as_int(olds.get("certificate_id")),
                old_certificate_template_id=as_int(olds.get("certificate_template_id")),
                new_certificate_id=as_int(news.get("certificate_id")),
                new_certificate_template_id=as_int(news.get("certificate_template_id")),
            )
        return UpdateResult({**news, **pub_op_outputs(pub_op)})

    def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        site_id, publish_id = split_import_id(id, "publish_id")
        with self.activation_service() as service:
            if not publish_id:
                publish_id = service.resolve_import(site_id, self.target)
            if not publish_id:
                raise QCDNError(
                    f"Site {site_id} has no active or last publishing operation "
                    f"for target {Target(self.target).value}; import with "
                    "site_id:publish_id"
                )
            logger.debug("Reading activation %s:%s", site_id, publish_id)
            state = service.describe_activation(site_id, publish_id)

        outputs = {
            **props,
            "site_id": site_id,
            "revision_id": state.pub_op.revision_id,
            **pub_op_outputs(state.pub_op),
            **certificate_outputs(state, props),
        }
        return ReadResult(f"{site_id}:{publish_id}", outputs)

    def delete(self, _id: str, props: dict[str, Any]) -> None:
        with self.activation_service() as service:
            service.deactivate(
                props["site_id"],
                self.target,
                certificate_id=as_int(props.get("certificate_id")),
            )


class SiteActivation(Resource):
    """Publishes a site revision to GA and links its certificate."""

    TARGET = Target.GA

    site_id: pulumi.Output[str]
    revision_id: pulumi.Output[str]
    certificate_id: pulumi.Output[int]
    certificate_template_id: pulumi.Output[int]
    publish_id: pulumi.Output[str]
    publish_status: pulumi.Output[str]
    publish_acceptance_status: pulumi.Output[str]

    def __init__(
        self,
        resource_name: str,
        site_id: pulumi.Input[str],
        revision_id: pulumi.Input[str],
        certificate_id: pulumi.Input[int] | None = None,
        certificate_template_id: pulumi.Input[int] | None = None,
        opts: pulumi.ResourceOptions | None = None,
        provider: SiteActivationProvider | None = None,
    ) -> None:
        props: dict[str, Any] = {
            "site_id": site_id,
            "revision_id": revision_id,
            "certificate_id": certificate_id,
            "certificate_template_id": certificate_template_id,
        }
        props.update({key: None for key in ACTIVATION_OUTPUTS})
        super().__init__(
            provider or SiteActivationProvider(target=self.TARGET),
            resource_name,
            props,
            opts,
        )


class SiteActivationStaging(SiteActivation):
    """Publishes a site revision to the staging target."""

    TARGET = Target.STAGING
