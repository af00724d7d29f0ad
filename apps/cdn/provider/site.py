"""Site resource - a CDN delivery service."""

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

from qcdn_schemas import Site as SiteModel
from qcdn_schemas import SiteCreateRequest, SiteUpdateRequest

from apps.cdn.exceptions import SiteDeletedError
from apps.cdn.provider.base import QCDNResourceProvider, changed_keys, require_inputs

logger = logging.getLogger(__name__)

SITE_OUTPUTS = (
    "site_id",
    "owner_org_id",
    "creation_time_milli",
    "last_update_time_milli",
    "created_user",
    "last_updated_user",
    "site_dns_cname_delegation_target",
    "site_name",
    "api_version",
    "service_type",
    "routing_method",
    "should_provision_to_third_party_cdn",
    "service_id",
    "is_self_service_blocked",
    "is_deleted",
)


def site_outputs(site: SiteModel) -> dict[str, Any]:
    return site.model_dump(include=set(SITE_OUTPUTS))


class SiteProvider(QCDNResourceProvider):
    """Create, rename and delete sites. Changing the routing method replaces."""

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        return CheckResult(news, require_inputs(news, ("site_name",)))

    def create(self, props: dict[str, Any]) -> CreateResult:
        with self.facade() as facade:
            site = facade.sites.create_site(
                SiteCreateRequest(
                    site_name=props["site_name"],
                    routing_method=props.get("routing_method") or None,
                )
            )
        logger.info("Created site %s (%s)", site.site_id, site.site_name)
        return CreateResult(site.site_id, {**props, **site_outputs(site)})

    def diff(
        self, _id: str, olds: dict[str, Any], news: dict[str, Any]
    ) -> DiffResult:
        changes = changed_keys(olds, news, ("site_name", "routing_method"))
        replaces = [key for key in changes if key == "routing_method"]
        return DiffResult(changes=bool(changes), replaces=replaces)

    def update(
        self, id: str, _olds: dict[str, Any], news: dict[str, Any]
    ) -> UpdateResult:
        with self.facade() as facade:
            site = facade.sites.update_site(
                id, SiteUpdateRequest(site_name=news["site_name"])
            )
        return UpdateResult({**news, **site_outputs(site)})

    def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        with self.facade() as facade:
            try:
                site = facade.sites.get_site(id)
            except SiteDeletedError:
                logger.info("Site %s was deleted outside of Pulumi", id)
                return ReadResult(None, {})
        return ReadResult(id, {**props, **site_outputs(site)})

    def delete(self, id: str, props: dict[str, Any]) -> None:
        # Renaming frees the name of the soft-deleted site for reuse
        with self.facade() as facade:
            facade.sites.delete_and_rename_site(id, props.get("site_name", ""))


class Site(Resource):
    """A Qwilt CDN site."""

    site_id: pulumi.Output[str]
    site_name: pulumi.Output[str]
    routing_method: pulumi.Output[str]
    site_dns_cname_delegation_target: pulumi.Output[str]
    owner_org_id: pulumi.Output[str]

    def __init__(
        self,
        resource_name: str,
        site_name: pulumi.Input[str],
        routing_method: pulumi.Input[str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
        provider: SiteProvider | None = None,
    ) -> None:
        props: dict[str, Any] = {
            "site_name": site_name,
            "routing_method": routing_method,
        }
        props.update({key: None for key in SITE_OUTPUTS if key not in props})
        super().__init__(provider or SiteProvider(), resource_name, props, opts)
