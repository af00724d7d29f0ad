"""SiteConfiguration resource - append-only configuration revisions."""

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

from qcdn_schemas import SiteConfigAddRequest, SiteConfigVersion

from apps.cdn.client import SiteClientFacade
from apps.cdn.provider.base import (
    QCDNResourceProvider,
    require_inputs,
    split_import_id,
)

logger = logging.getLogger(__name__)


def host_index_equal(old: str | None, new: str | None) -> bool:
    """True when two host index documents are the same JSON value."""
    if old == new:
        return True
    if not old or not new:
        return False
    try:
        return json.loads(old) == json.loads(new)
    except json.JSONDecodeError:
        return False


def config_outputs(config: SiteConfigVersion, site_id: str) -> dict[str, Any]:
    return {
        "site_id": config.site_id or site_id,
        "revision_id": config.revision_id,
        "revision_num": config.revision_num,
        "owner_org_id": config.owner_org_id,
        "last_update_time_milli": config.last_update_time_milli,
    }


def resolve_import_revision(facade: SiteClientFacade, site_id: str) -> str:
    """
    Revision to import when only a site ID is given.

    The active revision, else the last published one, else the revision
    with the highest revision number.
    """
    site = facade.sites.get_site(site_id, target="ga")
    ops = site.active_and_last_publishing_operation
    if ops is not None:
        if ops.active is not None and ops.active.revision_id:
            return ops.active.revision_id
        if ops.last is not None and ops.last.revision_id:
            return ops.last.revision_id

    logger.info("No publish info for site %s, using its latest revision", site_id)
    latest = facade.configs.find_latest_revision(site_id)
    if latest is None:
        raise ValueError(f"Site {site_id} has no configuration revisions")
    return latest.revision_id


class SiteConfigurationProvider(QCDNResourceProvider):
    """
    Every change creates a new revision.

    Reformatting the host index JSON without changing its content is not a
    change. Deleting only forgets the revision, the API keeps it.
    """

    def check(self, _olds: dict[str, Any], news: dict[str, Any]) -> CheckResult:
        failures = require_inputs(news, ("site_id", "host_index"))
        host_index = news.get("host_index")
        if isinstance(host_index, str) and host_index:
            try:
                json.loads(host_index)
            except json.JSONDecodeError as e:
                failures.append(
                    CheckFailure("host_index", f"host_index is not valid JSON: {e}")
                )
        return CheckResult(news, failures)

    def _create_revision(self, props: dict[str, Any]) -> SiteConfigVersion:
        request = SiteConfigAddRequest(
            host_index=json.loads(props["host_index"]),
            change_description=props.get("change_description") or "",
        )
        with self.facade() as facade:
            return facade.configs.create_site_config(props["site_id"], request)

    def create(self, props: dict[str, Any]) -> CreateResult:
        config = self._create_revision(props)
        resource_id = f"{props['site_id']}:{config.revision_id}"
        outputs = {**props, **config_outputs(config, props["site_id"])}
        return CreateResult(resource_id, outputs)

    def diff(
        self, _id: str, olds: dict[str, Any], news: dict[str, Any]
    ) -> DiffResult:
        replaces = ["site_id"] if olds.get("site_id") != news.get("site_id") else []
        same_content = host_index_equal(
            olds.get("host_index"), news.get("host_index")
        ) and olds.get("change_description") == news.get("change_description")
        return DiffResult(changes=bool(replaces) or not same_content, replaces=replaces)

    def update(
        self, _id: str, _olds: dict[str, Any], news: dict[str, Any]
    ) -> UpdateResult:
        config = self._create_revision(news)
        return UpdateResult({**news, **config_outputs(config, news["site_id"])})

    def read(self, id: str, props: dict[str, Any]) -> ReadResult:
        site_id, revision_id = split_import_id(id, "revision_id")
        with self.facade() as facade:
            if not revision_id:
                revision_id = resolve_import_revision(facade, site_id)
            logger.info("Reading revision %s of site %s", revision_id, site_id)
            config = facade.configs.get_site_config(site_id, revision_id)

        outputs = {**props, **config_outputs(config, site_id)}
        # Keep the user's formatting when the content is unchanged
        host_index = json.dumps(config.host_index)
        if not host_index_equal(props.get("host_index"), host_index):
            outputs["host_index"] = host_index
        outputs["change_description"] = config.change_description or ""
        return ReadResult(f"{site_id}:{config.revision_id}", outputs)

    def delete(self, id: str, props: dict[str, Any]) -> None:
        logger.info(
            "Site configuration revisions cannot be deleted, forgetting %s "
            "(revision_num=%s)",
            id,
            props.get("revision_num"),
        )


class SiteConfiguration(Resource):
    """A configuration revision of a Qwilt CDN site."""

    site_id: pulumi.Output[str]
    revision_id: pulumi.Output[str]
    revision_num: pulumi.Output[int]
    host_index: pulumi.Output[str]
    change_description: pulumi.Output[str]

    def __init__(
        self,
        resource_name: str,
        site_id: pulumi.Input[str],
        host_index: pulumi.Input[str],
        change_description: pulumi.Input[str] = "",
        opts: pulumi.ResourceOptions | None = None,
        provider: SiteConfigurationProvider | None = None,
    ) -> None:
        props = {
            "site_id": site_id,
            "host_index": host_index,
            "change_description": change_description,
            "revision_id": None,
            "revision_num": None,
            "owner_org_id": None,
            "last_update_time_milli": None,
        }
        super().__init__(
            provider or SiteConfigurationProvider(), resource_name, props, opts
        )
