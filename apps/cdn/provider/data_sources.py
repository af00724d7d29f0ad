"""
Read-only lookups for Pulumi programs.

Each function fetches fresh data on every call and returns plain values
that can be exported or fed into other resources.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

from qcdn_schemas import PubOp, SiteConfigVersion

from apps.cdn.client import SiteClientFacade
from apps.cdn.config import QCDNSettings
from apps.cdn.provider.base import FacadeFactory, QCDNResourceProvider
from apps.cdn.provider.site import site_outputs

logger = logging.getLogger(__name__)


@contextmanager
def _facade(
    settings: QCDNSettings | None, facade_factory: FacadeFactory | None
) -> Iterator[SiteClientFacade]:
    with QCDNResourceProvider(settings, facade_factory).facade() as facade:
        yield facade


# =============================================================================
# Sites
# =============================================================================


@dataclass
class GetSitesResult:
    sites: list[dict[str, Any]] = field(default_factory=list)
    revisions: list[dict[str, Any]] = field(default_factory=list)
    publish_ops: list[dict[str, Any]] = field(default_factory=list)


def _revision_output(config: SiteConfigVersion) -> dict[str, Any]:
    outputs = config.model_dump(exclude={"host_index"})
    outputs["host_index"] = json.dumps(config.host_index)
    return outputs


def _pub_op_output(pub_op: PubOp) -> dict[str, Any]:
    outputs = pub_op.model_dump()
    details = pub_op.validators_err_details
    outputs["validators_err_details"] = "" if details is None else json.dumps(details)
    return outputs


def get_sites(
    site_id: str | None = None,
    revision_id: str | None = None,
    publish_id: str | None = None,
    truncate_host_index: bool = False,
    settings: QCDNSettings | None = None,
    facade_factory: FacadeFactory | None = None,
) -> GetSitesResult:
    """
    Look up sites, and for a single site its revisions and operations.

    Deleted sites are included. Revisions and publishing operations are
    only fetched when ``site_id`` is given.

    Args:
        site_id: Restrict to one site.
        revision_id: Restrict revisions to one revision.
        publish_id: Restrict publishing operations to one operation.
        truncate_host_index: Omit host index bodies from revisions.
    """
    result = GetSitesResult()
    with _facade(settings, facade_factory) as facade:
        for site in facade.sites.get_sites(
            include_publish_details=True, include_deleted=True
        ):
            if site_id and site.site_id != site_id:
                continue
            result.sites.append(site_outputs(site))

        if not site_id:
            return result

        for config in facade.configs.get_site_configs(site_id, truncate_host_index):
            if revision_id and config.revision_id != revision_id:
                continue
            result.revisions.append(_revision_output(config))

        for pub_op in facade.publish_ops.get_pub_ops(site_id):
            if publish_id and pub_op.publish_id != publish_id:
                continue
            result.publish_ops.append(_pub_op_output(pub_op))

    return result


# =============================================================================
# Certificates
# =============================================================================


def get_certificates(
    cert_id: int | None = None,
    settings: QCDNSettings | None = None,
    facade_factory: FacadeFactory | None = None,
) -> list[dict[str, Any]]:
    """Uploaded certificates, optionally just one."""
    with _facade(settings, facade_factory) as facade:
        certificates = facade.certificates.get_certificates()
    return [
        cert.model_dump()
        for cert in certificates
        if cert_id is None or cert.cert_id == cert_id
    ]


def get_certificate_templates(
    certificate_template_id: int | None = None,
    settings: QCDNSettings | None = None,
    facade_factory: FacadeFactory | None = None,
) -> list[dict[str, Any]]:
    """Certificate templates, optionally just one."""
    with _facade(settings, facade_factory) as facade:
        templates = facade.certificate_templates.get_certificate_templates()
    return [
        template.model_dump()
        for template in templates
        if certificate_template_id is None
        or template.certificate_template_id == certificate_template_id
    ]


# =============================================================================
# Allow-lists
# =============================================================================


@dataclass
class NetworkIps:
    name: str
    ipv4: list[str]
    ipv6: list[str]


@dataclass
class IpAllowListResult:
    md5: str
    create_time_millis: int | None
    networks: list[NetworkIps]


@dataclass
class OriginAllowListResult:
    md5: str
    create_time_millis: int | None
    ip_data: dict[str, dict[str, list[str]]]


def get_ip_allow_list(
    settings: QCDNSettings | None = None,
    facade_factory: FacadeFactory | None = None,
) -> IpAllowListResult:
    """CDN device addresses as a list of named networks."""
    with _facade(settings, facade_factory) as facade:
        device_ips = facade.device_ips.get_origin_allow_list()
    return IpAllowListResult(
        md5=device_ips.md5,
        create_time_millis=device_ips.create_time_millis,
        networks=[
            NetworkIps(name=name, ipv4=list(ips.ipv4), ipv6=list(ips.ipv6))
            for name, ips in device_ips.ip_data.items()
        ],
    )


def get_origin_allow_list(
    settings: QCDNSettings | None = None,
    facade_factory: FacadeFactory | None = None,
) -> OriginAllowListResult:
    """CDN device addresses keyed by network name."""
    with _facade(settings, facade_factory) as facade:
        device_ips = facade.device_ips.get_origin_allow_list()
    return OriginAllowListResult(
        md5=device_ips.md5,
        create_time_millis=device_ips.create_time_millis,
        ip_data={
            name: {"ipv4": list(ips.ipv4), "ipv6": list(ips.ipv6)}
            for name, ips in device_ips.ip_data.items()
        },
    )
