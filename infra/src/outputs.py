"""Stack outputs for consumption by other tools."""

from typing import Any

import pulumi

from apps.cdn.provider import IpAllowListResult


def export_outputs(
    env: str,
    cdn_site: dict[str, Any],
    cdn_activation: dict[str, Any],
    dns_records: dict[str, Any],
    allow_list: IpAllowListResult,
) -> None:
    """Export stack outputs for use by deployment scripts and other tools."""
    # Environment
    pulumi.export("environment", env)

    # CDN site
    site = cdn_site["site"]
    pulumi.export("cdn_site_id", site.site_id)
    pulumi.export("cdn_cname_target", site.site_dns_cname_delegation_target)
    pulumi.export("cdn_revision_id", cdn_site["config"].revision_id)

    # Publishing
    activation = cdn_activation["activation"]
    pulumi.export("cdn_publish_id", activation.publish_id)
    pulumi.export("cdn_publish_status", activation.publish_status)
    pulumi.export(
        "cdn_certificate_template_id",
        cdn_activation["certificate_template"].certificate_template_id,
    )

    # DNS
    pulumi.export("dns_records", dns_records)

    # Origin firewall allow-list
    pulumi.export("cdn_allow_list_md5", allow_list.md5)
    pulumi.export(
        "cdn_allow_list",
        {
            network.name: {"ipv4": network.ipv4, "ipv6": network.ipv6}
            for network in allow_list.networks
        },
    )
