"""Cloudflare DNS configuration."""

from typing import Any

import pulumi
import pulumi_cloudflare as cloudflare


def create_dns_records(env: str, cdn_target: pulumi.Output[str]) -> dict[str, Any]:
    """Create DNS records delegating traffic to the Qwilt CDN.

    Args:
        env: Environment name (dev, prod)
        cdn_target: CNAME delegation target of the Qwilt site

    Returns:
        Dictionary of created DNS records
    """
    config = pulumi.Config()
    zone_id = config.require("cloudflare_zone_id")

    records: dict[str, Any] = {}

    # Subdomain prefix for non-prod environments
    prefix = "" if env == "prod" else f"{env}."

    # Public site served by the CDN; the CDN terminates TLS, so no CF proxy
    www_record = cloudflare.Record(
        f"consult-{env}-www-dns",
        zone_id=zone_id,
        name=f"{prefix}www",
        content=cdn_target,
        type="CNAME",
        proxied=False,
        ttl=300,
        comment=f"Consult {env} Qwilt CDN delivery",
    )
    records["www"] = www_record

    return records


def create_challenge_records(
    env: str, challenges: dict[str, str]
) -> dict[str, Any]:
    """Create the CNAMEs that prove domain ownership for managed certificates.

    Args:
        env: Environment name (dev, prod)
        challenges: Record name to target, as reported by the certificate
            template error or the ``qcdn_challenges`` config value

    Returns:
        Dictionary of created DNS records
    """
    config = pulumi.Config()
    zone_id = config.require("cloudflare_zone_id")

    records: dict[str, Any] = {}
    for index, (name, target) in enumerate(sorted(challenges.items())):
        records[name] = cloudflare.Record(
            f"consult-{env}-acme-challenge-{index}",
            zone_id=zone_id,
            name=name,
            content=target,
            type="CNAME",
            proxied=False,
            ttl=300,
            comment=f"Consult {env} certificate domain validation",
        )

    return records
