"""Qwilt CDN site and its configuration revision."""

import json
from typing import Any

import pulumi

from apps.cdn.provider import Site, SiteConfiguration


def default_host_index(hostname: str, origin: str) -> dict[str, Any]:
    """Minimal host index routing ``hostname`` to a single origin."""
    return {
        "hosts": [
            {
                "host": hostname,
                "host-metadata": {
                    "metadata": [
                        {
                            "generic-metadata-type": "MI.SourceMetadataExtended",
                            "generic-metadata-value": {
                                "sources": [
                                    {"protocol": "https/1.1", "endpoints": [origin]}
                                ]
                            },
                        }
                    ],
                    "paths": [],
                },
            }
        ]
    }


def create_site(env: str, hostname: str) -> dict[str, Any]:
    """Create the CDN site and publishable configuration.

    The host index comes from the ``qcdn_host_index`` config value (JSON)
    when set, otherwise a single-origin index is built from ``origin_host``.

    Args:
        env: Environment name (dev, prod)
        hostname: Public hostname served by the CDN

    Returns:
        Dictionary with the site and its configuration revision
    """
    config = pulumi.Config()

    host_index = config.get("qcdn_host_index")
    if host_index is None:
        origin = config.require("origin_host")
        host_index = json.dumps(default_host_index(hostname, origin))

    site = Site(
        f"consult-{env}-cdn-site",
        site_name=f"consult-{env}",
    )

    site_config = SiteConfiguration(
        f"consult-{env}-cdn-config",
        site_id=site.site_id,
        host_index=host_index,
        change_description=f"Consult {env} delivery",
        opts=pulumi.ResourceOptions(parent=site),
    )

    return {"site": site, "config": site_config}
