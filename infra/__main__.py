"""Consult CDN Infrastructure - Pulumi Entry Point.

This module orchestrates delivery of the public site through:
- Qwilt CDN: site, configuration revision, certificate and publishing
- Cloudflare: DNS delegation to the CDN and certificate challenges
"""

import pulumi
from src import outputs
from src.cloudflare import dns
from src.qcdn import activation, site

from apps.cdn.provider import get_ip_allow_list, load_settings

# Get environment from stack config
config = pulumi.Config()
env = config.require("environment")
hostname = config.require("hostname")

# Challenge CNAMEs reported by a pending certificate template
challenges = config.get_object("qcdn_challenges") or {}

# =============================================================================
# Qwilt CDN
# =============================================================================

# Site and configuration revision
cdn_site = site.create_site(env, hostname)

# Certificate and publishing (GA in prod, staging elsewhere)
cdn_activation = activation.create_activation(env, hostname, cdn_site["config"])

# CDN device addresses to allow at the origin firewall
allow_list = get_ip_allow_list(settings=load_settings())

# =============================================================================
# Cloudflare Infrastructure
# =============================================================================

# DNS records (delegate to the CDN)
dns_records = dns.create_dns_records(
    env=env,
    cdn_target=cdn_site["site"].site_dns_cname_delegation_target,
)
dns_records.update(dns.create_challenge_records(env, challenges))

# =============================================================================
# Outputs
# =============================================================================

outputs.export_outputs(
    env=env,
    cdn_site=cdn_site,
    cdn_activation=cdn_activation,
    dns_records=dns_records,
    allow_list=allow_list,
)
