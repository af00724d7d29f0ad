"""Cloudflare infrastructure modules."""

from src.cloudflare import dns

__all__ = ["dns"]
