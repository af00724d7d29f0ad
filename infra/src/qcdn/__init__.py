"""Qwilt CDN infrastructure modules."""

from src.qcdn import activation, site

__all__ = ["activation", "site"]
