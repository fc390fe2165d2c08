"""Clients for the hosting platform and the CDN providers."""

from mustafa.clients.cloudflare import CloudflareBackend
from mustafa.clients.cloudfront import CloudFrontBackend
from mustafa.clients.pantheon import PantheonClient

__all__ = [
    "CloudFrontBackend",
    "CloudflareBackend",
    "PantheonClient",
]
