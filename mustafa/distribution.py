"""Build the distribution request and hand it to the chosen CDN provider."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from mustafa.clients.cloudflare import CloudflareBackend
from mustafa.clients.cloudfront import CloudFrontBackend
from mustafa.exceptions import UnsupportedProviderError
from mustafa.models.distribution import (
    AllowedMethods,
    CacheBehavior,
    DefaultCacheBehavior,
    DistributionConfig,
    ForwardedValues,
    Origin,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mustafa.config import Settings
    from mustafa.models.platform import Environment
    from mustafa.protocols import DistributionBackend


class Provider(StrEnum):
    AWS = "aws"
    CLOUDFLARE = "cloudflare"


def new_caller_reference() -> str:
    """Unique idempotency token for a CreateDistribution call."""
    stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S")
    return f"mustafa-{stamp}-{uuid.uuid4().hex[:8]}"


def build_distribution_config(
    env: Environment,
    aliases: Sequence[str],
    caller_reference: str | None = None,
    comment: str = "Created by mustafa",
) -> DistributionConfig:
    """Distribution fronting *env*'s platform domain for the given aliases.

    Everything under ``/`` is cached with cookies and query strings forwarded;
    the default behavior forwards cookies only. Viewers are redirected to
    HTTPS and the origin is only ever reached over HTTPS.
    """
    methods = AllowedMethods(items=("GET", "HEAD"), cached=("GET", "HEAD"))
    return DistributionConfig(
        caller_reference=caller_reference or new_caller_reference(),
        comment=comment,
        aliases=tuple(aliases),
        origins=(Origin(id=env.id, domain_name=env.domain()),),
        cache_behaviors=(
            CacheBehavior(
                path_pattern="/",
                target_origin_id=env.id,
                allowed_methods=methods,
                forwarded_values=ForwardedValues(query_string=True, cookies="all"),
                compress=True,
                min_ttl=0,
                viewer_protocol_policy="redirect-to-https",
            ),
        ),
        default_cache_behavior=DefaultCacheBehavior(
            target_origin_id=env.id,
            allowed_methods=methods,
            forwarded_values=ForwardedValues(query_string=False, cookies="all"),
            min_ttl=0,
            viewer_protocol_policy="redirect-to-https",
        ),
        http_version="http2",
        is_ipv6_enabled=True,
        price_class="PriceClass_All",
    )


def get_backend(provider: str, settings: Settings) -> DistributionBackend:
    """Return the backend for *provider*, or raise UnsupportedProviderError."""
    try:
        selected = Provider(provider.lower())
    except ValueError:
        choices = ", ".join(p.value for p in Provider)
        raise UnsupportedProviderError(
            f"Unknown CDN provider {provider!r}. Choose one of: {choices}."
        ) from None
    if selected is Provider.AWS:
        return CloudFrontBackend(region=settings.aws_region)
    return CloudflareBackend()
