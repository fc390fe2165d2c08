"""Cloudflare backend placeholder.

Fronting a site with Cloudflare needs a zone per alias and proxied DNS
records rather than a single distribution object, so there is nothing to
submit yet. The backend accepts the request, logs that nothing was done and
lets the command finish.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from mustafa.models.distribution import DistributionConfig, DistributionResult

logger = structlog.get_logger()


class CloudflareBackend:
    name = "cloudflare"

    def create_distribution(self, config: DistributionConfig) -> DistributionResult | None:
        # TODO: add the zone and proxied CNAME records for each alias via the Cloudflare API.
        logger.warning(
            "Cloudflare is not supported yet; no CDN was configured",
            aliases=list(config.aliases),
        )
        return None
