"""CloudFront backend: creates a distribution through boto3."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from mustafa.exceptions import DistributionError
from mustafa.models.distribution import DistributionResult

if TYPE_CHECKING:
    from mustafa.models.distribution import DistributionConfig

logger = structlog.get_logger()


class CloudFrontBackend:
    """Submits distribution configs to AWS CloudFront.

    Credentials come from the usual boto3 chain (environment, shared config,
    instance role).
    """

    name = "aws"

    def __init__(self, region: str = "us-east-1", client: Any = None) -> None:
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("cloudfront", region_name=self.region)
        return self._client

    def create_distribution(self, config: DistributionConfig) -> DistributionResult:
        logger.info(
            "Creating CloudFront distribution",
            aliases=list(config.aliases),
            origin=config.origins[0].domain_name,
        )
        try:
            response = self.client.create_distribution(DistributionConfig=config.to_api())
        except ClientError as exc:
            error = exc.response.get("Error", {})
            raise DistributionError(
                f"CloudFront rejected the distribution: {error.get('Code', 'Unknown')}: "
                f"{error.get('Message', str(exc))}"
            ) from exc
        except BotoCoreError as exc:
            raise DistributionError(f"Could not reach CloudFront: {exc}") from exc

        distribution = response.get("Distribution", {})
        result = DistributionResult(
            provider=self.name,
            id=distribution.get("Id", ""),
            domain_name=distribution.get("DomainName", ""),
            status=distribution.get("Status", ""),
        )
        logger.info(
            "CloudFront distribution created", distribution_id=result.id, status=result.status
        )
        return result
