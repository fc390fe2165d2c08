"""Re-exports all Pydantic models."""

from mustafa.models.distribution import (
    AllowedMethods,
    CacheBehavior,
    CustomOriginConfig,
    DefaultCacheBehavior,
    DistributionConfig,
    DistributionResult,
    ForwardedValues,
    Origin,
)
from mustafa.models.platform import (
    Domain,
    Environment,
    PaymentMethod,
    Plan,
    ServiceLevel,
    Site,
    User,
    Workflow,
)

__all__ = [
    "AllowedMethods",
    "CacheBehavior",
    "CustomOriginConfig",
    "DefaultCacheBehavior",
    "DistributionConfig",
    "DistributionResult",
    "Domain",
    "Environment",
    "ForwardedValues",
    "Origin",
    "PaymentMethod",
    "Plan",
    "ServiceLevel",
    "Site",
    "User",
    "Workflow",
]
