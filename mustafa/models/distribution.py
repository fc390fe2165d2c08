"""Typed CloudFront distribution configuration.

Field names are snake_case; ``to_api()`` renders the CamelCase structure the
CloudFront ``CreateDistribution`` call expects. Every ``Quantity`` is derived
from its item list so the two can never disagree.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

HttpMethod = Literal["GET", "HEAD", "OPTIONS", "PUT", "PATCH", "POST", "DELETE"]
ViewerProtocolPolicy = Literal["allow-all", "https-only", "redirect-to-https"]
OriginProtocolPolicy = Literal["http-only", "match-viewer", "https-only"]
SslProtocol = Literal["SSLv3", "TLSv1", "TLSv1.1", "TLSv1.2"]
PriceClass = Literal["PriceClass_100", "PriceClass_200", "PriceClass_All"]


def _counted(items: list[Any]) -> dict[str, Any]:
    return {"Quantity": len(items), "Items": items}


class AllowedMethods(BaseModel):
    model_config = ConfigDict(frozen=True)

    items: tuple[HttpMethod, ...] = ("GET", "HEAD")
    cached: tuple[HttpMethod, ...] = ("GET", "HEAD")

    @model_validator(mode="after")
    def _cached_subset(self) -> AllowedMethods:
        extra = set(self.cached) - set(self.items)
        if extra:
            raise ValueError(f"Cached methods must also be allowed: {sorted(extra)}")
        return self

    def to_api(self) -> dict[str, Any]:
        return {
            **_counted(list(self.items)),
            "CachedMethods": _counted(list(self.cached)),
        }


class ForwardedValues(BaseModel):
    model_config = ConfigDict(frozen=True)

    query_string: bool = False
    cookies: Literal["none", "all"] = "all"

    def to_api(self) -> dict[str, Any]:
        return {
            "QueryString": self.query_string,
            "Cookies": {"Forward": self.cookies},
        }


class DefaultCacheBehavior(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_origin_id: str
    viewer_protocol_policy: ViewerProtocolPolicy = "redirect-to-https"
    allowed_methods: AllowedMethods = Field(default_factory=AllowedMethods)
    forwarded_values: ForwardedValues = Field(default_factory=ForwardedValues)
    compress: bool | None = None
    min_ttl: int = Field(default=0, ge=0)
    trusted_signers: bool = False

    def to_api(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "TargetOriginId": self.target_origin_id,
            "ViewerProtocolPolicy": self.viewer_protocol_policy,
            "AllowedMethods": self.allowed_methods.to_api(),
            "ForwardedValues": self.forwarded_values.to_api(),
            "MinTTL": self.min_ttl,
            "TrustedSigners": {"Enabled": self.trusted_signers, "Quantity": 0},
        }
        if self.compress is not None:
            data["Compress"] = self.compress
        return data


class CacheBehavior(DefaultCacheBehavior):
    """A cache behavior bound to a path pattern."""

    path_pattern: str = Field(min_length=1)

    def to_api(self) -> dict[str, Any]:
        return {"PathPattern": self.path_pattern, **super().to_api()}


class CustomOriginConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    http_port: int = Field(default=80, ge=1, le=65535)
    https_port: int = Field(default=443, ge=1, le=65535)
    origin_protocol_policy: OriginProtocolPolicy = "https-only"
    ssl_protocols: tuple[SslProtocol, ...] = ("TLSv1.2", "TLSv1.1")

    def to_api(self) -> dict[str, Any]:
        return {
            "HTTPPort": self.http_port,
            "HTTPSPort": self.https_port,
            "OriginProtocolPolicy": self.origin_protocol_policy,
            "OriginSslProtocols": _counted(list(self.ssl_protocols)),
        }


class Origin(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    domain_name: str = Field(min_length=1)
    custom_origin_config: CustomOriginConfig = Field(default_factory=CustomOriginConfig)

    def to_api(self) -> dict[str, Any]:
        return {
            "Id": self.id,
            "DomainName": self.domain_name,
            "CustomOriginConfig": self.custom_origin_config.to_api(),
        }


class DistributionConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    caller_reference: str = Field(min_length=1)
    comment: str = ""
    aliases: tuple[str, ...] = ()
    origins: tuple[Origin, ...] = Field(min_length=1)
    default_cache_behavior: DefaultCacheBehavior
    cache_behaviors: tuple[CacheBehavior, ...] = ()
    enabled: bool = True
    http_version: Literal["http1.1", "http2"] = "http2"
    is_ipv6_enabled: bool = True
    price_class: PriceClass = "PriceClass_All"

    @field_validator("aliases")
    @classmethod
    def _non_blank_aliases(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if any(not alias.strip() for alias in value):
            raise ValueError("Aliases must not be blank")
        return value

    @model_validator(mode="after")
    def _targets_exist(self) -> DistributionConfig:
        origin_ids = {origin.id for origin in self.origins}
        for behavior in (self.default_cache_behavior, *self.cache_behaviors):
            if behavior.target_origin_id not in origin_ids:
                raise ValueError(
                    f"Cache behavior targets unknown origin {behavior.target_origin_id!r}"
                )
        return self

    def to_api(self) -> dict[str, Any]:
        return {
            "CallerReference": self.caller_reference,
            "Comment": self.comment,
            "Aliases": _counted(list(self.aliases)),
            "Origins": _counted([origin.to_api() for origin in self.origins]),
            "DefaultCacheBehavior": self.default_cache_behavior.to_api(),
            "CacheBehaviors": _counted([b.to_api() for b in self.cache_behaviors]),
            "Enabled": self.enabled,
            "HttpVersion": self.http_version,
            "IsIPV6Enabled": self.is_ipv6_enabled,
            "PriceClass": self.price_class,
        }


class DistributionResult(BaseModel):
    """What the provider reports back about a created distribution."""

    model_config = ConfigDict(frozen=True)

    provider: str
    id: str = ""
    domain_name: str = ""
    status: str = ""
