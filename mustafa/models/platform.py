"""Snapshots of hosting-platform entities.

The platform owns all of this state. Models are frozen: after a mutation the
caller re-fetches instead of patching a local copy.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ServiceLevel(StrEnum):
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"
    BUSINESS = "business"

    @property
    def is_paid(self) -> bool:
        return self is not ServiceLevel.FREE


_PLAN_LABELS = {
    "basic": "Personal",
    "pro": "Pro",
    "business": "Business",
}


class Plan(StrEnum):
    """Paid plan a free site can be moved to, keyed by its service level."""

    BASIC = "basic"
    PRO = "pro"
    BUSINESS = "business"

    @property
    def label(self) -> str:
        return _PLAN_LABELS[self.value]

    @classmethod
    def from_label(cls, label: str) -> Plan:
        for plan in cls:
            if plan.label == label:
                return plan
        raise ValueError(f"Unknown plan label: {label!r}")

    @classmethod
    def labels(cls) -> list[str]:
        return [plan.label for plan in cls]


class Site(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    owner: str
    service_level: ServiceLevel = ServiceLevel.FREE


class Environment(BaseModel):
    """A deployable instance (dev, test, live, ...) of a site."""

    model_config = ConfigDict(frozen=True)

    id: str
    site_id: str
    site_name: str
    platform_host: str = "pantheonsite.io"

    def domain(self) -> str:
        """Canonical platform domain, e.g. ``live-example.pantheonsite.io``."""
        return f"{self.id}-{self.site_name}.{self.platform_host}"


class Domain(BaseModel):
    model_config = ConfigDict(frozen=True)

    domain: str
    dns_zone_name: str | None = None
    type: str = ""

    @property
    def is_custom(self) -> bool:
        """True for customer-managed names; platform subdomains carry a zone."""
        return self.dns_zone_name is None


class PaymentMethod(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Workflow(BaseModel):
    """Asynchronous server-side job. Finished once ``result`` is set."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str = ""
    result: str | None = None
    reason: str = ""

    @property
    def is_finished(self) -> bool:
        return bool(self.result)

    @property
    def is_successful(self) -> bool:
        return self.result == "succeeded"
