"""Top-level flow: billing gate, domain reconciliation, distribution request."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from mustafa.billing import BillingGate, BillingOutcome
from mustafa.distribution import build_distribution_config
from mustafa.domains import DomainReconciler

if TYPE_CHECKING:
    from mustafa.models.distribution import DistributionResult
    from mustafa.models.platform import Environment, Site, User
    from mustafa.polling import WorkflowPoller
    from mustafa.protocols import DistributionBackend, PlatformPort, Prompter

logger = structlog.get_logger()

RERUN_NOTICE = (
    "Once a business owner has paid for the site, you'll be able to run this "
    "command again to set up your CDN."
)


class ProvisionState(StrEnum):
    FREE_INVITE_SENT = "free_invite_sent"
    PAID = "paid"
    DOMAINS_RECONCILED = "domains_reconciled"
    DISTRIBUTION_SUBMITTED = "distribution_submitted"
    DISTRIBUTION_SKIPPED = "distribution_skipped"


@dataclass(frozen=True, slots=True)
class ProvisionContext:
    """The resolved target of one run, passed to every step."""

    site: Site
    env: Environment
    user: User


def parse_site_env(site_env: str) -> tuple[str, str]:
    """Split ``site-name.env`` into its two parts."""
    site, sep, env = site_env.strip().rpartition(".")
    if not sep or not site or not env:
        raise ValueError(f"Expected <site-name>.<env>, got {site_env!r}")
    return site, env


def resolve_context(platform: PlatformPort, site_env: str) -> ProvisionContext:
    site_name, env_id = parse_site_env(site_env)
    site = platform.get_site(site_name)
    env = platform.get_environment(site, env_id)
    user = platform.get_current_user()
    logger.info("Site resolved", service_level=site.service_level.value, user_id=user.id)
    return ProvisionContext(site=site, env=env, user=user)


@dataclass
class ProvisionResult:
    state: ProvisionState
    aliases: list[str]
    distribution: DistributionResult | None = None


class SiteCdnProvisioner:
    def __init__(
        self,
        platform: PlatformPort,
        backend: DistributionBackend,
        prompter: Prompter,
        poller: WorkflowPoller,
        comment: str = "Created by mustafa",
    ) -> None:
        self.platform = platform
        self.backend = backend
        self.prompter = prompter
        self.poller = poller
        self.comment = comment

    def run(self, ctx: ProvisionContext) -> ProvisionResult:
        outcome = BillingGate(self.platform, self.prompter, self.poller).run(ctx.site, ctx.user)
        if outcome is BillingOutcome.INVITE_SENT:
            self.prompter.text(RERUN_NOTICE)
            return ProvisionResult(state=ProvisionState.FREE_INVITE_SENT, aliases=[])
        logger.debug("Provision state", state=ProvisionState.PAID.value)

        aliases = DomainReconciler(self.platform, self.prompter).run(ctx.env)
        logger.debug("Provision state", state=ProvisionState.DOMAINS_RECONCILED.value)

        config = build_distribution_config(ctx.env, aliases, comment=self.comment)
        distribution = self.backend.create_distribution(config)
        if distribution is None:
            logger.warning("No distribution created", provider=self.backend.name)
            return ProvisionResult(state=ProvisionState.DISTRIBUTION_SKIPPED, aliases=aliases)

        self.prompter.text(
            f"Created {distribution.provider} distribution {distribution.id} "
            f"({distribution.domain_name}), status {distribution.status or 'unknown'}."
        )
        return ProvisionResult(
            state=ProvisionState.DISTRIBUTION_SUBMITTED,
            aliases=aliases,
            distribution=distribution,
        )

