"""Domain reconciliation: let the user add domains, then pick the CDN aliases."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mustafa.models.platform import Domain, Environment
    from mustafa.protocols import PlatformPort, Prompter

logger = structlog.get_logger()

ADD_DOMAIN_QUESTION = "Would you like to add another domain?"
NEW_DOMAIN_QUESTION = "What is the new domain you would like to add?"


def cdn_aliases(domains: Iterable[Domain]) -> list[str]:
    """Names of customer-managed domains, in listing order.

    Platform subdomains carry a DNS zone name and are left out.
    """
    return [d.domain for d in domains if d.is_custom]


class DomainReconciler:
    def __init__(self, platform: PlatformPort, prompter: Prompter) -> None:
        self.platform = platform
        self.prompter = prompter

    def show(self, domains: list[Domain]) -> None:
        self.prompter.text(
            "You currently have the following domains associated with your site's environment."
        )
        self.prompter.table(["Domain Name"], [[d.domain] for d in domains])

    def run(self, env: Environment) -> list[str]:
        """Prompt for new domains on *env* and return the aliases to put behind the CDN."""
        domains = self.platform.get_domains(env)
        self.show(domains)

        default = len(domains) >= 1
        added = 0
        while self.prompter.confirm(ADD_DOMAIN_QUESTION, default=default):
            name = self.prompter.ask(NEW_DOMAIN_QUESTION).strip().lower()
            if not name:
                self.prompter.text("The domain name cannot be empty.")
                continue
            self.platform.create_domain(env, name)
            added += 1
            default = False

        # The CDN needs the platform's view after our changes.
        domains = self.platform.get_domains(env)
        aliases = cdn_aliases(domains)
        logger.info("Domains reconciled", added=added, total=len(domains), aliases=aliases)
        return aliases
