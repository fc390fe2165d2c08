"""Port interfaces (Protocols) for the external collaborators."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mustafa.models.distribution import DistributionConfig, DistributionResult
    from mustafa.models.platform import (
        Domain,
        Environment,
        PaymentMethod,
        Site,
        User,
        Workflow,
    )


@runtime_checkable
class PlatformPort(Protocol):
    """Interface for the hosting-platform REST API."""

    def get_site(self, name: str) -> Site: ...
    def get_environment(self, site: Site, env_id: str) -> Environment: ...
    def get_current_user(self) -> User: ...
    def get_payment_methods(self, user: User) -> list[PaymentMethod]: ...
    def get_domains(self, env: Environment) -> list[Domain]: ...
    def create_domain(self, env: Environment, domain: str) -> None: ...
    def create_workflow(
        self, site: Site, workflow_type: str, params: dict[str, Any]
    ) -> Workflow: ...
    def get_workflow(self, site: Site, workflow_id: str) -> Workflow: ...


@runtime_checkable
class DistributionBackend(Protocol):
    """A CDN provider able to create a distribution."""

    name: str

    def create_distribution(self, config: DistributionConfig) -> DistributionResult | None: ...


@runtime_checkable
class Prompter(Protocol):
    """Blocking interactive I/O."""

    def confirm(self, question: str, default: bool = False) -> bool: ...
    def ask(self, question: str) -> str: ...
    def choice(self, question: str, options: Sequence[str]) -> str: ...
    def text(self, message: str) -> None: ...
    def table(self, headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None: ...
