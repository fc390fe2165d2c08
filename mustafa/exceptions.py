"""Error taxonomy for the CDN provisioner.

Every error the command reports to the user derives from MustafaError; the CLI
turns these into a non-zero exit with a readable message. Anything else is a
bug and propagates with a traceback.
"""

from __future__ import annotations


class MustafaError(Exception):
    """Base class for all expected failures."""


class ConfigurationError(MustafaError):
    """Required configuration is missing or invalid."""


class SiteNotFoundError(MustafaError):
    """The site or environment named on the command line does not exist."""


class EligibilityError(MustafaError):
    """The site cannot get a CDN in its current billing state."""


class NotSiteOwnerError(EligibilityError):
    """Only the site owner may upgrade a free site."""


class NoPaymentMethodError(EligibilityError):
    """The owner has no payment method to pay for an upgrade."""


class UnsupportedProviderError(MustafaError):
    """The requested CDN provider is unknown."""


class PlatformAPIError(MustafaError):
    """The hosting platform API answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DistributionError(MustafaError):
    """The CDN provider rejected the distribution request."""


class WorkflowError(MustafaError):
    """Base class for workflow wait failures."""

    def __init__(self, message: str, workflow_id: str = "") -> None:
        super().__init__(message)
        self.workflow_id = workflow_id


class WorkflowFailedError(WorkflowError):
    """The workflow finished without succeeding."""


class WorkflowTimeoutError(WorkflowError):
    """The workflow did not finish before the deadline."""


class WorkflowCancelledError(WorkflowError):
    """Waiting for the workflow was cancelled."""
