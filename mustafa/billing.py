"""Billing gate: make sure a site is on a paid plan before it gets a CDN.

``next_billing_step`` is a pure function from what is known so far to the next
thing that needs to happen. ``BillingGate`` performs those steps (prompts,
API calls, workflow waits) and feeds the answers back in until the gate
either opens or ends the run.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from mustafa.exceptions import NoPaymentMethodError, NotSiteOwnerError
from mustafa.models.platform import Plan

if TYPE_CHECKING:
    from mustafa.models.platform import PaymentMethod, ServiceLevel, Site, User
    from mustafa.polling import WorkflowPoller
    from mustafa.protocols import PlatformPort, Prompter

logger = structlog.get_logger()

INVITE_QUESTION = "Do you want to invite a business owner to pay for the site?"
INVITE_EMAIL_QUESTION = (
    "What is the email address of the business owner who should pay for this site?"
)
PAYMENT_METHOD_QUESTION = (
    "In order to add a CDN to your site it needs to be on a paid plan. "
    "Please select one of your existing payment methods to pay for this site."
)
PLAN_QUESTION = "Please select the plan level."
UPGRADE_PLAN_QUESTION = (
    "In order to add a CDN to your site it needs to be on a paid plan. "
    "Please select your desired plan level."
)
NOT_OWNER_MESSAGE = (
    "Only paid sites can have CDNs added to them. Please invite a business owner "
    "to pay for the site or have the site owner pay for the site."
)
NO_PAYMENT_METHOD_MESSAGE = (
    "In order to have a CDN on your site it needs to be on a paid plan. You currently "
    "have no payment methods associated with your account. Please visit the dashboard "
    "and add a payment method before proceeding."
)


class BillingChoice(StrEnum):
    INVITE = "invite"
    UPGRADE = "upgrade"


class BillingStep(StrEnum):
    PROCEED = "proceed"
    BLOCKED_NOT_OWNER = "blocked_not_owner"
    ASK_CHOICE = "ask_choice"
    ASK_INVITE_EMAIL = "ask_invite_email"
    ASK_PLAN = "ask_plan"
    SUBMIT_INVITE = "submit_invite"
    INVITED = "invited"
    FETCH_PAYMENT_METHODS = "fetch_payment_methods"
    BLOCKED_NO_PAYMENT_METHOD = "blocked_no_payment_method"
    ASK_PAYMENT_METHOD = "ask_payment_method"
    SUBMIT_UPGRADE = "submit_upgrade"


class BillingOutcome(StrEnum):
    PAID = "paid"
    INVITE_SENT = "invite_sent"


@dataclass(frozen=True, slots=True)
class BillingState:
    """Everything the gate has learned so far."""

    service_level: ServiceLevel
    is_owner: bool
    choice: BillingChoice | None = None
    invite_email: str = ""
    payment_methods: tuple[PaymentMethod, ...] | None = None
    payment_method: PaymentMethod | None = None
    plan: Plan | None = None
    submitted: bool = False


def next_billing_step(state: BillingState) -> BillingStep:
    if state.service_level.is_paid:
        return BillingStep.PROCEED
    if not state.is_owner:
        return BillingStep.BLOCKED_NOT_OWNER
    if state.choice is None:
        return BillingStep.ASK_CHOICE

    if state.choice is BillingChoice.INVITE:
        if not state.invite_email:
            return BillingStep.ASK_INVITE_EMAIL
        if state.plan is None:
            return BillingStep.ASK_PLAN
        return BillingStep.INVITED if state.submitted else BillingStep.SUBMIT_INVITE

    if state.payment_methods is None:
        return BillingStep.FETCH_PAYMENT_METHODS
    if not state.payment_methods:
        return BillingStep.BLOCKED_NO_PAYMENT_METHOD
    if state.payment_method is None:
        return BillingStep.ASK_PAYMENT_METHOD
    if state.plan is None:
        return BillingStep.ASK_PLAN
    return BillingStep.PROCEED if state.submitted else BillingStep.SUBMIT_UPGRADE


def _looks_like_email(value: str) -> bool:
    local, _, domain = value.partition("@")
    return bool(local) and "." in domain and " " not in value


class BillingGate:
    """Runs the billing decision flow against the platform and the user."""

    def __init__(self, platform: PlatformPort, prompter: Prompter, poller: WorkflowPoller) -> None:
        self.platform = platform
        self.prompter = prompter
        self.poller = poller

    def run(self, site: Site, user: User) -> BillingOutcome:
        state = BillingState(service_level=site.service_level, is_owner=site.owner == user.id)
        while True:
            step = next_billing_step(state)
            logger.debug("Billing step", step=step.value)

            if step is BillingStep.PROCEED:
                return BillingOutcome.PAID
            if step is BillingStep.INVITED:
                return BillingOutcome.INVITE_SENT
            if step is BillingStep.BLOCKED_NOT_OWNER:
                logger.error("Site is free and caller is not the owner", owner=site.owner)
                raise NotSiteOwnerError(NOT_OWNER_MESSAGE)
            if step is BillingStep.BLOCKED_NO_PAYMENT_METHOD:
                logger.error("Owner has no payment methods", user_id=user.id)
                raise NoPaymentMethodError(NO_PAYMENT_METHOD_MESSAGE)

            state = self._advance(step, state, site, user)

    def _advance(
        self, step: BillingStep, state: BillingState, site: Site, user: User
    ) -> BillingState:
        if step is BillingStep.ASK_CHOICE:
            invite = self.prompter.confirm(INVITE_QUESTION, default=False)
            choice = BillingChoice.INVITE if invite else BillingChoice.UPGRADE
            return dataclasses.replace(state, choice=choice)

        if step is BillingStep.ASK_INVITE_EMAIL:
            email = self.prompter.ask(INVITE_EMAIL_QUESTION).strip()
            if not _looks_like_email(email):
                self.prompter.text(f"{email!r} is not a valid email address.")
                return state
            return dataclasses.replace(state, invite_email=email)

        if step is BillingStep.ASK_PLAN:
            inviting = state.choice is BillingChoice.INVITE
            question = PLAN_QUESTION if inviting else UPGRADE_PLAN_QUESTION
            label = self.prompter.choice(question, Plan.labels())
            return dataclasses.replace(state, plan=Plan.from_label(label))

        if step is BillingStep.FETCH_PAYMENT_METHODS:
            methods = tuple(self.platform.get_payment_methods(user))
            return dataclasses.replace(state, payment_methods=methods)

        if step is BillingStep.ASK_PAYMENT_METHOD:
            methods = state.payment_methods or ()
            label = self.prompter.choice(PAYMENT_METHOD_QUESTION, [pm.label for pm in methods])
            chosen = next(pm for pm in methods if pm.label == label)
            return dataclasses.replace(state, payment_method=chosen)

        if step is BillingStep.SUBMIT_INVITE:
            self._invite_business_owner(site, user, state.invite_email, state.plan)
            return dataclasses.replace(state, submitted=True)

        if step is BillingStep.SUBMIT_UPGRADE:
            self._upgrade(site, state.payment_method, state.plan)
            return dataclasses.replace(state, submitted=True)

        raise AssertionError(f"Unhandled billing step {step}")

    def _invite_business_owner(self, site: Site, user: User, email: str, plan: Plan | None) -> None:
        assert plan is not None
        self.platform.create_workflow(
            site,
            "invite_to_pay",
            {
                "email": email,
                "service_level": plan.value,
                "invited_by": user.id,
                "invited_by_email": user.email,
                "invited_by_name": user.full_name,
                "invited_by_gravatar": "",
            },
        )
        logger.info("Business owner invited", email=email, plan=plan.value)

    def _upgrade(self, site: Site, payment_method: PaymentMethod | None, plan: Plan | None) -> None:
        assert payment_method is not None and plan is not None
        workflow = self.platform.create_workflow(
            site, "associate_site_instrument", {"instrument_id": payment_method.id}
        )
        self.poller.wait(workflow)
        logger.info("Payment method attached", payment_method=payment_method.label)

        workflow = self.platform.create_workflow(
            site, "change_site_service_level", {"service_level": plan.value}
        )
        self.poller.wait(workflow)
        logger.info("Service level changed", plan=plan.value)
