"""Shared test fixtures."""

from __future__ import annotations

import logging

import pytest
import structlog
from fakes import OWNER_ID

from mustafa.config import Settings
from mustafa.models.platform import Environment, ServiceLevel, Site


@pytest.fixture(autouse=True)
def _reset_logging():
    """The CLI points logging at the runner's streams; undo that after each test."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    logging.getLogger().handlers.clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        pantheon_machine_token="test-token",
        pantheon_api_url="https://terminus.test/api",
        workflow_timeout=5.0,
        workflow_poll_interval=0.01,
        workflow_poll_max_interval=0.02,
        log_level="DEBUG",
        log_format="console",
        _env_file=None,
    )


@pytest.fixture()
def paid_site() -> Site:
    return Site(id="site-uuid", name="example", owner=OWNER_ID, service_level=ServiceLevel.PRO)


@pytest.fixture()
def free_site() -> Site:
    return Site(id="site-uuid", name="example", owner=OWNER_ID, service_level=ServiceLevel.FREE)


@pytest.fixture()
def env() -> Environment:
    return Environment(id="dev", site_id="site-uuid", site_name="example")
