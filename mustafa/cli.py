"""Click CLI entry point for Mustafa."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import structlog
from pydantic import ValidationError

from mustafa.clients.pantheon import PantheonClient
from mustafa.config import Settings
from mustafa.distribution import Provider, get_backend
from mustafa.exceptions import MustafaError
from mustafa.logging import bind_site_context, configure_logging
from mustafa.polling import WorkflowPoller
from mustafa.prompts import ClickPrompter
from mustafa.provisioner import SiteCdnProvisioner, parse_site_env, resolve_context

if TYPE_CHECKING:
    from mustafa.protocols import PlatformPort, Prompter

logger = structlog.get_logger()

USAGE = "Usage: mustafa <site-name.env> <provider>"


def _validate_site_env(_ctx: click.Context, _param: click.Parameter, value: str) -> str:
    try:
        parse_site_env(value)
    except ValueError as exc:
        raise click.BadParameter(f"{exc}. {USAGE}") from exc
    return value


def _get_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc


def _get_platform(settings: Settings) -> PlatformPort:
    return PantheonClient.from_settings(settings)


def _get_prompter() -> Prompter:
    return ClickPrompter()


@click.command()
@click.argument("site_env", metavar="SITE_ENV", callback=_validate_site_env)
@click.argument("provider", type=click.Choice([p.value for p in Provider], case_sensitive=False))
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, site_env: str, provider: str, verbose: bool) -> None:
    """Set SITE_ENV (site-name.env) up behind a CDN from PROVIDER."""
    ctx.ensure_object(dict)
    settings: Settings = ctx.obj.get("settings") or _get_settings()
    ctx.obj["settings"] = settings
    configure_logging(
        log_level="DEBUG" if verbose else settings.log_level, log_format=settings.log_format
    )

    site_name, env_id = parse_site_env(site_env)
    bind_site_context(site_name, env_id)

    platform = _get_platform(settings)
    try:
        backend = get_backend(provider, settings)
        target = resolve_context(platform, site_env)
        poller = WorkflowPoller.from_settings(
            lambda wf: platform.get_workflow(target.site, wf.id), settings
        )
        provisioner = SiteCdnProvisioner(
            platform,
            backend,
            _get_prompter(),
            poller,
            comment=settings.distribution_comment,
        )
        result = provisioner.run(target)
        logger.info("Done", state=result.state.value, aliases=result.aliases)
    except MustafaError as exc:
        logger.debug("Command failed", error_type=type(exc).__name__)
        raise click.ClickException(str(exc)) from exc
    finally:
        close = getattr(platform, "close", None)
        if close is not None:
            close()


def main() -> None:
    cli(obj={})
