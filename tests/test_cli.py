"""Tests for the click command."""

from __future__ import annotations

from contextlib import ExitStack
from unittest.mock import patch

from click.testing import CliRunner
from fakes import OTHER_USER_ID, FakeBackend, FakePlatform

from mustafa.cli import cli
from mustafa.models.platform import Domain, User


def _invoke(args, settings, platform=None, backend=None, input=None):
    with ExitStack() as stack:
        if platform is not None:
            stack.enter_context(patch("mustafa.cli._get_platform", return_value=platform))
        if backend is not None:
            stack.enter_context(patch("mustafa.cli.get_backend", return_value=backend))
        obj = {"settings": settings} if settings is not None else {}
        return CliRunner().invoke(cli, args, obj=obj, input=input)


class TestCli:
    def test_missing_arguments_is_usage_error(self, settings):
        result = _invoke([], settings)
        assert result.exit_code == 2

    def test_malformed_site_env(self, settings, paid_site):
        platform = FakePlatform(paid_site)
        result = _invoke(["example", "aws"], settings, platform=platform)
        assert result.exit_code == 2
        assert "site-name.env" in result.output
        assert platform.domain_fetches == 0

    def test_unknown_provider_rejected(self, settings, paid_site):
        platform = FakePlatform(paid_site)
        result = _invoke(["example.dev", "fastly"], settings, platform=platform)
        assert result.exit_code == 2
        assert platform.domain_fetches == 0

    def test_aws_happy_path(self, settings, paid_site):
        platform = FakePlatform(paid_site, domains=[Domain(domain="example.com")])
        backend = FakeBackend()

        result = _invoke(["example.dev", "aws"], settings, platform=platform, backend=backend, input="n\n")

        assert result.exit_code == 0, result.output
        assert "example.com" in result.output
        assert "E2EXAMPLE" in result.output
        assert backend.configs[0].aliases == ("example.com",)

    def test_cloudflare_exits_cleanly(self, settings, paid_site):
        platform = FakePlatform(paid_site, domains=[Domain(domain="example.com")])

        result = _invoke(["example.dev", "cloudflare"], settings, platform=platform, input="n\n")

        assert result.exit_code == 0, result.output

    def test_eligibility_error_exit_code(self, settings, free_site):
        platform = FakePlatform(free_site, user=User(id=OTHER_USER_ID))
        backend = FakeBackend()

        result = _invoke(["example.dev", "aws"], settings, platform=platform, backend=backend)

        assert result.exit_code == 1
        assert "Only paid sites" in result.output
        assert backend.configs == []

    def test_invalid_settings_is_click_error(self, monkeypatch, tmp_path, paid_site):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("WORKFLOW_TIMEOUT", "0")
        platform = FakePlatform(paid_site)

        result = _invoke(["example.dev", "aws"], None, platform=platform)

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        assert "workflow_timeout" in result.output
        assert platform.domain_fetches == 0
