"""Tests for platform models."""

from __future__ import annotations

import pytest

from mustafa.models.platform import Domain, Environment, Plan, ServiceLevel, User, Workflow


class TestPlan:
    def test_labels(self):
        assert Plan.labels() == ["Personal", "Pro", "Business"]

    @pytest.mark.parametrize(
        ("label", "key"), [("Personal", "basic"), ("Pro", "pro"), ("Business", "business")]
    )
    def test_label_to_key(self, label, key):
        plan = Plan.from_label(label)
        assert plan.value == key
        assert plan.label == label

    def test_unknown_label(self):
        with pytest.raises(ValueError, match="Unknown plan label"):
            Plan.from_label("Elite")


class TestServiceLevel:
    def test_only_free_is_unpaid(self):
        assert [level for level in ServiceLevel if not level.is_paid] == [ServiceLevel.FREE]


class TestEnvironment:
    def test_platform_domain(self):
        env = Environment(id="live", site_id="abc", site_name="example")
        assert env.domain() == "live-example.pantheonsite.io"

    def test_custom_host(self):
        env = Environment(id="dev", site_id="abc", site_name="shop", platform_host="example.host")
        assert env.domain() == "dev-shop.example.host"


class TestWorkflow:
    def test_states(self):
        assert Workflow(id="1").is_finished is False
        assert Workflow(id="1", result="succeeded").is_successful is True
        failed = Workflow(id="1", result="failed")
        assert failed.is_finished is True
        assert failed.is_successful is False


def test_domain_is_custom():
    assert Domain(domain="example.com").is_custom is True
    assert Domain(domain="x.pantheonsite.io", dns_zone_name="pantheonsite.io").is_custom is False


def test_user_full_name():
    assert User(id="u", first_name="Ada", last_name="Lovelace").full_name == "Ada Lovelace"
    assert User(id="u").full_name == ""
