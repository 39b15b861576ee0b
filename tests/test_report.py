"""Tests for connection setup and inventory enumeration."""

import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from az_debug_info.azure_api import CredentialError, ResourceGroup, Subscription
from az_debug_info.report import AzureContext, connect, run_report
from az_debug_info.settings import DebugInfoSettings

_LIST_RGS = "az_debug_info.azure_api.list_resource_groups"

SUBS = (
    Subscription("sub-1", "First", "Enabled"),
    Subscription("sub-2", "Second", "Enabled"),
    Subscription("sub-3", "Third", "Disabled"),
)


@pytest.fixture()
def settings() -> DebugInfoSettings:
    return DebugInfoSettings(_env_file=None)


def _context(settings, cloud, subscriptions=SUBS) -> AzureContext:
    return AzureContext(
        settings=settings,
        cloud=cloud,
        credential=MagicMock(),
        headers={"Authorization": "Bearer fake-token"},
        subscriptions=tuple(subscriptions),
    )


def _groups_for(_cloud, _headers, subscription_id: str) -> list[ResourceGroup]:
    if subscription_id == "sub-2":
        raise requests.HTTPError("403 Client Error: Forbidden")
    return [ResourceGroup(f"{subscription_id}-rg-a"), ResourceGroup(f"{subscription_id}-rg-b")]


class TestConnect:
    """Startup resolution of cloud, credential and subscriptions."""

    def test_builds_context(self, settings) -> None:
        with patch("az_debug_info.azure_api.list_subscriptions", return_value=list(SUBS)) as ls:
            ctx = connect(settings)
        assert ctx.cloud.name == "AzurePublicCloud"
        assert ctx.headers["Authorization"] == "Bearer fake-token"
        assert ctx.subscriptions == SUBS
        ls.assert_called_once_with(ctx.cloud, ctx.headers)

    def test_unknown_environment(self) -> None:
        with pytest.raises(LookupError):
            connect(DebugInfoSettings(azure_environment="Nowhere", _env_file=None))

    def test_credential_failure(self, settings, _mock_credential) -> None:
        from azure.core.exceptions import ClientAuthenticationError

        _mock_credential.return_value.get_token.side_effect = ClientAuthenticationError("no creds")
        with pytest.raises(CredentialError):
            connect(settings)

    def test_subscription_listing_failure(self, settings) -> None:
        with (
            patch(
                "az_debug_info.azure_api.list_subscriptions",
                side_effect=requests.ConnectionError("unreachable"),
            ),
            pytest.raises(requests.ConnectionError),
        ):
            connect(settings)


class TestRunReport:
    """Per-subscription enumeration."""

    def test_failing_subscription_is_skipped(self, settings, cloud, caplog) -> None:
        caplog.set_level(logging.INFO)
        with patch(_LIST_RGS, side_effect=_groups_for) as list_rgs:
            report = run_report(_context(settings, cloud))

        assert list_rgs.call_count == 3
        by_id = {inv.subscription.subscription_id: inv for inv in report.inventory}
        assert by_id["sub-2"].error is not None
        assert by_id["sub-2"].resource_groups == ()
        assert [g.name for g in by_id["sub-3"].resource_groups] == ["sub-3-rg-a", "sub-3-rg-b"]

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].fields == {"subscription": "sub-2"}
        assert caplog.records[-1].getMessage() == "report finished"

    def test_resource_groups_logged_with_subscription(self, settings, cloud, caplog) -> None:
        caplog.set_level(logging.INFO)
        with patch(_LIST_RGS, side_effect=_groups_for):
            run_report(_context(settings, cloud, SUBS[:1]))
        found = [r.fields for r in caplog.records if r.getMessage() == "found resourceGroup"]
        assert found == [
            {"subscription": "sub-1", "resourceGroup": "sub-1-rg-a"},
            {"subscription": "sub-1", "resourceGroup": "sub-1-rg-b"},
        ]

    def test_zero_subscriptions(self, settings, cloud, caplog) -> None:
        caplog.set_level(logging.INFO)
        with patch(_LIST_RGS) as list_rgs:
            report = run_report(_context(settings, cloud, ()))
        list_rgs.assert_not_called()
        assert report.inventory == ()
        assert "report finished" in [r.getMessage() for r in caplog.records]
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]

    def test_no_identity_still_enumerates(self, settings, cloud) -> None:
        with patch(_LIST_RGS, side_effect=_groups_for) as list_rgs:
            report = run_report(_context(settings, cloud))
        assert report.identity.fields == {}
        assert list_rgs.call_count == len(SUBS)

    def test_repeated_runs_are_identical(self, settings, cloud) -> None:
        ctx = _context(settings, cloud)
        with patch(_LIST_RGS, side_effect=_groups_for):
            first = run_report(ctx)
            second = run_report(ctx)
        assert first == second
