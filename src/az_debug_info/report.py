"""Azure access report: connection setup and inventory enumeration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from azure.core.credentials import TokenCredential

from az_debug_info import azure_api
from az_debug_info.azure_api import AzureCloud, ResourceGroup, Subscription
from az_debug_info.identity import AdvisoryIdentity, detect_identity
from az_debug_info.settings import DebugInfoSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AzureContext:
    """Everything resolved at startup and shared by the report."""

    settings: DebugInfoSettings
    cloud: AzureCloud
    credential: TokenCredential
    headers: dict[str, str]
    subscriptions: tuple[Subscription, ...]


@dataclass(frozen=True)
class SubscriptionInventory:
    subscription: Subscription
    resource_groups: tuple[ResourceGroup, ...] = ()
    error: str | None = None


@dataclass(frozen=True)
class Report:
    identity: AdvisoryIdentity
    inventory: tuple[SubscriptionInventory, ...]


def connect(settings: DebugInfoSettings) -> AzureContext:
    """Resolve the cloud, the credential and the visible subscriptions.

    Every failure here is fatal and propagates to the caller: an unknown
    environment raises :class:`LookupError`, a missing credential raises
    :class:`~az_debug_info.azure_api.CredentialError`, and a failed
    subscription listing raises the underlying ``requests`` error.
    """
    cloud = azure_api.get_cloud(settings.azure_environment)
    credential = azure_api.build_credential(cloud)
    headers = azure_api.get_headers(credential, cloud)
    subscriptions = azure_api.list_subscriptions(cloud, headers)
    return AzureContext(
        settings=settings,
        cloud=cloud,
        credential=credential,
        headers=headers,
        subscriptions=tuple(subscriptions),
    )


def _inventory_subscription(ctx: AzureContext, subscription: Subscription) -> SubscriptionInventory:
    fields = {"subscription": subscription.subscription_id}
    logger.info('found subscription "%s"', subscription.display_name, extra={"fields": fields})

    try:
        groups = azure_api.list_resource_groups(
            ctx.cloud, ctx.headers, subscription.subscription_id
        )
    except Exception as exc:
        logger.error("listing resource groups failed: %s", exc, extra={"fields": fields})
        return SubscriptionInventory(subscription=subscription, error=str(exc))

    for group in groups:
        logger.info(
            "found resourceGroup",
            extra={"fields": {**fields, "resourceGroup": group.name}},
        )
    return SubscriptionInventory(subscription=subscription, resource_groups=tuple(groups))


def run_report(ctx: AzureContext) -> Report:
    """Log identity and inventory information for every subscription.

    A subscription whose resource groups cannot be listed is logged and
    skipped; the others are still processed.
    """
    logger.info("starting access report")
    logger.info('running in Azure environment "%s"', ctx.cloud.name)

    identity = detect_identity(ctx.cloud, imds_probe=ctx.settings.azure_imds_probe)

    logger.info("starting Azure access report")
    inventory = tuple(_inventory_subscription(ctx, sub) for sub in ctx.subscriptions)

    logger.info("report finished")
    return Report(identity=identity, inventory=inventory)
