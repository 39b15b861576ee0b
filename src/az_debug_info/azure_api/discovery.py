"""Subscription and resource group discovery."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from az_debug_info.azure_api._clouds import AzureCloud
from az_debug_info.azure_api._pagination import paginate

logger = logging.getLogger(__name__)

SUBSCRIPTIONS_API_VERSION = "2022-12-01"
RESOURCES_API_VERSION = "2021-04-01"


@dataclass(frozen=True)
class Subscription:
    subscription_id: str
    display_name: str
    state: str | None = None


@dataclass(frozen=True)
class ResourceGroup:
    name: str
    location: str | None = None


def list_subscriptions(cloud: AzureCloud, headers: dict[str, str]) -> list[Subscription]:
    """Return every subscription visible to the caller.

    Disabled subscriptions are included; the list is sorted by display name
    (then ID) so that repeated runs print the same order.  Items without a
    ``subscriptionId`` are logged and skipped.
    """
    url = f"{cloud.resource_manager}/subscriptions?api-version={SUBSCRIPTIONS_API_VERSION}"
    subs: list[Subscription] = []
    for s in paginate(url, headers):
        sub_id = s.get("subscriptionId")
        if not sub_id:
            logger.warning("Skipping subscription entry without subscriptionId: %s", s)
            continue
        subs.append(
            Subscription(
                subscription_id=sub_id,
                display_name=s.get("displayName") or sub_id,
                state=s.get("state"),
            )
        )
    logger.debug("Listed %d subscriptions", len(subs))
    return sorted(subs, key=lambda s: (s.display_name.lower(), s.subscription_id))


def list_resource_groups(
    cloud: AzureCloud,
    headers: dict[str, str],
    subscription_id: str,
) -> list[ResourceGroup]:
    """Return the resource groups of *subscription_id*, in service order."""
    url = (
        f"{cloud.resource_manager}/subscriptions/{subscription_id}/resourcegroups"
        f"?api-version={RESOURCES_API_VERSION}"
    )
    groups: list[ResourceGroup] = []
    for rg in paginate(url, headers):
        if not rg.get("name"):
            logger.warning("Skipping resource group entry without name: %s", rg)
            continue
        groups.append(ResourceGroup(name=rg["name"], location=rg.get("location")))
    return groups
