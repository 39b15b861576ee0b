"""Authentication helpers for Azure ARM API calls."""

from __future__ import annotations

from azure.core.credentials import TokenCredential
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential

from az_debug_info.azure_api._clouds import AzureCloud


class CredentialError(RuntimeError):
    """No usable credential could be resolved from the environment."""


def build_credential(cloud: AzureCloud) -> DefaultAzureCredential:
    """Return the environment-driven credential chain for *cloud*."""
    return DefaultAzureCredential(authority=cloud.authority_host)


def get_headers(credential: TokenCredential, cloud: AzureCloud) -> dict[str, str]:
    """Return authorization headers for the ARM endpoint of *cloud*.

    Raises :class:`CredentialError` when no token can be obtained.
    """
    try:
        token = credential.get_token(cloud.arm_scope)
    except ClientAuthenticationError as exc:
        raise CredentialError(f"Unable to obtain an ARM token: {exc.message}") from exc
    return {
        "Authorization": f"Bearer {token.token}",
        "Content-Type": "application/json",
    }
