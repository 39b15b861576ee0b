"""Service principal detection for diagnostic output.

Nothing here selects the credential used for ARM calls; that always comes
from :func:`az_debug_info.azure_api.build_credential`.  This module only
works out *who* the process is likely running as, so operators can see it
in the log.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass, field

import requests
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import (
    CredentialUnavailableError,
    ManagedIdentityCredential,
    WorkloadIdentityCredential,
)

from az_debug_info.azure_api import AzureCloud, CredentialError, peek_claims

logger = logging.getLogger(__name__)

IMDS_URL = "http://169.254.169.254/metadata/instance?api-version=2021-02-01"

# token claim -> log field
_CLAIM_FIELDS = {
    "oid": "objectid",
    "appid": "appid",
    "tid": "tenantid",
}

# environment variable -> log field
_ENV_FIELDS = {
    "AZURE_CLIENT_ID": "clientid",
    "AZURE_TENANT_ID": "tenantid",
}


@dataclass(frozen=True)
class AdvisoryIdentity:
    """Best-effort identity information, for logging only.

    ``source`` is ``"msi"`` when the fields come from a managed identity
    token, ``"env"`` when they come from service principal environment
    variables, and ``None`` when nothing was detected.
    """

    source: str | None = None
    fields: dict[str, str] = field(default_factory=dict)


def _workload_identity_configured() -> bool:
    return all(
        os.environ.get(name)
        for name in ("AZURE_FEDERATED_TOKEN_FILE", "AZURE_CLIENT_ID", "AZURE_TENANT_ID")
    )


def _imds_reachable() -> bool:
    """Return *True* if the instance metadata endpoint answers."""
    try:
        resp = requests.get(IMDS_URL, headers={"Metadata": "true"}, timeout=1)
    except requests.RequestException:
        logger.debug("IMDS endpoint not reachable")
        return False
    return resp.ok


def managed_identity_available(imds_probe: bool = True) -> bool:
    """Decide from the environment whether a managed identity can be used."""
    if _workload_identity_configured():
        return True
    if os.environ.get("IDENTITY_ENDPOINT") or os.environ.get("MSI_ENDPOINT"):
        return True
    return imds_probe and _imds_reachable()


def _managed_identity_credential(
    cloud: AzureCloud,
) -> WorkloadIdentityCredential | ManagedIdentityCredential:
    if _workload_identity_configured():
        return WorkloadIdentityCredential(authority=cloud.authority_host)
    client_id = os.environ.get("AZURE_CLIENT_ID") or None
    return ManagedIdentityCredential(client_id=client_id)


def fetch_managed_identity_token(cloud: AzureCloud) -> str | None:
    """Acquire a fresh managed identity token for the ARM scope of *cloud*.

    Returns ``None`` if the credential reports itself unavailable.  Any other
    failure, or a token that is already expired, raises
    :class:`CredentialError`.
    """
    # A new credential instance has an empty token cache.
    credential = _managed_identity_credential(cloud)
    azure_logger = logging.getLogger("azure")
    previous_level = azure_logger.level
    azure_logger.setLevel(logging.CRITICAL)
    try:
        token = credential.get_token(cloud.arm_scope)
    except CredentialUnavailableError as exc:
        logger.debug("Managed identity unavailable: %s", exc.message)
        return None
    except ClientAuthenticationError as exc:
        raise CredentialError(f"Managed identity token refresh failed: {exc.message}") from exc
    finally:
        azure_logger.setLevel(previous_level)

    if token.expires_on <= time.time():
        raise CredentialError("Managed identity returned an expired token")
    return token.token


def claims_to_fields(claims: dict[str, object]) -> dict[str, str]:
    """Map identity claims to log fields, skipping absent or non-string values."""
    fields: dict[str, str] = {}
    for claim, name in _CLAIM_FIELDS.items():
        value = claims.get(claim)
        if isinstance(value, str) and value:
            fields[name] = value
    return fields


def env_fields() -> dict[str, str]:
    """Return service principal log fields from ``AZURE_*`` variables."""
    return {name: os.environ[var] for var, name in _ENV_FIELDS.items() if os.environ.get(var)}


def detect_identity(cloud: AzureCloud, *, imds_probe: bool = True) -> AdvisoryIdentity:
    """Detect and log the service principal the process runs as."""
    logger.info("searching for ServicePrincipal information")

    if managed_identity_available(imds_probe):
        token = fetch_managed_identity_token(cloud)
        if token is not None:
            fields = claims_to_fields(peek_claims(token))
            logger.info("found MSI ServicePrincipal in auth token", extra={"fields": fields})
            return AdvisoryIdentity(source="msi", fields=fields)

    fields = env_fields()
    if fields:
        logger.info("using ServicePrincipal in ENV vars", extra={"fields": fields})
        return AdvisoryIdentity(source="env", fields=fields)

    logger.info("unable to detect ServicePrincipal")
    return AdvisoryIdentity()
