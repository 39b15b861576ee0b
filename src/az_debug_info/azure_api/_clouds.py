"""Azure cloud environments known by name."""

from __future__ import annotations

from dataclasses import dataclass

from azure.identity import AzureAuthorityHosts


@dataclass(frozen=True)
class AzureCloud:
    """Endpoints of one Azure cloud environment."""

    name: str
    resource_manager: str
    authority_host: str

    @property
    def arm_scope(self) -> str:
        return f"{self.resource_manager}/.default"


_PUBLIC = AzureCloud(
    name="AzurePublicCloud",
    resource_manager="https://management.azure.com",
    authority_host=AzureAuthorityHosts.AZURE_PUBLIC_CLOUD,
)
_CHINA = AzureCloud(
    name="AzureChinaCloud",
    resource_manager="https://management.chinacloudapi.cn",
    authority_host=AzureAuthorityHosts.AZURE_CHINA,
)
_US_GOVERNMENT = AzureCloud(
    name="AzureUSGovernmentCloud",
    resource_manager="https://management.usgovcloudapi.net",
    authority_host=AzureAuthorityHosts.AZURE_GOVERNMENT,
)
_GERMAN = AzureCloud(
    name="AzureGermanCloud",
    resource_manager="https://management.microsoftazure.de",
    authority_host="login.microsoftonline.de",
)

# Keys are upper-cased; lookups are case-insensitive.
_CLOUDS: dict[str, AzureCloud] = {
    "AZUREPUBLICCLOUD": _PUBLIC,
    "AZURECLOUD": _PUBLIC,
    "AZURECHINACLOUD": _CHINA,
    "AZUREUSGOVERNMENTCLOUD": _US_GOVERNMENT,
    "AZUREUSGOVERNMENT": _US_GOVERNMENT,
    "AZUREGERMANCLOUD": _GERMAN,
}


def get_cloud(name: str) -> AzureCloud:
    """Return the :class:`AzureCloud` registered under *name*.

    Raises :class:`LookupError` for unknown names.
    """
    cloud = _CLOUDS.get(name.strip().upper())
    if cloud is None:
        raise LookupError(f'Unknown Azure environment "{name}"')
    return cloud
