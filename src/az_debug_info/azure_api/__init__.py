"""Azure ARM API helpers.

Every public function returns plain Python objects; nothing here keeps
module-level state, callers pass the cloud and headers explicitly.
"""

# -- Clouds ------------------------------------------------------------------
from az_debug_info.azure_api._clouds import AzureCloud, get_cloud  # noqa: F401

# -- Auth ---------------------------------------------------------------------
from az_debug_info.azure_api._auth import (  # noqa: F401
    CredentialError,
    build_credential,
    get_headers,
)

# -- Unverified token claims --------------------------------------------------
from az_debug_info.azure_api._claims import peek_claims  # noqa: F401

# -- Pagination ---------------------------------------------------------------
from az_debug_info.azure_api._pagination import paginate  # noqa: F401

# -- Discovery ----------------------------------------------------------------
from az_debug_info.azure_api.discovery import (  # noqa: F401
    RESOURCES_API_VERSION,
    SUBSCRIPTIONS_API_VERSION,
    ResourceGroup,
    Subscription,
    list_resource_groups,
    list_subscriptions,
)
