"""
appdb pairing file import.

Fetches the device pairing file from the appdb services API using the
identifiers reported by the appdb SDK and stores it as
``<documents>/pairingFile.plist``.

Modules:
    identifiers - SDK result type, provider protocol, config-backed provider
    schemas     - Request form and response envelope models
    api_client  - Async client for get_pairing_file
    storage     - Atomic pairing file store
    progress    - Observable import state and progress animation
    importer    - Import orchestration
    updates     - Update check and installation details
"""

from pairing.api_client import AppdbApiClient, AppdbApiError
from pairing.identifiers import (
    ConfigIdentifierProvider,
    IdentifierProvider,
    InstallationIdentifiers,
    SdkResult,
)
from pairing.importer import ImportResult, PairingImporter, fetch_and_store_pairing_file
from pairing.progress import ImportState, animate_progress
from pairing.storage import PairingFileStore
from pairing.updates import UpdateStatus, check_for_update, installation_info

__all__ = [
    "AppdbApiClient",
    "AppdbApiError",
    "ConfigIdentifierProvider",
    "IdentifierProvider",
    "InstallationIdentifiers",
    "SdkResult",
    "ImportResult",
    "PairingImporter",
    "fetch_and_store_pairing_file",
    "ImportState",
    "animate_progress",
    "PairingFileStore",
    "UpdateStatus",
    "check_for_update",
    "installation_info",
]
