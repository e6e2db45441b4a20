"""Update availability and installation details reported by the appdb SDK."""

import logging
from dataclasses import dataclass

from config.config import DEFAULT_STORE_URL
from pairing.identifiers import IdentifierProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UpdateStatus:
    available: bool
    url: str | None = None


def check_for_update(
    provider: IdentifierProvider, store_url: str = DEFAULT_STORE_URL
) -> UpdateStatus:
    """Ask the SDK whether appdb has a newer build; ``url`` points at its store page."""
    available = provider.is_app_update_available()
    logger.info(
        "Update available on appdb" if available else "App is up to date",
        extra={"update_available": available, "store_url": store_url if available else None},
    )
    return UpdateStatus(available=available, url=store_url if available else None)


INSTALLATION_INFO_CALLS = {
    "bundle_id": "get_apple_bundle_identifier",
    "app_group": "get_apple_app_group_identifier",
    "appdb_app_id": "get_appdb_app_identifier",
    "alongside_id": "get_alongside_identifier",
}


def installation_info(provider: IdentifierProvider) -> dict[str, str]:
    """
    Collect the installation details the SDK can report.

    Calls that fail are left out of the result.
    """
    info = {}
    for key, method_name in INSTALLATION_INFO_CALLS.items():
        result = getattr(provider, method_name)()
        if result.ok and result.value is not None:
            info[key] = result.value
        else:
            logger.debug(f"SDK call {method_name} failed: {result.error}")
    return info


__all__ = ["UpdateStatus", "check_for_update", "installation_info"]
