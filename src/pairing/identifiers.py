"""
Vendor SDK identifiers.

The appdb SDK is an opaque collaborator: every call answers with success or
failure plus a string payload. ``IdentifierProvider`` is the seam the rest of
the package talks to; ``ConfigIdentifierProvider`` backs it with values from
the ``sdk`` configuration section (usually environment variables).
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

from config.config import parse_optional_bool
from core.errors.exceptions import IdentifierError
from core.logging.utilities import mask_identifier

logger = logging.getLogger(__name__)

IDENTIFIERS_UNAVAILABLE_MESSAGE = "Failed to get required identifiers from appdb"


@dataclass(frozen=True)
class SdkResult:
    """Outcome of a single SDK call."""

    ok: bool
    value: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: str) -> "SdkResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "SdkResult":
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class InstallationIdentifiers:
    """The three identifiers the pairing endpoint needs."""

    persistent_customer_identifier: str
    persistent_device_identifier: str
    installation_uuid: str

    def masked(self) -> dict[str, str]:
        return {
            "customer_id": mask_identifier(self.persistent_customer_identifier),
            "device_id": mask_identifier(self.persistent_device_identifier),
            "installation_uuid": mask_identifier(self.installation_uuid),
        }


class IdentifierProvider(Protocol):
    """Protocol for the appdb SDK calls used by the pairing import."""

    def is_installed_via_appdb(self) -> bool:
        ...

    def get_persistent_customer_identifier(self) -> SdkResult:
        ...

    def get_persistent_device_identifier(self) -> SdkResult:
        ...

    def get_installation_uuid(self) -> SdkResult:
        ...

    def is_app_update_available(self) -> bool:
        ...

    def get_apple_bundle_identifier(self) -> SdkResult:
        ...

    def get_apple_app_group_identifier(self) -> SdkResult:
        ...

    def get_appdb_app_identifier(self) -> SdkResult:
        ...

    def get_alongside_identifier(self) -> SdkResult:
        ...


class ConfigIdentifierProvider:
    """IdentifierProvider backed by the ``sdk`` config section.

    Empty or missing values answer with ``SdkResult.failure``. When
    ``installed_via_appdb`` is not set explicitly, the app counts as installed
    via appdb exactly when all three pairing identifiers are present.
    """

    REQUIRED_KEYS = (
        "persistent_customer_identifier",
        "persistent_device_identifier",
        "installation_uuid",
    )

    def __init__(self, values: Mapping[str, Any]):
        self._values = dict(values)

    def _lookup(self, key: str) -> SdkResult:
        value = self._values.get(key)
        if value is None or str(value).strip() == "":
            return SdkResult.failure(f"{key} is not available")
        return SdkResult.success(str(value).strip())

    def is_installed_via_appdb(self) -> bool:
        flag = parse_optional_bool(self._values.get("installed_via_appdb"))
        if flag is not None:
            return flag
        return all(self._lookup(key).ok for key in self.REQUIRED_KEYS)

    def get_persistent_customer_identifier(self) -> SdkResult:
        return self._lookup("persistent_customer_identifier")

    def get_persistent_device_identifier(self) -> SdkResult:
        return self._lookup("persistent_device_identifier")

    def get_installation_uuid(self) -> SdkResult:
        return self._lookup("installation_uuid")

    def is_app_update_available(self) -> bool:
        return bool(parse_optional_bool(self._values.get("update_available")))

    def get_apple_bundle_identifier(self) -> SdkResult:
        return self._lookup("apple_bundle_identifier")

    def get_apple_app_group_identifier(self) -> SdkResult:
        return self._lookup("apple_app_group_identifier")

    def get_appdb_app_identifier(self) -> SdkResult:
        return self._lookup("appdb_app_identifier")

    def get_alongside_identifier(self) -> SdkResult:
        return self._lookup("alongside_identifier")


def fetch_identifiers(provider: IdentifierProvider) -> InstallationIdentifiers:
    """
    Collect the customer, device and installation identifiers.

    All three SDK calls are made even if an earlier one fails, so the error
    names every missing identifier.

    Raises:
        IdentifierError: If any identifier is unavailable
    """
    results = {
        "persistent_customer_identifier": provider.get_persistent_customer_identifier(),
        "persistent_device_identifier": provider.get_persistent_device_identifier(),
        "installation_uuid": provider.get_installation_uuid(),
    }

    missing = [name for name, result in results.items() if not result.ok or not result.value]
    if missing:
        logger.warning(
            "SDK identifiers unavailable",
            extra={
                "missing_identifiers": missing,
                "error_message": "; ".join(
                    results[name].error or f"{name} is empty" for name in missing
                ),
            },
        )
        raise IdentifierError(IDENTIFIERS_UNAVAILABLE_MESSAGE, missing=missing)

    identifiers = InstallationIdentifiers(
        persistent_customer_identifier=results["persistent_customer_identifier"].value,
        persistent_device_identifier=results["persistent_device_identifier"].value,
        installation_uuid=results["installation_uuid"].value,
    )
    logger.debug("SDK identifiers retrieved", extra=identifiers.masked())
    return identifiers


__all__ = [
    "SdkResult",
    "InstallationIdentifiers",
    "IdentifierProvider",
    "ConfigIdentifierProvider",
    "fetch_identifiers",
    "IDENTIFIERS_UNAVAILABLE_MESSAGE",
]
