"""
Pydantic models for the get_pairing_file request and response envelope.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class PairingFileRequest(BaseModel):
    """Form fields posted to get_pairing_file."""

    brand: str = "appdb"
    lang: str = "en"
    persistent_customer_identifier: str = Field(..., min_length=1)
    persistent_device_identifier: str = Field(..., min_length=1)
    installation_uuid: str = Field(..., min_length=1)

    def to_form(self) -> list[tuple[str, str]]:
        """Return form fields in wire order."""
        return [
            ("brand", self.brand),
            ("lang", self.lang),
            ("persistent_customer_identifier", self.persistent_customer_identifier),
            ("persistent_device_identifier", self.persistent_device_identifier),
            ("installation_uuid", self.installation_uuid),
        ]


class ApiErrorEntry(BaseModel):
    """One entry of the ``errors`` list."""

    model_config = ConfigDict(extra="allow")

    translated: str | None = None


class PairingFileResponse(BaseModel):
    """
    Response envelope.

    Success: {"success": true, "data": "<plist text>"}
    Failure: {"errors": [{"translated": "<message>"}]}

    Fields are kept loose so unexpected shapes fall through to the
    "unknown error" branch instead of failing validation.
    """

    model_config = ConfigDict(extra="allow")

    success: Any = False
    data: Any = None
    errors: Any = None

    @property
    def pairing_data(self) -> str | None:
        if self.success is True and isinstance(self.data, str):
            return self.data
        return None

    @property
    def error_count(self) -> int:
        return len(self.errors) if isinstance(self.errors, list) else 0

    @property
    def first_error_message(self) -> str | None:
        """``translated`` of the first error, if it is a string."""
        if not self.error_count or not isinstance(self.errors[0], dict):
            return None
        try:
            entry = ApiErrorEntry.model_validate(self.errors[0])
        except ValidationError:
            return None
        return entry.translated
