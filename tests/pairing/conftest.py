"""Shared fixtures for pairing tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pairing.identifiers import ConfigIdentifierProvider, InstallationIdentifiers

SDK_VALUES = {
    "installed_via_appdb": "true",
    "persistent_customer_identifier": "cust-0001",
    "persistent_device_identifier": "dev-0002",
    "installation_uuid": "9F1C2D3E-0000-4A4A-8B8B-123456789ABC",
    "update_available": "false",
    "apple_bundle_identifier": "com.example.jit",
    "apple_app_group_identifier": "group.com.example.jit",
    "appdb_app_identifier": "1234",
    "alongside_identifier": "",
}


@pytest.fixture
def sdk_values():
    return dict(SDK_VALUES)


@pytest.fixture
def provider(sdk_values):
    return ConfigIdentifierProvider(sdk_values)


@pytest.fixture
def identifiers():
    return InstallationIdentifiers(
        persistent_customer_identifier=SDK_VALUES["persistent_customer_identifier"],
        persistent_device_identifier=SDK_VALUES["persistent_device_identifier"],
        installation_uuid=SDK_VALUES["installation_uuid"],
    )


@pytest.fixture
def make_session():
    """Build a mock aiohttp session whose post() answers with ``body``."""

    def _make(body: bytes = b"", status: int = 200, side_effect=None):
        mock_response = AsyncMock()
        mock_response.status = status
        mock_response.read = AsyncMock(return_value=body)
        mock_response.__aenter__ = AsyncMock(return_value=mock_response)
        mock_response.__aexit__ = AsyncMock(return_value=None)

        mock_session = MagicMock()
        mock_session.closed = False
        mock_session.close = AsyncMock()
        if side_effect is not None:
            mock_session.post = MagicMock(side_effect=side_effect)
        else:
            mock_session.post = MagicMock(return_value=mock_response)
        return mock_session

    return _make
