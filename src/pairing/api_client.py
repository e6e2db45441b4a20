"""appdb services API client for pairing file retrieval."""

import asyncio
import json
import logging

import aiohttp

from core.errors.exceptions import PairingError, classify_http_status
from core.logging.context import get_log_context
from core.types import ErrorCategory
from pairing.identifiers import InstallationIdentifiers
from pairing.schemas import PairingFileRequest, PairingFileResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.dbservices.to/v1.7"
PAIRING_FILE_ENDPOINT = "get_pairing_file/"

NO_DATA_MESSAGE = "No data received from server"
PARSE_FAILURE_MESSAGE = "Failed to parse server response"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class AppdbApiError(PairingError):
    """Failure talking to the appdb services API.

    ``message`` is the text shown to the user; for server-reported errors it
    is the server's translated message verbatim.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, cause, context)
        self.status_code = status_code
        self.category = category


def _category_for_status(status: int | None, default: ErrorCategory) -> ErrorCategory:
    """Status-based category for non-2xx responses, ``default`` otherwise."""
    if status is None or 200 <= status < 300:
        return default
    return classify_http_status(status)


def parse_pairing_response(body: bytes, status: int | None = None) -> str:
    """
    Decode the get_pairing_file envelope and return the pairing file text.

    The envelope decides success, not the HTTP status.

    Raises:
        AppdbApiError: For empty bodies, undecodable JSON, server-reported
            errors and any other unexpected envelope
    """
    if not body:
        raise AppdbApiError(
            NO_DATA_MESSAGE,
            status_code=status,
            category=_category_for_status(status, ErrorCategory.TRANSIENT),
        )

    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise AppdbApiError(
            PARSE_FAILURE_MESSAGE,
            status_code=status,
            category=_category_for_status(status, ErrorCategory.PERMANENT),
            cause=e,
        ) from e

    if not isinstance(payload, dict):
        raise AppdbApiError(
            UNKNOWN_ERROR_MESSAGE,
            status_code=status,
            category=_category_for_status(status, ErrorCategory.UNKNOWN),
            context={"payload_type": type(payload).__name__},
        )

    response = PairingFileResponse.model_validate(payload)

    pairing_data = response.pairing_data
    if pairing_data is not None:
        return pairing_data

    translated = response.first_error_message
    if translated is not None:
        raise AppdbApiError(
            translated,
            status_code=status,
            category=_category_for_status(status, ErrorCategory.PERMANENT),
            context={"api_errors": response.error_count},
        )

    raise AppdbApiError(
        UNKNOWN_ERROR_MESSAGE,
        status_code=status,
        category=_category_for_status(status, ErrorCategory.UNKNOWN),
    )


class AppdbApiClient:
    """Async client for the appdb services API.

    Makes exactly one request per call; nothing is retried.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30,
        brand: str = "appdb",
        lang: str = "en",
        session: aiohttp.ClientSession | None = None,
    ):
        self.base_url = base_url.rstrip("/") if base_url else ""

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"AppdbApiClient base_url must start with http:// or https://, got: {self.base_url!r}"
            )

        self.timeout_seconds = timeout_seconds
        self.brand = brand
        self.lang = lang

        self._session = session
        self._owns_session = session is None
        self._closed = False

        logger.debug(
            "AppdbApiClient initialized",
            extra={"api_url": self.base_url, "timeout_seconds": self.timeout_seconds},
        )

    async def __aenter__(self) -> "AppdbApiClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._closed:
            raise RuntimeError("AppdbApiClient is closed, cannot create new session")
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        self._closed = True
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            await asyncio.sleep(0)
        self._session = None

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def _post_form(
        self, endpoint: str, form: list[tuple[str, str]]
    ) -> tuple[int, bytes]:
        """POST a form-encoded body and return (status, raw body)."""
        session = await self._ensure_session()
        url = self._url(endpoint)
        ctx = {k: v for k, v in get_log_context().items() if v}

        logger.debug(
            "API request starting",
            extra={**ctx, "api_endpoint": endpoint, "api_method": "POST", "api_url": url},
        )

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        try:
            async with session.post(
                url,
                data=form,
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
            ) as response:
                body = await response.read()
                status = response.status
        except asyncio.TimeoutError as e:
            duration = loop.time() - start_time
            logger.warning(
                "API request timeout",
                extra={
                    **ctx,
                    "api_endpoint": endpoint,
                    "api_method": "POST",
                    "timeout_seconds": self.timeout_seconds,
                    "duration_ms": duration * 1000,
                    "error_category": ErrorCategory.TRANSIENT.value,
                },
            )
            raise AppdbApiError(
                f"Network error: request timed out after {self.timeout_seconds:g}s",
                category=ErrorCategory.TRANSIENT,
                cause=e,
            ) from e
        except aiohttp.ClientError as e:
            duration = loop.time() - start_time
            logger.warning(
                "API connection error",
                extra={
                    **ctx,
                    "api_endpoint": endpoint,
                    "api_method": "POST",
                    "duration_ms": duration * 1000,
                    "error_category": ErrorCategory.TRANSIENT.value,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise AppdbApiError(
                f"Network error: {e}",
                category=ErrorCategory.TRANSIENT,
                cause=e,
            ) from e

        duration = loop.time() - start_time
        log_level = logging.INFO if duration > 2.0 else logging.DEBUG
        logger.log(
            log_level,
            "Slow API request" if duration > 2.0 else "API request completed",
            extra={
                **ctx,
                "api_endpoint": endpoint,
                "api_method": "POST",
                "http_status": status,
                "response_bytes": len(body),
                "duration_ms": duration * 1000,
            },
        )
        return status, body

    async def get_pairing_file(self, identifiers: InstallationIdentifiers) -> str:
        """
        Request the pairing file for this installation.

        Args:
            identifiers: Customer, device and installation identifiers

        Returns:
            Pairing file contents (plist text)

        Raises:
            AppdbApiError: On network failure or any non-success envelope
        """
        request = PairingFileRequest(
            brand=self.brand,
            lang=self.lang,
            persistent_customer_identifier=identifiers.persistent_customer_identifier,
            persistent_device_identifier=identifiers.persistent_device_identifier,
            installation_uuid=identifiers.installation_uuid,
        )
        status, body = await self._post_form(PAIRING_FILE_ENDPOINT, request.to_form())

        try:
            return parse_pairing_response(body, status)
        except AppdbApiError as e:
            logger.warning(
                "Pairing file request rejected",
                extra={
                    "api_endpoint": PAIRING_FILE_ENDPOINT,
                    "http_status": status,
                    "error_category": e.category.value,
                    "error_message": e.message,
                },
            )
            raise


__all__ = [
    "AppdbApiClient",
    "AppdbApiError",
    "parse_pairing_response",
    "DEFAULT_BASE_URL",
    "PAIRING_FILE_ENDPOINT",
]
