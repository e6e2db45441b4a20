"""
Pairing file import from appdb.

Straight-line flow with a uniform error shortcut:

    precondition -> identifiers -> POST get_pairing_file -> save -> progress

Every expected failure is a ``PairingError``; it is turned into an
``ImportResult(success=False, message=...)`` and mirrored onto the
``ImportState`` error fields. Nothing is retried.
"""

import inspect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Protocol

from core.errors.exceptions import PairingError, PreconditionError
from core.logging.context import set_log_context
from core.logging.setup import generate_trace_id
from core.logging.utilities import log_exception
from pairing.identifiers import IdentifierProvider, InstallationIdentifiers, fetch_identifiers
from pairing.progress import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_STEP,
    ImportState,
    animate_progress,
)
from pairing.storage import PairingFileStore

logger = logging.getLogger(__name__)

NOT_INSTALLED_MESSAGE = "App is not installed from appdb"
IMPORT_SUCCESS_MESSAGE = "Pairing file imported successfully"


class PairingFileClient(Protocol):
    async def get_pairing_file(self, identifiers: InstallationIdentifiers) -> str:
        ...


SavedHook = Callable[[Path], Awaitable[None] | None]


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import: a flag plus a message the user can read."""

    success: bool
    message: str
    path: Path | None = None


class PairingImporter:
    """Runs the appdb pairing file import against injected collaborators."""

    def __init__(
        self,
        provider: IdentifierProvider,
        client: PairingFileClient,
        store: PairingFileStore,
        state: ImportState | None = None,
        on_saved: SavedHook | None = None,
        progress_step: float = DEFAULT_STEP,
        progress_interval: float = DEFAULT_INTERVAL_SECONDS,
    ):
        self.provider = provider
        self.client = client
        self.store = store
        self.state = state or ImportState()
        self.on_saved = on_saved
        self.progress_step = progress_step
        self.progress_interval = progress_interval

    def _fail(self, error: PairingError) -> ImportResult:
        self.state.report_error(error.message)
        log_exception(
            logger,
            error,
            "Pairing file import failed",
            level=logging.WARNING,
            include_traceback=False,
        )
        return ImportResult(success=False, message=error.message)

    async def import_from_appdb(self) -> ImportResult:
        set_log_context(operation="import", trace_id=generate_trace_id())

        if not self.provider.is_installed_via_appdb():
            return self._fail(PreconditionError(NOT_INSTALLED_MESSAGE))

        self.state.is_importing_from_appdb = True

        try:
            identifiers = fetch_identifiers(self.provider)

            logger.info("Requesting pairing file from appdb", extra=identifiers.masked())
            try:
                contents = await self.client.get_pairing_file(identifiers)
            finally:
                self.state.is_importing_from_appdb = False

            path = self.store.save(contents)
        except PairingError as e:
            return self._fail(e)

        if self.on_saved is not None:
            outcome = self.on_saved(path)
            if inspect.isawaitable(outcome):
                await outcome

        await animate_progress(
            self.state,
            step=self.progress_step,
            interval=self.progress_interval,
        )

        logger.info("Pairing file imported", extra={"path": str(path)})
        return ImportResult(success=True, message=IMPORT_SUCCESS_MESSAGE, path=path)


async def fetch_and_store_pairing_file(
    provider: IdentifierProvider,
    client: PairingFileClient,
    store: PairingFileStore,
    **kwargs,
) -> ImportResult:
    """One-shot import; ``kwargs`` are passed to ``PairingImporter``."""
    importer = PairingImporter(provider, client, store, **kwargs)
    return await importer.import_from_appdb()


__all__ = [
    "ImportResult",
    "PairingImporter",
    "PairingFileClient",
    "fetch_and_store_pairing_file",
    "NOT_INSTALLED_MESSAGE",
    "IMPORT_SUCCESS_MESSAGE",
]
