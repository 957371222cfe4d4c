"""
Document Store Connection.

Motor (async MongoDB) client lifecycle with an endless fixed-delay
reconnect loop. Uses lazy initialization so importing this module never
touches the network.

Lifecycle:
    store = get_document_store()
    await store.connect()      # blocks until the first successful ping
    store.start_monitor()      # heartbeat; reconnects when the link drops
    ...
    await store.close()

Request handlers never talk to the client directly; repositories receive
a collection from store.collection(name) after wait_until_ready().
"""

import asyncio
import re
from collections.abc import Awaitable, Callable
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_never, wait_fixed

from worship_bff.core.exceptions import StorageConnectionError
from worship_bff.core.logging import get_logger
from worship_bff.core.resilience import log_retry

logger = get_logger(__name__)

_CREDENTIALS_RE = re.compile(r"//[^@/]+@")


def redact_uri(uri: str) -> str:
    """Hide credentials in a connection string before logging it."""
    return _CREDENTIALS_RE.sub("//***@", uri)


class DocumentStore:
    """
    Owns the Motor client and the readiness gate.

    Connection attempts retry forever with a fixed delay. The readiness
    event is set after the first successful ping and cleared while a lost
    connection is being re-established, so request handlers queue behind
    wait_until_ready() instead of failing.
    """

    def __init__(
        self,
        uri: str,
        default_name: str,
        retry_delay: float = 5.0,
        server_selection_timeout_ms: int = 5000,
        heartbeat_seconds: float = 2.0,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.uri = uri
        self.default_name = default_name
        self.retry_delay = retry_delay
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.heartbeat_seconds = heartbeat_seconds
        self._client_factory = client_factory
        self._sleep = sleep
        self._client: Any = None
        self._db: AsyncIOMotorDatabase | None = None
        self._ready = asyncio.Event()
        self._monitor_task: asyncio.Task | None = None

    @property
    def is_connected(self) -> bool:
        return self._ready.is_set()

    async def _attempt_connect(self) -> None:
        """
        Open a client and ping it once.

        SRV URIs are resolved while the client is constructed, so DNS
        failures surface from the factory as ConfigurationError.

        Raises:
            StorageConnectionError: On any driver error
        """
        client = None
        try:
            client = self._client_factory(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                heartbeatFrequencyMS=int(self.heartbeat_seconds * 1000),
            )
            await client.admin.command("ping")
        except PyMongoError as e:
            if client is not None:
                client.close()
            raise StorageConnectionError(f"Document store connection failed: {e}") from e

        self._client = client
        self._db = client.get_default_database(default=self.default_name)

    async def connect(self) -> None:
        """Connect, retrying every retry_delay seconds until it succeeds."""
        logger.info(
            "Connecting to document store",
            extra={"uri": redact_uri(self.uri)},
        )

        async for attempt in AsyncRetrying(
            wait=wait_fixed(self.retry_delay),
            stop=stop_never,
            retry=retry_if_exception_type(StorageConnectionError),
            before_sleep=log_retry,
            sleep=self._sleep,
            reraise=True,
        ):
            with attempt:
                await self._attempt_connect()

        self._ready.set()
        logger.info(
            "Document store connected",
            extra={"database": self._db.name if self._db is not None else None},
        )

    async def ping(self) -> bool:
        """Return True when the server answers a ping."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("Document store ping failed", extra={"error": str(e)})
            return False
        return True

    def start_monitor(self) -> None:
        """Start the heartbeat task that reconnects after a dropped connection."""
        if self._monitor_task is None or self._monitor_task.done():
            self._monitor_task = asyncio.create_task(self._monitor())

    async def _check_connection(self) -> None:
        if await self.ping():
            return

        logger.warning("Document store connection lost, reconnecting")
        self._ready.clear()
        self._close_client()
        await self.connect()

    async def _monitor(self) -> None:
        while True:
            await self._sleep(self.heartbeat_seconds)
            try:
                await self._check_connection()
            except Exception:
                logger.exception("Document store heartbeat failed")

    async def wait_until_ready(self) -> None:
        """Block until the store is connected."""
        await self._ready.wait()

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """
        Get a collection handle.

        Raises:
            StorageConnectionError: If called before the first connection
        """
        if self._db is None:
            raise StorageConnectionError()
        return self._db[name]

    def _close_client(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None

    async def close(self) -> None:
        """Stop the heartbeat and close the client."""
        if self._monitor_task is not None:
            self._monitor_task.cancel()
            try:
                await self._monitor_task
            except asyncio.CancelledError:
                pass
            self._monitor_task = None

        self._ready.clear()
        self._close_client()
        logger.info("Document store connection closed")


_store: DocumentStore | None = None


def _create_store() -> DocumentStore:
    from worship_bff.core.config import get_app_config, get_settings

    db_config = get_app_config().database
    return DocumentStore(
        uri=get_settings().mongodb_uri,
        default_name=db_config.default_name,
        retry_delay=db_config.retry_delay_seconds,
        server_selection_timeout_ms=db_config.server_selection_timeout_ms,
        heartbeat_seconds=db_config.heartbeat_seconds,
    )


def get_document_store() -> DocumentStore:
    """
    Get the process-wide document store, creating it on first use.

    Creating the store does not connect; the application lifespan calls
    connect() before the server accepts traffic.
    """
    global _store
    if _store is None:
        _store = _create_store()
    return _store
