"""
Session bus client for mediapause.

Thin asyncio wrapper around dbus-fast's MessageBus that exposes the three
primitives the MPRIS layer needs: listing registered names, reading a
property, and invoking an argument-less method. Bus failures surface as
typed exceptions from mediapause.errors.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from dbus_fast import BusType, Message, MessageType
from dbus_fast.aio import MessageBus

from mediapause.errors import BusCallError, BusConnectionError

logger = logging.getLogger(__name__)

# The message bus daemon itself
DBUS_SERVICE = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"
DBUS_INTERFACE = "org.freedesktop.DBus"

PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"


class SessionBus:
    """
    Lazily connected handle to the user's session bus.

    The connection is opened on first use and reopened if it dropped or
    was made from a different event loop (e.g. a host that calls
    asyncio.run() more than once).

    Thread-safety: concurrent first uses from several coroutines share a
    single connection attempt via an asyncio lock.
    """

    def __init__(self, bus_type: BusType = BusType.SESSION) -> None:
        self._bus_type = bus_type
        self._bus: MessageBus | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._connect_lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None

    @property
    def connected(self) -> bool:
        """Check if an open connection is held."""
        return self._bus is not None and self._bus.connected

    async def __aenter__(self) -> SessionBus:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _get_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._connect_lock is None or self._lock_loop is not loop:
            self._connect_lock = asyncio.Lock()
            self._lock_loop = loop
        return self._connect_lock

    async def connect(self) -> MessageBus:
        """
        Return an open connection, connecting if needed.

        Raises:
            BusConnectionError: If the session bus cannot be reached.
        """
        loop = asyncio.get_running_loop()
        lock = self._get_lock()

        async with lock:
            if self._bus is not None and self._bus.connected and self._loop is loop:
                return self._bus

            if self._bus is not None:
                logger.debug("Dropping stale session bus connection")
                self._disconnect()

            try:
                self._bus = await MessageBus(bus_type=self._bus_type).connect()
            except Exception as e:
                self._bus = None
                raise BusConnectionError(f"Failed to connect to D-Bus session: {e}") from e

            self._loop = loop
            logger.debug("Connected to session bus as %s", self._bus.unique_name)
            return self._bus

    async def call(self, message: Message) -> Message:
        """
        Send a method call and wait for its reply.

        Args:
            message: The method call message.

        Returns:
            The METHOD_RETURN reply.

        Raises:
            BusConnectionError: If the session bus cannot be reached.
            BusCallError: If the call fails or the reply is an error.
        """
        bus = await self.connect()

        try:
            reply = await bus.call(message)
        except Exception as e:
            raise BusCallError(str(e) or type(e).__name__) from e

        if reply is None:
            raise BusCallError(f"No reply to {message.member}")

        if reply.message_type == MessageType.ERROR:
            detail = reply.body[0] if reply.body else ""
            raise BusCallError(str(detail), error_name=reply.error_name)

        return reply

    async def list_names(self) -> list[str]:
        """List every name currently registered on the bus, in bus order."""
        reply = await self.call(
            Message(
                destination=DBUS_SERVICE,
                path=DBUS_PATH,
                interface=DBUS_INTERFACE,
                member="ListNames",
            )
        )
        if not reply.body or not isinstance(reply.body[0], list):
            raise BusCallError("Malformed ListNames reply")
        return list(reply.body[0])

    async def get_property(
        self,
        destination: str,
        path: str,
        interface: str,
        name: str,
        *,
        properties_interface: str = PROPERTIES_INTERFACE,
    ) -> Any:
        """
        Read a property via org.freedesktop.DBus.Properties.Get.

        Returns:
            The raw reply payload, normally a dbus_fast.Variant.
        """
        reply = await self.call(
            Message(
                destination=destination,
                path=path,
                interface=properties_interface,
                member="Get",
                signature="ss",
                body=[interface, name],
            )
        )
        return reply.body[0] if reply.body else None

    async def call_method(
        self,
        destination: str,
        path: str,
        interface: str,
        member: str,
    ) -> None:
        """Invoke a method that takes no arguments, ignoring its return value."""
        await self.call(
            Message(
                destination=destination,
                path=path,
                interface=interface,
                member=member,
            )
        )

    def _disconnect(self) -> None:
        bus, self._bus = self._bus, None
        self._loop = None
        if bus is None:
            return
        try:
            bus.disconnect()
        except Exception as e:
            logger.debug("Error while disconnecting from session bus: %s", e)

    async def close(self) -> None:
        """Close the connection if one is open."""
        if self._bus is not None:
            logger.debug("Closing session bus connection")
        self._disconnect()
