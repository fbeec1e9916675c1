"""Thin read-only access to MPRIS2 players on the session D-Bus."""

from __future__ import annotations

import logging
from typing import Any

import dbus
from dbus.bus import BusConnection

from nowplaying.errors import (
    BindError,
    BusConnectError,
    BusError,
    BusGoneError,
    PropertyReadError,
)
from nowplaying.mpris import MPRIS_PATH, PLAYER_IFACE


PROPS_IFACE = "org.freedesktop.DBus.Properties"

DBUS_NAME = "org.freedesktop.DBus"
DBUS_PATH = "/org/freedesktop/DBus"

DEFAULT_CALL_TIMEOUT = 2.0  # seconds

# Error names meaning the connection itself is unusable.
_GONE_ERRORS = frozenset(
    {
        "org.freedesktop.DBus.Error.Disconnected",
        "org.freedesktop.DBus.Error.NoServer",
    }
)

log = logging.getLogger(__name__)


def unwrap(value: Any) -> Any:
    """Convert dbus-python wrapper types into plain Python values."""
    if isinstance(value, dbus.Boolean):
        return bool(value)
    if isinstance(value, dict):
        return {unwrap(k): unwrap(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [unwrap(v) for v in value]
    if isinstance(value, str):
        return str(value)
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    return value


def _is_gone(conn: BusConnection, exc: dbus.DBusException) -> bool:
    if exc.get_dbus_name() in _GONE_ERRORS:
        return True
    try:
        return not conn.get_is_connected()
    except dbus.DBusException:
        return True


class PlayerProxy:
    """Properties proxy bound to one player service."""

    def __init__(
        self,
        conn: BusConnection,
        service: str,
        props: dbus.Interface,
        timeout: float,
    ) -> None:
        self.service = service
        self._conn = conn
        self._props = props
        self._timeout = timeout

    def get(self, name: str) -> Any:
        """Read a property of the MPRIS Player interface."""
        try:
            value = self._props.Get(PLAYER_IFACE, name, timeout=self._timeout)
        except dbus.DBusException as e:
            if _is_gone(self._conn, e):
                raise BusGoneError(str(e)) from e
            raise PropertyReadError(self.service, name, str(e)) from e
        return unwrap(value)

    def __repr__(self) -> str:
        return f"PlayerProxy({self.service!r})"


class BusClient:
    """
    Connect to the session bus and perform read-only calls on it.

    Nothing here retries: every failure is raised as a ``BusError`` subclass
    and retry policy is left to the caller.
    """

    def __init__(self, timeout: float = DEFAULT_CALL_TIMEOUT) -> None:
        self.timeout = timeout

    def connect(self) -> BusConnection:
        # A private connection can be dropped and replaced after the bus
        # goes away; the shared SessionBus() singleton cannot.
        try:
            conn = dbus.SessionBus(private=True)
        except dbus.DBusException as e:
            raise BusConnectError(str(e)) from e
        conn.set_exit_on_disconnect(False)
        return conn

    def disconnect(self, conn: BusConnection) -> None:
        try:
            conn.close()
        except dbus.DBusException as e:
            log.debug("Closing bus connection failed: %s", e)

    def list_names(self, conn: BusConnection) -> list[str]:
        try:
            names = conn.call_blocking(
                DBUS_NAME, DBUS_PATH, DBUS_NAME, "ListNames", "", (),
                timeout=self.timeout,
            )
        except dbus.DBusException as e:
            if _is_gone(conn, e):
                raise BusGoneError(str(e)) from e
            raise BusError(f"ListNames failed: {e}") from e
        return [str(n) for n in names]

    def get_property(
        self,
        conn: BusConnection,
        service: str,
        object_path: str,
        interface: str,
        name: str,
    ) -> Any:
        try:
            value = conn.call_blocking(
                service, object_path, PROPS_IFACE, "Get", "ss", (interface, name),
                timeout=self.timeout,
            )
        except dbus.DBusException as e:
            if _is_gone(conn, e):
                raise BusGoneError(str(e)) from e
            raise PropertyReadError(service, name, str(e)) from e
        return unwrap(value)

    def bind(
        self, conn: BusConnection, service: str, object_path: str = MPRIS_PATH
    ) -> PlayerProxy:
        """
        Bind a properties proxy to *service*.

        The proxy is pinned to the service's current owner, so a player that
        restarts under the same name has to be bound again.
        """
        # Resolve the owner ourselves: get_object would do it without a
        # timeout and try to activate a service that is not running.
        try:
            owner = conn.call_blocking(
                DBUS_NAME, DBUS_PATH, DBUS_NAME, "GetNameOwner", "s", (service,),
                timeout=self.timeout,
            )
            proxy = conn.get_object(str(owner), object_path, introspect=False)
        except dbus.DBusException as e:
            if _is_gone(conn, e):
                raise BusGoneError(str(e)) from e
            raise BindError(service, str(e)) from e
        props = dbus.Interface(proxy, dbus_interface=PROPS_IFACE)
        return PlayerProxy(conn, service, props, self.timeout)
