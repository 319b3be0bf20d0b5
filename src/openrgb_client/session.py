"""
Request/response session over one OpenRGB SDK connection.

The session is the only component that does I/O.  It writes a header
(plus body) and flushes, then, when the caller expects an answer, reads a
16-byte header followed by exactly ``length`` body bytes and hands the
body to the payload codec picked by the header's command.

The wire protocol has no correlation id: a response can only be matched
to the most recent unanswered request.  There is therefore no pipelining
and no recovery.  Any transport or decode failure closes the session;
reconnecting is the caller's job.

States::

    CONNECTED -> IDLE <-> AWAITING_RESPONSE
        any state -> CLOSED (close() or a fatal error)
"""
from __future__ import annotations

import logging
import threading
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple, Type, TypeVar, Union

from .command import Command
from .errors import OpenRGBError, SessionClosed, TransportError, UnexpectedVariant
from .models import Color, Device, Mode
from .packets import (
    HEADER_SIZE,
    ClientNamePacket,
    ControllerCountPacket,
    ControllerDataPacket,
    Packet,
    PacketHeader,
    ResizeZonePacket,
    UpdateLedsPacket,
    UpdateModePacket,
    UpdateSingleLedPacket,
    UpdateZoneLedsPacket,
    decode_payload,
)
from .transport import StreamTransport, TcpTransport

log = logging.getLogger(__name__)

P = TypeVar('P')
ColorLike = Union[Color, int]


class SessionState(Enum):
    CONNECTED = auto()
    IDLE = auto()
    AWAITING_RESPONSE = auto()
    CLOSED = auto()


def _as_color(value: ColorLike) -> Color:
    return value if isinstance(value, Color) else Color(int(value))


class Session:
    """Sequential OpenRGB SDK channel that owns its transport.

    ``send_command``/``send_packet``/``read_packet`` are the raw,
    caller-sequenced primitives; fire-and-forget commands never read.
    The device operations below them pair a request with its response
    under a lock, so a session shared between threads still keeps at most
    one request outstanding.
    """

    def __init__(self, transport: StreamTransport):
        self._transport = transport
        self._state = SessionState.CONNECTED
        self._lock = threading.Lock()

    # -- State -----------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_usable(self) -> bool:
        return self._state is not SessionState.CLOSED

    def _check_usable(self) -> None:
        if self._state is SessionState.CLOSED:
            raise SessionClosed("session is closed; reconnect to continue")

    def _invalidate(self, error: Exception) -> None:
        log.warning("OpenRGB session invalidated: %s", error)
        self._state = SessionState.CLOSED
        try:
            self._transport.close()
        except OSError as e:
            log.debug("Error closing transport: %s", e)

    def close(self) -> None:
        if self._state is SessionState.CLOSED:
            return
        self._state = SessionState.CLOSED
        self._transport.close()
        log.info("OpenRGB session closed")

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    # -- Raw frame I/O ---------------------------------------------------

    def _write_frame(self, header: PacketHeader, body: bytes) -> None:
        self._check_usable()
        raw_header = header.encode()
        try:
            self._transport.write(raw_header)
            if body:
                self._transport.write(body)
            self._transport.flush()
        except OSError as e:
            error = TransportError(str(e))
            self._invalidate(error)
            raise error from e
        except OpenRGBError as e:
            self._invalidate(e)
            raise
        self._state = SessionState.IDLE
        log.debug("-> %s device=%d length=%d",
                  header.command.name, header.device_id, header.length)

    def send_command(self, command: Command, device_id: int = 0) -> None:
        """Send a header-only frame (body length 0)."""
        self._write_frame(PacketHeader(device_id=device_id, command=command, length=0), b'')

    def send_packet(self, payload: Packet, device_id: int = 0) -> None:
        """Send one payload frame.

        Header and body are encoded before anything is written, so an
        EncodeError leaves the session untouched.
        """
        body = payload.encode()
        header = PacketHeader(device_id=device_id, command=payload.command, length=len(body))
        self._write_frame(header, body)

    def read_frame(self) -> Tuple[PacketHeader, Packet]:
        """Block for one full frame and decode it.

        An unknown command id fails before any body byte is read.
        """
        self._check_usable()
        self._state = SessionState.AWAITING_RESPONSE
        try:
            header = PacketHeader.decode(self._transport.read_exact(HEADER_SIZE))
            body = self._transport.read_exact(header.length) if header.length else b''
            packet = decode_payload(header.command, body)
        except OSError as e:
            error = TransportError(str(e))
            self._invalidate(error)
            raise error from e
        except OpenRGBError as e:
            self._invalidate(e)
            raise
        self._state = SessionState.IDLE
        log.debug("<- %s device=%d length=%d",
                  header.command.name, header.device_id, header.length)
        return header, packet

    def read_packet(self) -> Packet:
        return self.read_frame()[1]

    def read_expected(self, packet_type: Type[P]) -> P:
        """read_packet() that insists on one payload type."""
        packet = self.read_packet()
        if not isinstance(packet, packet_type):
            error = UnexpectedVariant(packet_type, packet)
            self._invalidate(error)
            raise error
        return packet

    # -- Device operations -----------------------------------------------

    def set_client_name(self, name: str) -> None:
        with self._lock:
            self.send_packet(ClientNamePacket(name))

    def get_device_count(self) -> int:
        with self._lock:
            self.send_command(Command.REQUEST_CONTROLLER_COUNT)
            return self.read_expected(ControllerCountPacket).count

    def get_device(self, device_id: int) -> Device:
        with self._lock:
            self.send_command(Command.REQUEST_CONTROLLER_DATA, device_id)
            return self.read_expected(ControllerDataPacket).device

    def get_devices(self) -> List[Device]:
        """Controller data for every device the server reports."""
        return [self.get_device(i) for i in range(self.get_device_count())]

    def set_custom_mode(self, device_id: int) -> None:
        with self._lock:
            self.send_command(Command.SET_CUSTOM_MODE, device_id)

    def update_leds(self, device_id: int, colors: Iterable[ColorLike]) -> None:
        packet = UpdateLedsPacket([_as_color(c) for c in colors])
        with self._lock:
            self.send_packet(packet, device_id)

    def update_zone_leds(self, device_id: int, zone_id: int,
                         colors: Iterable[ColorLike]) -> None:
        packet = UpdateZoneLedsPacket(zone_id, [_as_color(c) for c in colors])
        with self._lock:
            self.send_packet(packet, device_id)

    def update_single_led(self, device_id: int, led_id: int, color: ColorLike) -> None:
        with self._lock:
            self.send_packet(UpdateSingleLedPacket(led_id, _as_color(color)), device_id)

    def update_mode(self, device_id: int, mode_index: int, mode: Mode) -> None:
        with self._lock:
            self.send_packet(UpdateModePacket(mode_index, mode), device_id)

    def resize_zone(self, device_id: int, zone_id: int, new_size: int) -> None:
        with self._lock:
            self.send_packet(ResizeZonePacket(zone_id, new_size), device_id)


# =========================================================================
# Public API
# =========================================================================

def connect(
    name: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None,
    transport: Optional[StreamTransport] = None,
) -> Session:
    """Open a connection and announce the client name.

    Unset arguments come from ``conf.get_settings()``.  A ready-made
    ``transport`` bypasses host/port/timeout entirely.

    Returns:
        A Session in the IDLE state.
    """
    if name is None or (transport is None and (host is None or port is None or timeout is None)):
        from .conf import get_settings
        settings = get_settings()
        name = settings.client_name if name is None else name
        host = settings.host if host is None else host
        port = settings.port if port is None else port
        timeout = settings.timeout if timeout is None else timeout

    if transport is None:
        transport = TcpTransport(host, port, timeout)
    transport.open()

    session = Session(transport)
    try:
        session.set_client_name(name)
    except OpenRGBError:
        session.close()
        raise
    log.info("Connected to OpenRGB SDK server as %r", name)
    return session
