"""
Frame header and per-command payload codecs for the OpenRGB SDK protocol.

Every frame is a fixed 16-byte header followed by ``length`` body bytes::

    Bytes 0-3:   magic      (u32 LE, always 1111970383 / b'ORGB')
    Bytes 4-7:   device id  (u32 LE, 0 for client-scoped commands)
    Bytes 8-11:  command id (u32 LE)
    Bytes 12-15: body length (u32 LE)

Payload bodies:

    SET_CLIENT_NAME          raw UTF-8 name (framed only by the header)
    REQUEST_CONTROLLER_COUNT u32 count
    REQUEST_CONTROLLER_DATA  u32 inner length, Device
    UPDATE_LEDS              u32 inner length, u16 n, n x u32 color
    UPDATE_ZONE_LEDS         u32 inner length, u32 zone, u16 n, n x u32 color
    UPDATE_SINGLE_LED        u32 led, u32 color
    UPDATE_MODE              u32 inner length, u32 mode index, Mode
    RESIZE_ZONE              u32 zone, u32 new size
    SET_CUSTOM_MODE          (no body)

The inner length duplicates the header's body length minus the 4-byte
prefix itself.  The server sends it and expects it, so it is always
written and always checked against the header.

Codecs here never touch a stream; they turn payload objects into bytes
and bytes back into payload objects.
"""

import struct
from dataclasses import dataclass, field
from typing import ClassVar, Dict, List, Tuple, Type, Union

from .binary_reader import BinaryReader, BinaryWriter
from .command import Command, from_id, to_id
from .errors import (
    EncodeError,
    LengthMismatch,
    MalformedText,
    ProtocolMismatch,
    UnexpectedEndOfData,
)
from .models import Color, Device, Mode
from .records import read_colors, read_device, read_mode, write_colors, write_device, write_mode

# =========================================================================
# Constants
# =========================================================================

MAGIC = 1111970383  # b'ORGB' read as little-endian u32
HEADER_SIZE = 16
INNER_LENGTH_SIZE = 4

_HEADER = struct.Struct('<IIII')


# =========================================================================
# Header
# =========================================================================

@dataclass
class PacketHeader:
    device_id: int
    command: Command
    length: int
    magic: int = MAGIC

    def encode(self) -> bytes:
        try:
            return _HEADER.pack(self.magic, self.device_id, to_id(self.command), self.length)
        except struct.error as e:
            raise EncodeError(f"header field out of u32 range: {self}") from e

    @classmethod
    def decode(cls, data: bytes) -> 'PacketHeader':
        """Parse a 16-byte header.

        Magic is checked before the command id, so a garbage frame reports
        ProtocolMismatch rather than UnknownCommand.

        Raises:
            UnexpectedEndOfData: Fewer than 16 bytes given.
            ProtocolMismatch: Magic is not ``MAGIC``.
            UnknownCommand: Command id is not registered.
        """
        if len(data) < HEADER_SIZE:
            raise UnexpectedEndOfData(f"header needs {HEADER_SIZE} bytes, got {len(data)}")
        magic, device_id, command_id, length = _HEADER.unpack_from(data)
        if magic != MAGIC:
            raise ProtocolMismatch(magic)
        return cls(device_id=device_id, command=from_id(command_id), length=length, magic=magic)


# =========================================================================
# Inner length helpers
# =========================================================================

def _prefix_inner_length(writer: BinaryWriter) -> bytes:
    inner = writer.getvalue()
    out = BinaryWriter()
    out.write_u32(len(inner))
    out.write_bytes(inner)
    return out.getvalue()


def _open_inner_length(body: bytes) -> BinaryReader:
    """Reader positioned after a validated inner length prefix."""
    reader = BinaryReader(body)
    inner = reader.read_u32()
    expected = len(body) - INNER_LENGTH_SIZE
    if inner != expected:
        raise LengthMismatch(
            f"inner length {inner} disagrees with body length {len(body)} "
            f"(expected {expected})"
        )
    return reader


# =========================================================================
# Payloads
# =========================================================================

@dataclass
class ClientNamePacket:
    command: ClassVar[Command] = Command.SET_CLIENT_NAME
    name: str = ""

    def encode(self) -> bytes:
        try:
            return self.name.encode('utf-8')
        except UnicodeEncodeError as e:
            raise EncodeError(f"client name is not encodable as UTF-8: {e}") from e

    @classmethod
    def decode(cls, body: bytes) -> 'ClientNamePacket':
        try:
            return cls(name=bytes(body).decode('utf-8'))
        except UnicodeDecodeError as e:
            raise MalformedText(f"client name is not valid UTF-8: {e}") from e


@dataclass
class ControllerCountPacket:
    command: ClassVar[Command] = Command.REQUEST_CONTROLLER_COUNT
    count: int = 0

    def encode(self) -> bytes:
        writer = BinaryWriter()
        writer.write_u32(self.count)
        return writer.getvalue()

    @classmethod
    def decode(cls, body: bytes) -> 'ControllerCountPacket':
        reader = BinaryReader(body)
        count = reader.read_u32()
        reader.expect_end()
        return cls(count=count)


@dataclass
class ControllerDataPacket:
    command: ClassVar[Command] = Command.REQUEST_CONTROLLER_DATA
    device: Device

    def encode(self) -> bytes:
        writer = BinaryWriter()
        write_device(writer, self.device)
        return _prefix_inner_length(writer)

    @classmethod
    def decode(cls, body: bytes) -> 'ControllerDataPacket':
        reader = _open_inner_length(body)
        device = read_device(reader)
        reader.expect_end()
        return cls(device=device)


@dataclass
class UpdateLedsPacket:
    command: ClassVar[Command] = Command.UPDATE_LEDS
    colors: List[Color] = field(default_factory=list)

    def encode(self) -> bytes:
        writer = BinaryWriter()
        write_colors(writer, self.colors)
        return _prefix_inner_length(writer)

    @classmethod
    def decode(cls, body: bytes) -> 'UpdateLedsPacket':
        reader = _open_inner_length(body)
        colors = read_colors(reader)
        reader.expect_end()
        return cls(colors=colors)


@dataclass
class UpdateZoneLedsPacket:
    command: ClassVar[Command] = Command.UPDATE_ZONE_LEDS
    zone_id: int = 0
    colors: List[Color] = field(default_factory=list)

    def encode(self) -> bytes:
        writer = BinaryWriter()
        writer.write_u32(self.zone_id)
        write_colors(writer, self.colors)
        return _prefix_inner_length(writer)

    @classmethod
    def decode(cls, body: bytes) -> 'UpdateZoneLedsPacket':
        reader = _open_inner_length(body)
        zone_id = reader.read_u32()
        colors = read_colors(reader)
        reader.expect_end()
        return cls(zone_id=zone_id, colors=colors)


@dataclass
class UpdateSingleLedPacket:
    command: ClassVar[Command] = Command.UPDATE_SINGLE_LED
    led_id: int = 0
    color: Color = Color()

    def encode(self) -> bytes:
        writer = BinaryWriter()
        writer.write_u32(self.led_id)
        writer.write_u32(int(self.color))
        return writer.getvalue()

    @classmethod
    def decode(cls, body: bytes) -> 'UpdateSingleLedPacket':
        reader = BinaryReader(body)
        led_id = reader.read_u32()
        color = Color(reader.read_u32())
        reader.expect_end()
        return cls(led_id=led_id, color=color)


@dataclass
class UpdateModePacket:
    command: ClassVar[Command] = Command.UPDATE_MODE
    mode_id: int
    mode: Mode

    def encode(self) -> bytes:
        writer = BinaryWriter()
        writer.write_u32(self.mode_id)
        write_mode(writer, self.mode)
        return _prefix_inner_length(writer)

    @classmethod
    def decode(cls, body: bytes) -> 'UpdateModePacket':
        reader = _open_inner_length(body)
        mode_id = reader.read_u32()
        mode = read_mode(reader)
        reader.expect_end()
        return cls(mode_id=mode_id, mode=mode)


@dataclass
class ResizeZonePacket:
    command: ClassVar[Command] = Command.RESIZE_ZONE
    zone_id: int = 0
    new_size: int = 0

    def encode(self) -> bytes:
        writer = BinaryWriter()
        writer.write_u32(self.zone_id)
        writer.write_u32(self.new_size)
        return writer.getvalue()

    @classmethod
    def decode(cls, body: bytes) -> 'ResizeZonePacket':
        reader = BinaryReader(body)
        zone_id = reader.read_u32()
        new_size = reader.read_u32()
        reader.expect_end()
        return cls(zone_id=zone_id, new_size=new_size)


@dataclass
class CommandPacket:
    """A frame that is nothing but its header (body length 0)."""
    command: Command

    def encode(self) -> bytes:
        return b''


Packet = Union[
    ClientNamePacket,
    ControllerCountPacket,
    ControllerDataPacket,
    UpdateLedsPacket,
    UpdateZoneLedsPacket,
    UpdateSingleLedPacket,
    UpdateModePacket,
    ResizeZonePacket,
    CommandPacket,
]

# Command -> payload codec.  Together with BODYLESS_COMMANDS this covers
# every registered command.
PAYLOAD_TYPES: Dict[Command, Type] = {
    Command.SET_CLIENT_NAME: ClientNamePacket,
    Command.REQUEST_CONTROLLER_COUNT: ControllerCountPacket,
    Command.REQUEST_CONTROLLER_DATA: ControllerDataPacket,
    Command.UPDATE_LEDS: UpdateLedsPacket,
    Command.UPDATE_ZONE_LEDS: UpdateZoneLedsPacket,
    Command.UPDATE_SINGLE_LED: UpdateSingleLedPacket,
    Command.UPDATE_MODE: UpdateModePacket,
    Command.RESIZE_ZONE: ResizeZonePacket,
}

BODYLESS_COMMANDS = frozenset({Command.SET_CUSTOM_MODE})


# =========================================================================
# Dispatch
# =========================================================================

def decode_payload(command: Command, body: bytes) -> Packet:
    """Decode a frame body with the codec selected by its command.

    An empty body always decodes to ``CommandPacket``; request frames such
    as REQUEST_CONTROLLER_COUNT travel that way.
    """
    if not body:
        return CommandPacket(command)
    if command in BODYLESS_COMMANDS:
        raise LengthMismatch(f"{command.name} carries no body, got {len(body)} bytes")
    return PAYLOAD_TYPES[command].decode(body)


def encode_frame(payload: Packet, device_id: int = 0) -> bytes:
    """Header + body for one payload, ready for the wire."""
    body = payload.encode()
    header = PacketHeader(device_id=device_id, command=payload.command, length=len(body))
    return header.encode() + body


def decode_frame(data: bytes) -> Tuple[PacketHeader, Packet]:
    """Decode one complete in-memory frame.

    Raises:
        LengthMismatch: ``data`` is not exactly header + declared body.
    """
    header = PacketHeader.decode(data[:HEADER_SIZE])
    body = data[HEADER_SIZE:]
    if len(body) != header.length:
        raise LengthMismatch(
            f"header declares {header.length} body bytes, frame has {len(body)}"
        )
    return header, decode_payload(header.command, body)
