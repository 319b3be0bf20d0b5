"""
openrgb-client - OpenRGB SDK protocol client

Speaks the OpenRGB SDK wire protocol over a single TCP connection:
enumerate RGB devices (zones, LEDs, modes, matrix layouts) and push
colors and modes to them.

Usage:
    from openrgb_client import connect, Color

    with connect("my-script") as session:
        for i in range(session.get_device_count()):
            device = session.get_device(i)
            session.set_custom_mode(i)
            session.update_leds(i, [Color.from_rgb(255, 0, 0)] * len(device.leds))
"""

from openrgb_client.__version__ import __version__

from openrgb_client.command import Command, from_id, to_id
from openrgb_client.errors import (
    EncodeError,
    LengthMismatch,
    MalformedText,
    OpenRGBError,
    ProtocolMismatch,
    SessionClosed,
    TransportError,
    UnexpectedEndOfData,
    UnexpectedVariant,
    UnknownCommand,
)
from openrgb_client.models import (
    Color,
    ColorMode,
    Device,
    DeviceType,
    Led,
    MatrixMap,
    Mode,
    ModeDirection,
    ModeFlag,
    Zone,
    ZoneType,
)
from openrgb_client.packets import MAGIC, PacketHeader
from openrgb_client.session import Session, SessionState, connect
from openrgb_client.transport import StreamTransport, TcpTransport

__all__ = [
    # Version
    "__version__",
    # Session
    "connect",
    "Session",
    "SessionState",
    "StreamTransport",
    "TcpTransport",
    # Protocol
    "Command",
    "from_id",
    "to_id",
    "MAGIC",
    "PacketHeader",
    # Models
    "Color",
    "ColorMode",
    "Device",
    "DeviceType",
    "Led",
    "MatrixMap",
    "Mode",
    "ModeDirection",
    "ModeFlag",
    "Zone",
    "ZoneType",
    # Errors
    "OpenRGBError",
    "TransportError",
    "ProtocolMismatch",
    "UnknownCommand",
    "MalformedText",
    "LengthMismatch",
    "UnexpectedEndOfData",
    "UnexpectedVariant",
    "EncodeError",
    "SessionClosed",
]
