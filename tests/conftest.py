"""Shared fixtures: in-memory transport and sample controller data."""
import pytest

from openrgb_client.models import Color, Device, Led, MatrixMap, Mode, Zone, ZoneType
from openrgb_client.transport import StreamTransport


class MemoryTransport(StreamTransport):
    """StreamTransport backed by byte buffers.

    ``incoming`` is what the "server" will send; everything flushed by
    the client lands in ``sent`` (one entry per flush).
    """

    def __init__(self, incoming: bytes = b''):
        self.incoming = bytearray(incoming)
        self.sent = []
        self._pending = bytearray()
        self._open = False

    def feed(self, data: bytes) -> None:
        self.incoming += data

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def write(self, data: bytes) -> None:
        self._pending += data

    def flush(self) -> None:
        if self._pending:
            self.sent.append(bytes(self._pending))
            self._pending.clear()

    def read_exact(self, n: int) -> bytes:
        from openrgb_client.errors import TransportError
        if len(self.incoming) < n:
            raise TransportError(
                f"connection closed by peer after {len(self.incoming)} of {n} bytes"
            )
        chunk = bytes(self.incoming[:n])
        del self.incoming[:n]
        return chunk

    @property
    def is_open(self) -> bool:
        return self._open


@pytest.fixture
def memory_transport():
    t = MemoryTransport()
    t.open()
    return t


@pytest.fixture
def gpu_device() -> Device:
    """The 'GPU' controller: one mode, one fan zone, one LED, one color."""
    return Device(
        name="GPU",
        device_type=3,
        active_mode=0,
        modes=[Mode(name="Static", colors=[Color(0x00FF00), Color(0xFF0000)])],
        zones=[Zone(name="Fan", zone_type=ZoneType.LINEAR, leds_min=4, leds_max=4, leds_count=4)],
        leds=[Led(name="Fan1", value=0)],
        colors=[Color(0x0000FF)],
    )


@pytest.fixture
def keyboard_device() -> Device:
    """Richer controller with a matrix zone and several modes."""
    matrix = MatrixMap(width=4, height=2, map=[0, 1, 2, 3, 4, 5, 6, 0xFFFFFFFF])
    return Device(
        name="Keyboard",
        description="Mechanical keyboard",
        version="1.0.4",
        serial="SN-0042",
        location="HID: /dev/hidraw3",
        device_type=5,
        active_mode=1,
        modes=[
            Mode(name="Direct", value=0, flags=0x20, color_mode=1),
            Mode(name="Breathing", value=3, flags=0x51, speed_min=0, speed_max=4,
                 colors_min=1, colors_max=2, speed=2, direction=0, color_mode=2,
                 colors=[Color(0x112233)]),
        ],
        zones=[
            Zone(name="Keys", zone_type=ZoneType.MATRIX, leds_min=7, leds_max=7,
                 leds_count=7, matrix_map=matrix),
            Zone(name="Logo", zone_type=ZoneType.SINGLE, leds_min=1, leds_max=1, leds_count=1),
        ],
        leds=[Led(name=f"Key {i}", value=i) for i in range(8)],
        colors=[Color(i * 0x010101) for i in range(8)],
    )
