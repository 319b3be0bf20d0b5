"""Tests for composite record codecs (Led, MatrixMap, Zone, Mode, Device)."""

import struct

import pytest

from openrgb_client.binary_reader import BinaryReader, BinaryWriter
from openrgb_client.errors import EncodeError, LengthMismatch, UnexpectedEndOfData
from openrgb_client.models import Color, Device, Led, MatrixMap, Mode, Zone, ZoneType
from openrgb_client.records import (
    read_colors,
    read_device,
    read_led,
    read_matrix_map,
    read_mode,
    read_zone,
    write_colors,
    write_device,
    write_led,
    write_matrix_map,
    write_mode,
    write_zone,
)


# =========================================================================
# Helpers
# =========================================================================

def _encode(write_fn, value) -> bytes:
    w = BinaryWriter()
    write_fn(w, value)
    return w.getvalue()


def _decode_all(read_fn, data: bytes):
    r = BinaryReader(data)
    value = read_fn(r)
    r.expect_end()
    return value


def _text(s: str) -> bytes:
    raw = s.encode('utf-8')
    return struct.pack('<H', len(raw)) + raw


def _zone_prefix(name="Fan", zone_type=1, leds_min=4, leds_max=4, leds_count=4) -> bytes:
    return _text(name) + struct.pack('<IIII', zone_type, leds_min, leds_max, leds_count)


# =========================================================================
# Colors / Led
# =========================================================================

class TestColors:

    def test_layout(self):
        data = _encode(write_colors, [Color(0x0000FF), Color(0xFF0000)])
        assert data == b'\x02\x00' + b'\xff\x00\x00\x00' + b'\x00\x00\xff\x00'

    def test_empty(self):
        assert _encode(write_colors, []) == b'\x00\x00'
        assert _decode_all(read_colors, b'\x00\x00') == []

    def test_plain_ints_accepted(self):
        assert _encode(write_colors, [7]) == _encode(write_colors, [Color(7)])

    def test_count_exceeds_data(self):
        with pytest.raises(UnexpectedEndOfData):
            read_colors(BinaryReader(b'\x03\x00' + b'\x00' * 8))


class TestLed:

    def test_layout(self):
        assert _encode(write_led, Led("Fan1", 7)) == b'\x04\x00Fan1\x07\x00\x00\x00'

    def test_round_trip_empty_name(self):
        led = Led(name="", value=0xDEADBEEF)
        assert _decode_all(read_led, _encode(write_led, led)) == led


# =========================================================================
# MatrixMap
# =========================================================================

class TestMatrixMap:

    def test_layout_width_first_no_count(self):
        data = _encode(write_matrix_map, MatrixMap(width=2, height=1, map=[5, 6]))
        assert data == struct.pack('<IIII', 2, 1, 5, 6)

    def test_round_trip(self):
        m = MatrixMap(width=4, height=2, map=list(range(8)))
        decoded = _decode_all(read_matrix_map, _encode(write_matrix_map, m))
        assert decoded == m
        assert len(decoded.map) == 8

    def test_map_size_must_match_dimensions(self):
        with pytest.raises(EncodeError):
            _encode(write_matrix_map, MatrixMap(width=2, height=2, map=[1, 2, 3]))

    def test_truncated_cells(self):
        data = struct.pack('<II', 4, 2) + b'\x00' * 12
        with pytest.raises(UnexpectedEndOfData):
            read_matrix_map(BinaryReader(data))

    def test_huge_dimensions_rejected_before_reading(self):
        data = struct.pack('<II', 0xFFFFFFFF, 0xFFFFFFFF)
        with pytest.raises(LengthMismatch):
            read_matrix_map(BinaryReader(data))


# =========================================================================
# Zone
# =========================================================================

class TestZone:

    def test_no_matrix_layout(self):
        zone = Zone("Fan", ZoneType.LINEAR, 4, 4, 4)
        assert _encode(write_zone, zone) == _zone_prefix() + b'\x00\x00'

    def test_zero_matrix_length_decodes_none(self):
        zone = _decode_all(read_zone, _zone_prefix() + b'\x00\x00')
        assert zone.matrix_map is None
        assert zone.name == "Fan"
        assert zone.leds_count == 4

    def test_matrix_byte_length(self):
        zone = Zone("Keys", ZoneType.MATRIX, 8, 8, 8, MatrixMap(4, 2, list(range(8))))
        data = _encode(write_zone, zone)
        prefix = _zone_prefix("Keys", 2, 8, 8, 8)
        (matrix_len,) = struct.unpack_from('<H', data, len(prefix))
        # width + height + 8 cells
        assert matrix_len == 4 * (2 + 8)
        assert len(data) == len(prefix) + 2 + matrix_len

    def test_matrix_presence(self):
        block = struct.pack('<II', 4, 2) + struct.pack('<8I', *range(8))
        data = _zone_prefix() + struct.pack('<H', len(block)) + block
        zone = _decode_all(read_zone, data)
        assert zone.matrix_map is not None
        assert (zone.matrix_map.width, zone.matrix_map.height) == (4, 2)
        assert len(zone.matrix_map.map) == 8

    def test_matrix_block_longer_than_map(self):
        block = struct.pack('<II', 1, 1) + struct.pack('<I', 0) + b'\x00' * 4
        data = _zone_prefix() + struct.pack('<H', len(block)) + block
        with pytest.raises(LengthMismatch):
            read_zone(BinaryReader(data))

    def test_matrix_block_shorter_than_map(self):
        block = struct.pack('<II', 2, 2) + struct.pack('<I', 0)
        data = _zone_prefix() + struct.pack('<H', len(block)) + block + b'\x00' * 12
        with pytest.raises(LengthMismatch):
            read_zone(BinaryReader(data))

    @pytest.mark.parametrize("zone", [
        Zone("", 0, 0, 0, 0),
        Zone("Strip", ZoneType.LINEAR, 0, 300, 144),
        Zone("Grid", ZoneType.MATRIX, 6, 6, 6, MatrixMap(3, 2, [0, 1, 2, 3, 4, 5])),
        Zone("Empty grid", ZoneType.MATRIX, 0, 0, 0, MatrixMap(0, 0, [])),
    ])
    def test_round_trip(self, zone):
        # A 0x0 map still encodes 8 bytes of dimensions, so it comes back present
        assert _decode_all(read_zone, _encode(write_zone, zone)) == zone


# =========================================================================
# Mode
# =========================================================================

class TestMode:

    def test_layout(self):
        mode = Mode("Static", value=-1, flags=2, speed_min=3, speed_max=4, colors_min=5,
                    colors_max=6, speed=7, direction=8, color_mode=9, colors=[Color(0xAA)])
        expected = (
            _text("Static")
            + struct.pack('<iIIIIIIII', -1, 2, 3, 4, 5, 6, 7, 8, 9)
            + b'\x01\x00' + struct.pack('<I', 0xAA)
        )
        assert _encode(write_mode, mode) == expected

    def test_round_trip(self):
        mode = Mode("Spectrum Cycle", value=4, flags=0x11, speed_max=10, speed=5)
        assert _decode_all(read_mode, _encode(write_mode, mode)) == mode

    def test_truncated(self):
        data = _encode(write_mode, Mode("Static", colors=[Color(1), Color(2)]))
        with pytest.raises(UnexpectedEndOfData):
            read_mode(BinaryReader(data[:-1]))


# =========================================================================
# Device
# =========================================================================

class TestDevice:

    def test_field_order(self, gpu_device):
        data = _encode(write_device, gpu_device)
        r = BinaryReader(data)
        assert r.read_u32() == 3
        assert [r.read_string() for _ in range(5)] == ["GPU", "", "", "", ""]
        assert r.read_u16() == 1       # mode count
        assert r.read_i32() == 0       # active mode
        assert read_mode(r).name == "Static"
        assert r.read_u16() == 1       # zone count
        assert read_zone(r).name == "Fan"
        assert r.read_u16() == 1       # led count
        assert read_led(r) == Led("Fan1", 0)
        assert read_colors(r) == [Color(0x0000FF)]
        r.expect_end()

    def test_round_trip(self, gpu_device, keyboard_device):
        for device in (gpu_device, keyboard_device):
            assert _decode_all(read_device, _encode(write_device, device)) == device

    def test_empty_collections(self):
        device = Device(name="Bare", active_mode=-1)
        decoded = _decode_all(read_device, _encode(write_device, device))
        assert decoded == device
        assert decoded.modes == decoded.zones == decoded.leds == decoded.colors == []

    def test_list_order_preserved(self, keyboard_device):
        decoded = _decode_all(read_device, _encode(write_device, keyboard_device))
        assert [led.name for led in decoded.leds] == [f"Key {i}" for i in range(8)]
        assert [m.name for m in decoded.modes] == ["Direct", "Breathing"]
        assert [z.name for z in decoded.zones] == ["Keys", "Logo"]

    def test_truncation_anywhere_fails(self, keyboard_device):
        data = _encode(write_device, keyboard_device)
        for cut in (1, 10, len(data) // 2, len(data) - 1):
            with pytest.raises(LengthMismatch):
                read_device(BinaryReader(data[:cut]))
