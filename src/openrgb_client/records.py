"""
Encoders/decoders for the composite records inside controller data.

Wire layout (all integers little-endian, text = u16 length + UTF-8)::

    Led:        text name, u32 value
    MatrixMap:  u32 width, u32 height, width*height x u32 cells (row-major)
    Zone:       text name, u32 type, u32 leds_min, u32 leds_max,
                u32 leds_count, u16 matrix_len, matrix_len bytes MatrixMap
    Mode:       text name, i32 value, u32 flags, u32 speed_min,
                u32 speed_max, u32 colors_min, u32 colors_max, u32 speed,
                u32 direction, u32 color_mode, u16 n, n x u32 color
    Device:     u32 device_type, text name, text description, text version,
                text serial, text location,
                u16 n_modes, i32 active_mode, n_modes x Mode,
                u16 n_zones, n_zones x Zone,
                u16 n_leds, n_leds x Led,
                u16 n_colors, n_colors x u32 color

Collections are framed by element count, except the zone's matrix map
which is framed by byte length (0 = no matrix).  Both conventions are
what the server speaks and must not be unified.
"""

from typing import List

from .binary_reader import BinaryReader, BinaryWriter
from .errors import EncodeError, LengthMismatch, UnexpectedEndOfData
from .models import Color, Device, Led, MatrixMap, Mode, Zone


# =========================================================================
# Colors
# =========================================================================

def write_colors(writer: BinaryWriter, colors: List[Color]) -> None:
    writer.write_count(len(colors))
    for color in colors:
        writer.write_u32(int(color))


def read_colors(reader: BinaryReader) -> List[Color]:
    count = reader.read_u16()
    return [Color(reader.read_u32()) for _ in range(count)]


# =========================================================================
# Led
# =========================================================================

def write_led(writer: BinaryWriter, led: Led) -> None:
    writer.write_string(led.name)
    writer.write_u32(led.value)


def read_led(reader: BinaryReader) -> Led:
    name = reader.read_string()
    value = reader.read_u32()
    return Led(name=name, value=value)


# =========================================================================
# MatrixMap
# =========================================================================

def write_matrix_map(writer: BinaryWriter, matrix: MatrixMap) -> None:
    if len(matrix.map) != matrix.size:
        raise EncodeError(
            f"matrix map has {len(matrix.map)} cells, "
            f"expected {matrix.width}x{matrix.height}={matrix.size}"
        )
    writer.write_u32(matrix.width)
    writer.write_u32(matrix.height)
    for cell in matrix.map:
        writer.write_u32(cell)


def read_matrix_map(reader: BinaryReader) -> MatrixMap:
    width = reader.read_u32()
    height = reader.read_u32()
    # Cell count comes from the dimensions, not from a count field
    size = width * height
    if not reader.has_bytes(size * 4):
        raise UnexpectedEndOfData(
            f"{width}x{height} matrix needs {size * 4} bytes, "
            f"{reader.remaining()} left"
        )
    cells = [reader.read_u32() for _ in range(size)]
    return MatrixMap(width=width, height=height, map=cells)


# =========================================================================
# Zone
# =========================================================================

def write_zone(writer: BinaryWriter, zone: Zone) -> None:
    writer.write_string(zone.name)
    writer.write_u32(zone.zone_type)
    writer.write_u32(zone.leds_min)
    writer.write_u32(zone.leds_max)
    writer.write_u32(zone.leds_count)

    block = BinaryWriter()
    if zone.matrix_map is not None:
        write_matrix_map(block, zone.matrix_map)
    if len(block) > 0xFFFF:
        raise EncodeError(f"matrix map of {len(block)} bytes exceeds u16 length")
    writer.write_u16(len(block))
    writer.write_bytes(block.getvalue())


def read_zone(reader: BinaryReader) -> Zone:
    name = reader.read_string()
    zone_type = reader.read_u32()
    leds_min = reader.read_u32()
    leds_max = reader.read_u32()
    leds_count = reader.read_u32()

    matrix_len = reader.read_u16()
    matrix_map = None
    if matrix_len > 0:
        sub = BinaryReader(reader.read_bytes(matrix_len))
        matrix_map = read_matrix_map(sub)
        if sub.remaining():
            raise LengthMismatch(
                f"zone {name!r}: matrix block declared {matrix_len} bytes, "
                f"map used {sub.pos}"
            )

    return Zone(
        name=name,
        zone_type=zone_type,
        leds_min=leds_min,
        leds_max=leds_max,
        leds_count=leds_count,
        matrix_map=matrix_map,
    )


# =========================================================================
# Mode
# =========================================================================

def write_mode(writer: BinaryWriter, mode: Mode) -> None:
    writer.write_string(mode.name)
    writer.write_i32(mode.value)
    writer.write_u32(mode.flags)
    writer.write_u32(mode.speed_min)
    writer.write_u32(mode.speed_max)
    writer.write_u32(mode.colors_min)
    writer.write_u32(mode.colors_max)
    writer.write_u32(mode.speed)
    writer.write_u32(mode.direction)
    writer.write_u32(mode.color_mode)
    write_colors(writer, mode.colors)


def read_mode(reader: BinaryReader) -> Mode:
    return Mode(
        name=reader.read_string(),
        value=reader.read_i32(),
        flags=reader.read_u32(),
        speed_min=reader.read_u32(),
        speed_max=reader.read_u32(),
        colors_min=reader.read_u32(),
        colors_max=reader.read_u32(),
        speed=reader.read_u32(),
        direction=reader.read_u32(),
        color_mode=reader.read_u32(),
        colors=read_colors(reader),
    )


# =========================================================================
# Device
# =========================================================================

def write_device(writer: BinaryWriter, device: Device) -> None:
    writer.write_u32(device.device_type)
    writer.write_string(device.name)
    writer.write_string(device.description)
    writer.write_string(device.version)
    writer.write_string(device.serial)
    writer.write_string(device.location)

    writer.write_count(len(device.modes))
    writer.write_i32(device.active_mode)
    for mode in device.modes:
        write_mode(writer, mode)

    writer.write_count(len(device.zones))
    for zone in device.zones:
        write_zone(writer, zone)

    writer.write_count(len(device.leds))
    for led in device.leds:
        write_led(writer, led)

    write_colors(writer, device.colors)


def read_device(reader: BinaryReader) -> Device:
    device_type = reader.read_u32()
    name = reader.read_string()
    description = reader.read_string()
    version = reader.read_string()
    serial = reader.read_string()
    location = reader.read_string()

    mode_count = reader.read_u16()
    active_mode = reader.read_i32()
    modes = [read_mode(reader) for _ in range(mode_count)]

    zone_count = reader.read_u16()
    zones = [read_zone(reader) for _ in range(zone_count)]

    led_count = reader.read_u16()
    leds = [read_led(reader) for _ in range(led_count)]

    colors = read_colors(reader)

    return Device(
        name=name,
        description=description,
        version=version,
        serial=serial,
        location=location,
        device_type=device_type,
        active_mode=active_mode,
        leds=leds,
        zones=zones,
        modes=modes,
        colors=colors,
    )
