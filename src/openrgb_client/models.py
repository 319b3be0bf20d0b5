"""
OpenRGB models - plain data classes for controller data.

Every record is rebuilt from bytes on each decode.  Numeric fields are
kept as plain ints so any value the server sends survives a round trip;
the enums below are naming helpers for callers, not validators.
"""

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import List, Optional, Tuple

# Matrix map cell value for "no LED at this position"
NO_LED = 0xFFFFFFFF


# =============================================================================
# Enumerations (values from the OpenRGB SDK)
# =============================================================================

class ZoneType(IntEnum):
    SINGLE = 0
    LINEAR = 1
    MATRIX = 2


class DeviceType(IntEnum):
    MOTHERBOARD = 0
    DRAM = 1
    GPU = 2
    COOLER = 3
    LEDSTRIP = 4
    KEYBOARD = 5
    MOUSE = 6
    MOUSEMAT = 7
    HEADSET = 8
    HEADSET_STAND = 9
    GAMEPAD = 10
    LIGHT = 11
    SPEAKER = 12
    VIRTUAL = 13
    UNKNOWN = 14


class ModeFlag(IntFlag):
    HAS_SPEED = 1 << 0
    HAS_DIRECTION_LR = 1 << 1
    HAS_DIRECTION_UD = 1 << 2
    HAS_DIRECTION_HV = 1 << 3
    HAS_BRIGHTNESS = 1 << 4
    HAS_PER_LED_COLOR = 1 << 5
    HAS_MODE_SPECIFIC_COLOR = 1 << 6
    HAS_RANDOM_COLOR = 1 << 7


class ModeDirection(IntEnum):
    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3
    HORIZONTAL = 4
    VERTICAL = 5


class ColorMode(IntEnum):
    NONE = 0
    PER_LED = 1
    MODE_SPECIFIC = 2
    RANDOM = 3


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class Color:
    """One LED color as the packed u32 the server uses.

    Byte layout: R in the low byte, then G, then B.  The top byte is
    carried through untouched.
    """
    value: int = 0

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> 'Color':
        return cls((r & 0xFF) | ((g & 0xFF) << 8) | ((b & 0xFF) << 16))

    @property
    def r(self) -> int:
        return self.value & 0xFF

    @property
    def g(self) -> int:
        return (self.value >> 8) & 0xFF

    @property
    def b(self) -> int:
        return (self.value >> 16) & 0xFF

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def __int__(self) -> int:
        return self.value


@dataclass
class Led:
    """A single controllable LED. ``value`` is opaque vendor data."""
    name: str = ""
    value: int = 0


@dataclass
class MatrixMap:
    """Physical layout of a matrix zone.

    ``map`` is row-major and holds ``width * height`` LED indices, with
    ``NO_LED`` marking empty positions.
    """
    width: int
    height: int
    map: List[int] = field(default_factory=list)

    @property
    def size(self) -> int:
        return self.width * self.height

    def cell(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) outside {self.width}x{self.height} matrix")
        return self.map[y * self.width + x]


@dataclass
class Zone:
    name: str
    zone_type: int
    leds_min: int
    leds_max: int
    leds_count: int
    matrix_map: Optional[MatrixMap] = None


@dataclass
class Mode:
    """A lighting effect offered by a device.

    Attributes:
        value: Device-specific mode number (signed on the wire).
        flags: ``ModeFlag`` bits describing which knobs apply.
        colors: Mode-specific colors, bounded by colors_min/colors_max.
    """
    name: str
    value: int = 0
    flags: int = 0
    speed_min: int = 0
    speed_max: int = 0
    colors_min: int = 0
    colors_max: int = 0
    speed: int = 0
    direction: int = 0
    color_mode: int = 0
    colors: List[Color] = field(default_factory=list)

    def has_flag(self, flag: ModeFlag) -> bool:
        return bool(self.flags & flag)


@dataclass
class Device:
    """Full controller data for one RGB device."""
    name: str
    description: str = ""
    version: str = ""
    serial: str = ""
    location: str = ""
    device_type: int = DeviceType.UNKNOWN
    active_mode: int = -1  # -1: unknown
    leds: List[Led] = field(default_factory=list)
    zones: List[Zone] = field(default_factory=list)
    modes: List[Mode] = field(default_factory=list)
    colors: List[Color] = field(default_factory=list)

    @property
    def active(self) -> Optional[Mode]:
        """Active mode, or None when the index is unknown/out of range."""
        if 0 <= self.active_mode < len(self.modes):
            return self.modes[self.active_mode]
        return None
