"""OpenRGB SDK command ids.

The numeric values are fixed wire constants.  Decoding anything outside
this set is an error, never a silent default.
"""

from enum import IntEnum

from .errors import UnknownCommand


class Command(IntEnum):
    REQUEST_CONTROLLER_COUNT = 0
    REQUEST_CONTROLLER_DATA = 1
    SET_CLIENT_NAME = 50
    RESIZE_ZONE = 1000
    UPDATE_LEDS = 1050
    UPDATE_ZONE_LEDS = 1051
    UPDATE_SINGLE_LED = 1052
    SET_CUSTOM_MODE = 1100
    UPDATE_MODE = 1101


# Commands that conventionally go out with device id 0
CLIENT_SCOPED_COMMANDS = frozenset({
    Command.SET_CLIENT_NAME,
    Command.REQUEST_CONTROLLER_COUNT,
})

_BY_ID = {c.value: c for c in Command}


def to_id(command: Command) -> int:
    """Wire id for a command."""
    return int(command)


def from_id(command_id: int) -> Command:
    """Look up a command by wire id.

    Raises:
        UnknownCommand: If the id is not registered.
    """
    try:
        return _BY_ID[command_id]
    except KeyError:
        raise UnknownCommand(command_id) from None
