"""Controller number lookup for control change messages."""

from humidi.protocols.events import ControllerKind

SUSTAIN_CONTROLLER = 64

# Values at or above this threshold switch a pedal controller on
PEDAL_ON_THRESHOLD = 64

CONTROLLER_TABLE: dict[int, ControllerKind] = {
    SUSTAIN_CONTROLLER: ControllerKind.SUSTAIN,
}


def controller_for_number(control: int) -> ControllerKind | None:
    """
    Resolve a controller number to its semantic kind.

    Args:
        control: Controller number (first data byte of a control change)

    Returns:
        ControllerKind, or None if the controller has no handler
    """
    return CONTROLLER_TABLE.get(control)
