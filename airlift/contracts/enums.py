"""Enumerations shared across all airlift contracts."""

from enum import Enum


class AircraftType(str, Enum):
    """Airlift platforms with reference profiles."""
    C17 = "C-17"
    C130 = "C-130"


class CargoCategory(str, Enum):
    """How a manifest line is handled by the solver."""
    ROLLING_STOCK = "ROLLING_STOCK"
    PALLETIZABLE = "PALLETIZABLE"
    PREBUILT_PALLET = "PREBUILT_PALLET"
    PAX = "PAX"


class Phase(str, Enum):
    """Shipment priority phase. ADVON moves before MAIN."""
    ADVON = "ADVON"
    MAIN = "MAIN"


class EnvelopeStatus(str, Enum):
    """Position of a CG relative to the certified envelope."""
    IN_ENVELOPE = "in_envelope"
    FORWARD_LIMIT = "forward_limit"
    AFT_LIMIT = "aft_limit"


class LateralSide(str, Enum):
    CENTER = "center"
    LEFT = "left"
    RIGHT = "right"


class PalletOrientation(str, Enum):
    """Which pallet side runs along the fuselage axis."""
    LENGTHWISE = "lengthwise"  # 108 in side along the axis
    CROSSWISE = "crosswise"  # 88 in side along the axis


class IssueSeverity(str, Enum):
    WARNING = "warning"
    ERROR = "error"
