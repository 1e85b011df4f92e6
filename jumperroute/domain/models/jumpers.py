"""Domain models for jumper components."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ...shared.exceptions import ValidationError
from .geometry import Point, RoutePoint


@dataclass(frozen=True)
class JumperDimensions:
    """Physical footprint dimensions in mm."""
    length: float  # pad center to pad center
    width: float
    pad_length: float  # along the jumper axis
    pad_width: float


JUMPER_0603 = JumperDimensions(length=1.65, width=0.95, pad_length=0.8, pad_width=0.95)
JUMPER_1206 = JumperDimensions(length=3.2, width=1.6, pad_length=0.6, pad_width=1.6)
# One internal pair of a 1206x4 resistor array, pads at -1.35mm and +1.35mm
JUMPER_1206X4_PAIR = JumperDimensions(length=2.7, width=0.5, pad_length=0.8, pad_width=0.5)

JUMPER_DIMENSIONS: Dict[str, JumperDimensions] = {
    "0603": JUMPER_0603,
    "1206": JUMPER_1206,
    "1206x4_pair": JUMPER_1206X4_PAIR,
}


def get_jumper_dimensions(footprint: str) -> JumperDimensions:
    """Look up footprint dimensions.
    
    Raises:
        ValidationError: If the footprint is unknown
    """
    try:
        return JUMPER_DIMENSIONS[footprint]
    except KeyError:
        raise ValidationError(
            f"Unknown jumper footprint: {footprint}",
            field="footprint", value=footprint
        ) from None


@dataclass(frozen=True)
class PrepatternJumper:
    """A candidate jumper placed before pathing."""
    jumper_id: str
    start: Point
    end: Point
    footprint: str
    off_board_connection_id: str
    
    @property
    def is_horizontal(self) -> bool:
        return abs(self.end.x - self.start.x) > abs(self.end.y - self.start.y)


@dataclass(frozen=True)
class Jumper:
    """A jumper threaded by a routed connection."""
    start: Point
    end: Point
    footprint: str = "1206x4_pair"
    route_type: str = "jumper"


@dataclass
class Obstacle:
    """A rectangular obstacle, e.g. a jumper pad."""
    center: Point
    width: float
    height: float
    layers: List[str] = field(default_factory=lambda: ["top"])
    connected_to: List[str] = field(default_factory=list)
    obstacle_id: Optional[str] = None
    off_board_connects_to: List[str] = field(default_factory=list)
    type: str = "rect"


@dataclass
class SrjJumper:
    """A finalized jumper component with its pads."""
    center: Point
    orientation: str
    width: float
    height: float
    pads: List[Obstacle] = field(default_factory=list)
    jumper_footprint: str = "1206x4"
    
    @property
    def is_used(self) -> bool:
        return any(pad.connected_to for pad in self.pads)


@dataclass
class HighDensityRouteWithJumpers:
    """A routed connection inside one node, possibly threading jumpers."""
    connection_name: str
    route: List[RoutePoint]
    trace_thickness: float
    jumpers: List[Jumper] = field(default_factory=list)
    root_connection_name: Optional[str] = None
