"""Generator for tiled grids of 1206x4 jumper arrays.

The grid alternates channel cells and array cells along both axes, so a
``cols`` x ``rows`` pattern has ``2*cols+1`` x ``2*rows+1`` cells. Each array
holds four jumper pairs. A trace may hop over the array through a pair
(pad, through-jumper, pad) or, when ``regions_between_pads`` is set, pass
underneath the pairs across the gap between the pad columns.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from ...domain.models.geometry import Bounds, Point
from ...shared.exceptions import ValidationError
from .graph import JRegion, JumperGraph, JumperLocation

logger = logging.getLogger(__name__)

PAIRS_PER_ARRAY = 4
PAIR_PITCH = 0.8  # mm between pair centers
PAD_OFFSET = 1.35  # mm from array center to pad center
PAD_LENGTH = 0.8  # along the jumper axis
PAD_WIDTH = 0.5  # across the jumper axis

ARRAY_ALONG = 2 * PAD_OFFSET + PAD_LENGTH
ARRAY_ACROSS = (PAIRS_PER_ARRAY - 1) * PAIR_PITCH + PAD_WIDTH

PATTERN_SIZES: Dict[str, Tuple[int, int]] = {
    "single_1206x4": (1, 1),
    "1x2_1206x4": (1, 2),
    "2x2_1206x4": (2, 2),
    "3x1_1206x4": (3, 1),
    "3x2_1206x4": (3, 2),
    "3x3_1206x4": (3, 3),
    "4x4_1206x4": (4, 4),
    "6x4_1206x4": (6, 4),
    "8x4_1206x4": (8, 4),
}


def get_pattern_size(pattern_type: str) -> Tuple[int, int]:
    """Return ``(cols, rows)`` for a pattern name.
    
    Raises:
        ValidationError: If the pattern is unknown
    """
    try:
        return PATTERN_SIZES[pattern_type]
    except KeyError:
        raise ValidationError(
            f"Unknown jumper pattern: {pattern_type}",
            field="pattern_type", value=pattern_type
        ) from None


def array_size(orientation: str) -> Tuple[float, float]:
    """Width and height of one array for an orientation."""
    if orientation == "horizontal":
        return ARRAY_ALONG, ARRAY_ACROSS
    return ARRAY_ACROSS, ARRAY_ALONG


def minimum_grid_size(cols: int, rows: int, margin_x: float, margin_y: float,
                      outer_padding_x: float, outer_padding_y: float,
                      orientation: str) -> Tuple[float, float]:
    """Smallest width and height a grid can be generated at."""
    width, height = array_size(orientation)
    return (
        2 * outer_padding_x + cols * width + (cols + 1) * margin_x,
        2 * outer_padding_y + rows * height + (rows + 1) * margin_y,
    )


def _axis_edges(tiles: int, tile_size: float, margin: float, outer_padding: float,
                lo: float, hi: float) -> List[float]:
    min_size = 2 * outer_padding + tiles * tile_size + (tiles + 1) * margin
    available = hi - lo
    if available >= min_size:
        start = lo
        extra = (available - min_size) / 2
    else:
        start = (lo + hi) / 2 - min_size / 2
        extra = 0.0
    
    last = 2 * tiles
    edges = [start]
    for i in range(last + 1):
        if i % 2 == 1:
            size = tile_size
        elif i in (0, last):
            size = outer_padding + margin + extra
        else:
            size = margin
        edges.append(edges[-1] + size)
    return edges


def _spread(lo: float, hi: float, count: int) -> List[float]:
    return [lo + (hi - lo) * (2 * i + 1) / (2 * count) for i in range(count)]


@dataclass
class _Frame:
    """Maps (along, across) array coordinates onto x/y."""
    horizontal: bool
    
    def point(self, along: float, across: float) -> Point:
        return Point(along, across) if self.horizontal else Point(across, along)
    
    def bounds(self, along_lo: float, along_hi: float,
               across_lo: float, across_hi: float) -> Bounds:
        if self.horizontal:
            return Bounds(along_lo, across_lo, along_hi, across_hi)
        return Bounds(across_lo, along_lo, across_hi, along_hi)


def generate_jumper_x4_grid(cols: int, rows: int, margin_x: float, margin_y: float,
                            outer_padding_x: float, outer_padding_y: float,
                            parallel_traces_under_jumper_count: int,
                            inner_col_channel_point_count: int,
                            inner_row_channel_point_count: int,
                            outer_channel_x_point_count: int,
                            outer_channel_y_point_count: int,
                            regions_between_pads: bool, orientation: str,
                            bounds: Bounds) -> JumperGraph:
    """Generate the region/port graph for a grid of jumper arrays.
    
    Args:
        cols, rows: Number of arrays along x and y
        margin_x, margin_y: Channel width between arrays
        outer_padding_x, outer_padding_y: Extra channel width at the border
        parallel_traces_under_jumper_count: Ports on each side of an under-body region
        inner_col_channel_point_count: Ports across inner channel columns
        inner_row_channel_point_count: Ports across inner channel rows
        outer_channel_x_point_count: Ports across the outer channel columns
        outer_channel_y_point_count: Ports across the outer channel rows
        regions_between_pads: Whether traces may pass under the jumpers
        orientation: "horizontal" or "vertical" jumper axis
        bounds: Area to fill; slack widens the outer channels
        
    Returns:
        JumperGraph with regions, ports and one location per jumper pair
    """
    if cols <= 0 or rows <= 0:
        raise ValidationError("Grid needs at least one column and row",
                              field="cols/rows", value=(cols, rows))
    if orientation not in ("horizontal", "vertical"):
        raise ValidationError(f"Unknown orientation: {orientation}",
                              field="orientation", value=orientation)
    
    frame = _Frame(horizontal=orientation == "horizontal")
    tile_w, tile_h = array_size(orientation)
    x_edges = _axis_edges(cols, tile_w, margin_x, outer_padding_x, bounds.min_x, bounds.max_x)
    y_edges = _axis_edges(rows, tile_h, margin_y, outer_padding_y, bounds.min_y, bounds.max_y)
    last_col = 2 * cols
    last_row = 2 * rows
    
    graph = JumperGraph()
    channels: Dict[Tuple[int, int], JRegion] = {}
    
    for r in range(last_row + 1):
        for c in range(last_col + 1):
            if c % 2 == 1 and r % 2 == 1:
                continue
            channels[(c, r)] = graph.add_region(JRegion(
                region_id=f"channel_{c}_{r}",
                bounds=Bounds(x_edges[c], y_edges[r], x_edges[c + 1], y_edges[r + 1])
            ))
    
    for (c, r), region in channels.items():
        right = channels.get((c + 1, r))
        if right is not None:
            count = outer_channel_y_point_count if r in (0, last_row) else inner_row_channel_point_count
            for y in _spread(y_edges[r], y_edges[r + 1], count):
                graph.add_port(Point(x_edges[c + 1], y), region, right)
        above = channels.get((c, r + 1))
        if above is not None:
            count = outer_channel_x_point_count if c in (0, last_col) else inner_col_channel_point_count
            for x in _spread(x_edges[c], x_edges[c + 1], count):
                graph.add_port(Point(x, y_edges[r + 1]), region, above)
    
    for r in range(1, last_row, 2):
        for c in range(1, last_col, 2):
            cell = Bounds(x_edges[c], y_edges[r], x_edges[c + 1], y_edges[r + 1])
            if frame.horizontal:
                neighbours = (channels[(c - 1, r)], channels[(c + 1, r)],
                              channels[(c, r - 1)], channels[(c, r + 1)])
                along0, across0 = cell.min_x, cell.min_y
            else:
                neighbours = (channels[(c, r - 1)], channels[(c, r + 1)],
                              channels[(c - 1, r)], channels[(c + 1, r)])
                along0, across0 = cell.min_y, cell.min_x
            _add_array(graph, frame, f"array_{c // 2}_{r // 2}", along0, across0,
                       neighbours, regions_between_pads,
                       parallel_traces_under_jumper_count, orientation)
    
    logger.debug(f"Generated {cols}x{rows} {orientation} jumper grid: "
                 f"{len(graph.regions)} regions, {len(graph.ports)} ports")
    return graph


def _add_array(graph: JumperGraph, frame: _Frame, array_id: str,
               along0: float, across0: float,
               neighbours: Tuple[JRegion, JRegion, JRegion, JRegion],
               regions_between_pads: bool, under_count: int, orientation: str):
    before_along, after_along, before_across, after_across = neighbours
    center_along = along0 + ARRAY_ALONG / 2
    half_pad = PAD_LENGTH / 2
    
    for k in range(PAIRS_PER_ARRAY):
        pair_across = across0 + PAD_WIDTH / 2 + k * PAIR_PITCH
        across_lo = pair_across - PAD_WIDTH / 2
        across_hi = pair_across + PAD_WIDTH / 2
        start_along = center_along - PAD_OFFSET
        end_along = center_along + PAD_OFFSET
        
        pad_start = graph.add_region(JRegion(
            region_id=f"{array_id}_pair{k}_pad_start",
            bounds=frame.bounds(start_along - half_pad, start_along + half_pad, across_lo, across_hi),
            is_pad=True
        ))
        pad_end = graph.add_region(JRegion(
            region_id=f"{array_id}_pair{k}_pad_end",
            bounds=frame.bounds(end_along - half_pad, end_along + half_pad, across_lo, across_hi),
            is_pad=True
        ))
        through = graph.add_region(JRegion(
            region_id=f"{array_id}_pair{k}_through",
            bounds=frame.bounds(start_along, end_along, across_lo, across_hi),
            is_through_jumper=True
        ))
        
        graph.add_port(frame.point(start_along - half_pad, pair_across), before_along, pad_start)
        graph.add_port(pad_start.center, pad_start, through)
        graph.add_port(pad_end.center, through, pad_end)
        graph.add_port(frame.point(end_along + half_pad, pair_across), pad_end, after_along)
        
        graph.jumper_locations.append(JumperLocation(
            center=frame.point(center_along, pair_across),
            orientation=orientation,
            pad_regions=[pad_start, pad_end]
        ))
    
    if not regions_between_pads:
        return
    
    gap_lo = center_along - PAD_OFFSET + half_pad
    gap_hi = center_along + PAD_OFFSET - half_pad
    under = graph.add_region(JRegion(
        region_id=f"{array_id}_under",
        bounds=frame.bounds(gap_lo, gap_hi, across0, across0 + ARRAY_ACROSS),
        is_under_jumper=True
    ))
    for along in _spread(gap_lo, gap_hi, under_count):
        graph.add_port(frame.point(along, across0), before_across, under)
        graph.add_port(frame.point(along, across0 + ARRAY_ACROSS), under, after_across)
