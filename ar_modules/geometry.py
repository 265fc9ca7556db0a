"""
Geometry Module

Builds the 3D point lists drawn on top of the chessboard: axes, cubes,
the house (walls, roof, door) and wireframes of loaded OBJ models.

Board convention: x runs along the columns, y is minus the row index and
z points out of the board towards the camera. One unit is one square.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))
from config import ARConfig, ShapeColors

Point3 = Tuple[float, float, float]
Color = Tuple[int, int, int]

# Edges of an 8-point box in cube_points / rect_prism_points order
BOX_EDGES = [
    (0, 1), (1, 2), (2, 3), (3, 0),
    (4, 5), (5, 6), (6, 7), (7, 4),
    (0, 4), (1, 5), (2, 6), (3, 7),
]

# Edges of the 6 roof points: back triangle, front triangle, ridges
ROOF_EDGES = [
    (0, 1), (1, 2), (2, 0),
    (3, 4), (4, 5), (5, 3),
    (0, 3), (1, 4), (2, 5),
]

DOOR_EDGES = [(0, 1), (1, 2), (2, 3), (3, 0)]


def axes_points(origin: Point3 = (0.0, 0.0, 0.0), scale: float = 1.0) -> List[Point3]:
    """Origin followed by the z, x and y axis tips."""
    xo, yo, zo = origin
    return [
        (xo, yo, zo),
        (xo, yo, zo + scale),
        (xo + scale, yo, zo),
        (xo, yo + scale, zo),
    ]


def rect_prism_points(origin: Point3, w: float, h: float, d: float) -> List[Point3]:
    """8 corners of a box hanging down (-y) from origin and rising in +z."""
    xo, yo, zo = origin
    corners = [
        (0, 0, 0), (1, 0, 0), (1, 0, 1), (0, 0, 1),
        (0, 1, 0), (1, 1, 0), (1, 1, 1), (0, 1, 1),
    ]
    return [(xo + w * a, yo - h * b, zo + d * c) for a, b, c in corners]


def cube_points(origin: Point3, scale: float) -> List[Point3]:
    return rect_prism_points(origin, scale, scale, scale)


def roof_points(origin: Point3, w: float, h: float, d: float) -> List[Point3]:
    """Back and front roof triangles, apex raised by h along +y."""
    xo, yo, zo = origin
    corners = [
        (0, 0, 0), (0.5, 1, 0), (1, 0, 0),
        (0, 0, 1), (0.5, 1, 1), (1, 0, 1),
    ]
    return [(xo + w * a, yo + h * b, zo + d * c) for a, b, c in corners]


def door_points(origin: Point3, w: float, h: float, d: float,
                knob: Tuple[float, float] = (0.2, 0.6)) -> List[Point3]:
    """Door frame on the z = d face, followed by the knob position."""
    xo, yo, zo = origin
    frame = [(0, 0), (0, 1), (1, 1), (1, 0)]
    points = [(xo + w * a, yo + h * b, zo + d) for a, b in frame]
    points.append((xo + w * knob[0], yo + h * knob[1], zo + d))
    return points


@dataclass
class Wireframe:
    """3D points plus the primitives that connect them."""

    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))
    segments: List[Tuple[int, int, Color, int]] = field(default_factory=list)
    arrows: List[Tuple[int, int, Color, int]] = field(default_factory=list)
    markers: List[Tuple[int, int, Color, int]] = field(default_factory=list)

    def __post_init__(self):
        self.points = np.asarray(self.points, dtype=np.float32).reshape(-1, 3)

    def __len__(self):
        return len(self.points)

    def add_points(self, points: Sequence[Point3]) -> int:
        """Append points, returning the index of the first one."""
        start = len(self.points)
        new = np.asarray(points, dtype=np.float32).reshape(-1, 3)
        self.points = np.vstack([self.points, new])
        return start

    def add_edges(self, start: int, edges, color: Color, thickness: int):
        for i, j in edges:
            self.segments.append((start + i, start + j, color, thickness))

    def extend(self, other: "Wireframe") -> "Wireframe":
        """Append another wireframe, re-indexing its primitives."""
        start = self.add_points(other.points)
        self.segments += [(start + i, start + j, c, t) for i, j, c, t in other.segments]
        self.arrows += [(start + i, start + j, c, t) for i, j, c, t in other.arrows]
        self.markers += [(start + i, r, c, t) for i, r, c, t in other.markers]
        return self


def build_axes(scale: float = None, config: dict = None) -> Wireframe:
    """Arrows from the board origin along x (red), y (green) and z (blue)."""
    config = config or ARConfig.AXES
    scale = config['SCALE'] if scale is None else scale
    thickness = config['THICKNESS']

    wf = Wireframe(axes_points((0.0, 0.0, 0.0), scale))
    wf.arrows = [
        (0, 2, ShapeColors.AXIS_X, thickness),
        (0, 3, ShapeColors.AXIS_Y, thickness),
        (0, 1, ShapeColors.AXIS_Z, thickness),
    ]
    return wf


def build_cube(origin: Point3 = None, scale: float = None, config: dict = None) -> Wireframe:
    config = config or ARConfig.CUBE
    origin = config['ORIGIN'] if origin is None else origin
    scale = config['SCALE'] if scale is None else scale

    wf = Wireframe(cube_points(origin, scale))
    wf.add_edges(0, BOX_EDGES, ShapeColors.CUBE, config['THICKNESS'])
    return wf


def build_house(center: Point3 = None, wall: Point3 = None,
                roof_height: float = None, config: dict = None) -> Wireframe:
    """
    House standing out of the board: walls as a box, a gabled roof and a
    door with a knob on the face nearest the camera.

    Point indices: 0-7 walls, 8-13 roof, 14-17 door frame, 18 knob.
    """
    config = config or ARConfig.HOUSE
    cx, cy, cz = config['CENTER'] if center is None else center
    w, h, d = config['WALL_SIZE'] if wall is None else wall
    roof_h = config['ROOF_HEIGHT'] if roof_height is None else roof_height
    frac = config['DOOR_FRACTION']
    thickness = config['THICKNESS']

    origin = (cx - 0.5 * w, cy + 0.5 * h, cz)
    wf = Wireframe()

    start = wf.add_points(rect_prism_points(origin, w, h, d))
    wf.add_edges(start, BOX_EDGES, ShapeColors.WALLS, thickness)

    start = wf.add_points(roof_points(origin, w, roof_h, d))
    wf.add_edges(start, ROOF_EDGES, ShapeColors.ROOF, thickness)

    door_origin = (cx - frac * w, origin[1] - h, cz)
    start = wf.add_points(door_points(door_origin, frac * w, frac * h, d, config['KNOB']))
    wf.add_edges(start, DOOR_EDGES, ShapeColors.DOOR, thickness)
    wf.markers.append((start + 4, config['KNOB_RADIUS'], ShapeColors.DOOR, config['KNOB_THICKNESS']))

    return wf


def build_model(model, offset: Point3 = None, config: dict = None) -> Wireframe:
    """Wireframe of an ObjModel placed at offset on the board."""
    config = config or ARConfig.MODEL
    offset = np.asarray(config['OFFSET'] if offset is None else offset, dtype=np.float32)

    wf = Wireframe(model.vertices + offset)
    wf.add_edges(0, model.edges(), ShapeColors.MODEL, config['THICKNESS'])
    return wf
