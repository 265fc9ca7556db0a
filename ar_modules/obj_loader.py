"""
OBJ Loader Module

Reads the vertices and faces of a Wavefront OBJ file so the model can be
drawn as a wireframe on the board.
"""

import numpy as np
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple


class ObjParseError(ValueError):
    """Raised for malformed vertex or face statements."""


@dataclass
class ObjModel:
    """Vertices (N, 3) and faces as 0-based vertex index lists."""

    vertices: np.ndarray
    faces: List[List[int]] = field(default_factory=list)
    name: str = ''

    def edges(self) -> List[Tuple[int, int]]:
        """Unique undirected edges of every face, each face closed."""
        edges = set()
        for face in self.faces:
            if len(face) < 2:
                continue
            for a, b in zip(face, face[1:] + face[:1]):
                if a != b:
                    edges.add((min(a, b), max(a, b)))
        return sorted(edges)


def _resolve_index(token: str, n_vertices: int, line_no: int) -> int:
    raw = token.split('/')[0]
    try:
        index = int(raw)
    except ValueError:
        raise ObjParseError(f"Line {line_no}: bad face index '{token}'")

    # OBJ indices are 1-based, negative ones count back from the last vertex
    if index > 0:
        resolved = index - 1
    elif index < 0:
        resolved = n_vertices + index
    else:
        raise ObjParseError(f"Line {line_no}: face index 0 is not valid")

    if not 0 <= resolved < n_vertices:
        raise ObjParseError(f"Line {line_no}: face index {index} out of range ({n_vertices} vertices)")
    return resolved


def load_obj(path, scale: float = 1.0) -> ObjModel:
    """
    Load vertices and faces from an OBJ file.

    Args:
        path: Path to the .obj file
        scale: Uniform scale applied to the vertices

    Returns:
        ObjModel with float32 vertices
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"OBJ file not found: {path}")

    vertices = []
    faces = []

    with path.open('r', encoding='utf-8', errors='replace') as handle:
        for line_no, line in enumerate(handle, 1):
            values = line.split()
            if not values or values[0].startswith('#'):
                continue

            if values[0] == 'v':
                if len(values) < 4:
                    raise ObjParseError(f"Line {line_no}: vertex needs 3 coordinates")
                try:
                    vertices.append([float(v) for v in values[1:4]])
                except ValueError:
                    raise ObjParseError(f"Line {line_no}: non-numeric vertex coordinate")
            elif values[0] == 'f':
                face = [_resolve_index(tok, len(vertices), line_no) for tok in values[1:]]
                if len(face) >= 2:
                    faces.append(face)

    verts = np.array(vertices, dtype=np.float32).reshape(-1, 3) * scale
    return ObjModel(verts, faces, path.stem)


def describe(model: ObjModel) -> str:
    """Points and connections listing, 1-based like the file."""
    lines = [f"Points ({len(model.vertices)}):"]
    for v in model.vertices:
        lines.append(", ".join(f"{c:.4f}" for c in v))
    lines.append("")
    lines.append(f"Connections ({len(model.faces)}):")
    for face in model.faces:
        lines.append(", ".join(str(i + 1) for i in face))
    return "\n".join(lines)
