"""
Visualization utilities for the AR demos.
Drawing of projected wireframes plus the labelling and grid helpers used by
the live status banner and the offline tools.
"""

import cv2
import numpy as np
from typing import List, Tuple, Optional

from .geometry import Wireframe

# Points projected further out than this are not drawn
MAX_PIXEL = 1e6


def _to_pixel(point: np.ndarray) -> Optional[Tuple[int, int]]:
    if not np.all(np.isfinite(point)) or np.any(np.abs(point) > MAX_PIXEL):
        return None
    return int(round(float(point[0]))), int(round(float(point[1])))


def draw_wireframe(img: np.ndarray,
                   image_points: np.ndarray,
                   wireframe: Wireframe) -> np.ndarray:
    """
    Draw a projected wireframe.

    Args:
        img: Input image
        image_points: (N, 2) projections of wireframe.points
        wireframe: Primitives indexing into image_points

    Returns:
        Image with segments, arrows and markers drawn
    """
    vis = img.copy()
    pixels = [_to_pixel(p) for p in np.asarray(image_points).reshape(-1, 2)]

    for i, j, color, thickness in wireframe.segments:
        if pixels[i] is None or pixels[j] is None:
            continue
        cv2.line(vis, pixels[i], pixels[j], color, thickness)

    for i, j, color, thickness in wireframe.arrows:
        if pixels[i] is None or pixels[j] is None:
            continue
        cv2.arrowedLine(vis, pixels[i], pixels[j], color, thickness)

    for i, radius, color, thickness in wireframe.markers:
        if pixels[i] is None:
            continue
        cv2.circle(vis, pixels[i], radius, color, thickness)

    return vis


def add_label_to_image(img: np.ndarray,
                       text: str,
                       color: Tuple[int, int, int] = (255, 255, 255),
                       bg_color: Tuple[int, int, int] = (0, 0, 0),
                       position: str = 'top') -> np.ndarray:
    """
    Add a labeled banner to an image.

    Args:
        img: Input image (BGR or grayscale)
        text: Label text
        color: Text color
        bg_color: Background color
        position: 'top' or 'bottom'

    Returns:
        Image with label added
    """
    if len(img.shape) == 2:
        vis = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    else:
        vis = img.copy()

    h, w = vis.shape[:2]
    font_scale = w / 1200.0
    thickness = max(1, int(w / 600.0))
    bar_h = int(h * 0.06)

    if position == 'top':
        y_start, y_end = 0, bar_h
        text_y = int(bar_h * 0.7)
    else:
        y_start, y_end = h - bar_h, h
        text_y = h - int(bar_h * 0.3)

    cv2.rectangle(vis, (0, y_start), (w, y_end), bg_color, -1)
    cv2.putText(vis, text, (10, text_y), cv2.FONT_HERSHEY_SIMPLEX,
                font_scale, color, thickness, cv2.LINE_AA)

    return vis


def create_grid_visualization(images: List[np.ndarray],
                              labels: Optional[List[str]] = None,
                              grid_size: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """
    Create a grid visualization from multiple images.

    Images are resized to the first image's size before stacking.
    """
    if not images:
        raise ValueError("No images provided")

    n = len(images)

    if grid_size is None:
        cols = int(np.ceil(np.sqrt(n)))
        rows = int(np.ceil(n / cols))
    else:
        rows, cols = grid_size

    h, w = images[0].shape[:2]
    tiles = []
    for img in images:
        if len(img.shape) == 2:
            img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
        if img.shape[:2] != (h, w):
            img = cv2.resize(img, (w, h))
        tiles.append(img)

    if labels:
        tiles = [add_label_to_image(img, label)
                 for img, label in zip(tiles, labels)] + tiles[len(labels):]

    while len(tiles) < rows * cols:
        tiles.append(np.zeros((h, w, 3), dtype=np.uint8))

    image_rows = []
    for r in range(rows):
        row_images = tiles[r * cols:(r + 1) * cols]
        if row_images:
            image_rows.append(np.hstack(row_images))

    return np.vstack(image_rows)


def dim_image(img: np.ndarray, factor: float = 0.3) -> np.ndarray:
    """Dim an image by a factor for background visualization."""
    return (img.astype(float) * factor).astype(np.uint8)
