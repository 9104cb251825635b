from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass(frozen=True)
class Raster:
    """
    Validated RGBA source image.
    Only the raster repository builds these.
    """
    width: int
    height: int
    pixels: np.ndarray  # Shape (H, W, 4), dtype uint8, RGBA order, read-only.
    path: Path | None = None  # Where the raw bytes came from, if anywhere.
