# src/subocr/adapters/pil_bitmap_reader.py
from __future__ import annotations

import os
from dataclasses import dataclass

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..contracts.bitmap import RgbaBitmap
from ..ports.bitmap_read import BitmapReaderPort


@dataclass(frozen=True)
class PilBitmapReader(BitmapReaderPort):
    """Lector basado en Pillow. Cualquier modo se convierte a RGBA 8 bits."""

    def read(self, uri: str) -> RgbaBitmap:
        try:
            with Image.open(uri) as im:
                rgba = im.convert("RGBA")
        except UnidentifiedImageError as e:
            raise ValueError(f"formato de imagen no reconocido: {uri}") from e
        arr = np.array(rgba, dtype=np.uint8)
        return RgbaBitmap(arr)

    def exists(self, uri: str) -> bool:
        return os.path.isfile(uri)
