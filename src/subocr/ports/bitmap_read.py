# src/subocr/ports/bitmap_read.py
from __future__ import annotations

from typing import Protocol, runtime_checkable
from ..contracts.bitmap import RgbaBitmap

URI = str

@runtime_checkable
class BitmapReaderPort(Protocol):
    """
    Lector de imágenes de subtítulo (PNG, BMP, etc.).
    Reglas: devuelve SIEMPRE un RgbaBitmap (H, W, 4) uint8, ya decodificado.
    """
    def read(self, uri: URI) -> RgbaBitmap: ...
    def exists(self, uri: URI) -> bool: ...

__all__ = ["BitmapReaderPort", "URI"]
