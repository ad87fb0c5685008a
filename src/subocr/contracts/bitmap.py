# src/subocr/contracts/bitmap.py

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from .core import CoordinateOverflowError, Rgba

I32_MIN = -(2 ** 31)
I32_MAX = 2 ** 31 - 1

def to_i32(v: int) -> int:
    """Convierte un índice de píxel al espacio de coordenadas i32 (con signo)."""
    v = int(v)
    if v < I32_MIN or v > I32_MAX:
        raise CoordinateOverflowError(f"coordenada fuera de rango i32: {v}")
    return v

# ---------- Bitmap RGBA (puro dominio, sin I/O) ----------
@dataclass(frozen=True)
class RgbaBitmap:
    data: "npt.NDArray[Any]"  # type: ignore[valid-type]  # (H, W, 4) uint8
    _rows: Tuple[Tuple[Rgba, ...], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        arr = np.asarray(self.data)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"se esperaba un arreglo (H, W, 4); llegó {arr.shape}")
        if arr.dtype != np.uint8:
            raise ValueError(f"dtype no soportado: {arr.dtype} (se requiere uint8)")
        # Bloquea mutaciones accidentales sobre los datos
        arr.setflags(write=False)
        object.__setattr__(self, "data", arr)
        # Tabla de píxeles ya convertidos: evita crear Rgba en cada consulta
        rows = tuple(tuple(Rgba(*px) for px in row) for row in arr.tolist())
        object.__setattr__(self, "_rows", rows)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Rgba]]) -> "RgbaBitmap":
        if not rows:
            return cls(np.zeros((0, 0, 4), dtype=np.uint8))
        return cls(np.array(rows, dtype=np.uint8).reshape(len(rows), len(rows[0]), 4))

    @classmethod
    def from_hex_rows(cls, rows: Sequence[Sequence[int]]) -> "RgbaBitmap":
        return cls.from_rows([[Rgba.from_hex(v) for v in row] for row in rows])

    @property
    def width(self) -> int:
        return int(self.data.shape[1])

    @property
    def height(self) -> int:
        return int(self.data.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def get_pixel(self, x: int, y: int) -> Rgba:
        return self._rows[y][x]

    def get_opt(self, x: int, y: int) -> Optional[Rgba]:
        """Píxel en (x, y) si cae dentro de la imagen; None si está fuera."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return None
        return self._rows[y][x]

    def pixels(self) -> Iterator[Rgba]:
        for row in self._rows:
            yield from row

    def enumerate_pixels(self) -> Iterator[Tuple[int, int, Rgba]]:
        for y, row in enumerate(self._rows):
            for x, px in enumerate(row):
                yield x, y, px

__all__ = ["RgbaBitmap", "to_i32", "I32_MIN", "I32_MAX"]
