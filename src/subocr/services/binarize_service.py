# src/subocr/services/binarize_service.py
from __future__ import annotations

"""
Imagen blanco/negro para OCR a partir de la clasificación de colores.
TRANSPARENT y SHADOW son fondo; sólo OPAQUE es tinta.
"""

from typing import Mapping, Optional, Tuple

import numpy as np

from ..contracts.bitmap import RgbaBitmap
from ..contracts.core import ClassificationInvariantError, ColorType, Rgba


def _pack(arr: np.ndarray) -> np.ndarray:
    # (..., 4) uint8 -> (...) uint32 0xRRGGBBAA
    a = arr.astype(np.uint32)
    return (a[..., 0] << 24) | (a[..., 1] << 16) | (a[..., 2] << 8) | a[..., 3]


def ink_mask(bitmap: RgbaBitmap, classification: Mapping[Rgba, ColorType]) -> np.ndarray:
    """Máscara bool (H, W): True donde el color del píxel es OPAQUE."""
    keys = _pack(bitmap.data)
    uniq, inverse = np.unique(keys.ravel(), return_inverse=True)
    is_ink = np.zeros(uniq.shape, dtype=bool)
    for i, k in enumerate(uniq.tolist()):
        c = Rgba.from_hex(int(k))
        ct = classification.get(c)
        if ct is None:
            raise ClassificationInvariantError(f"color sin clasificar: {c.to_hex()}")
        is_ink[i] = ct.is_ink()
    return is_ink[inverse].reshape(bitmap.height, bitmap.width)


def ink_bbox(mask: np.ndarray) -> Optional[Tuple[int, int, int, int]]:
    """Caja (x0, y0, x1, y1) semiabierta de la tinta, o None si no hay tinta."""
    if mask.ndim != 2:
        raise ValueError("mask debe ser 2D")
    ys, xs = np.nonzero(mask)
    if ys.size == 0:
        return None
    return (int(xs.min()), int(ys.min()), int(xs.max()) + 1, int(ys.max()) + 1)


__all__ = ["ink_mask", "ink_bbox"]
