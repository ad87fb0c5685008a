# src/subocr/adapters/pil_mask_writer.py
from __future__ import annotations

import os
from dataclasses import dataclass

import numpy as np
from PIL import Image

from ..ports.mask_write import MaskWriterPort


@dataclass(frozen=True)
class PilMaskWriter(MaskWriterPort):
    """Escribe la máscara de tinta como PNG 8 bits: tinta=ink_value sobre paper_value."""
    ink_value: int = 0
    paper_value: int = 255

    def write(self, uri: str, mask: np.ndarray) -> str:
        if mask.ndim != 2:
            raise ValueError("mask debe ser 2D")
        out = np.full(mask.shape, self.paper_value, dtype=np.uint8)
        out[mask.astype(bool)] = self.ink_value
        os.makedirs(os.path.dirname(uri) or ".", exist_ok=True)
        Image.fromarray(out).save(uri)  # uint8 2D -> modo "L"
        return uri
