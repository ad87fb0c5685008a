# src/subocr/ports/mask_write.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np

URI = str

@runtime_checkable
class MaskWriterPort(Protocol):
    """Escritor de máscaras de tinta (bool 2D: True = tinta)."""
    def write(self, uri: URI, mask: np.ndarray) -> URI: ...

__all__ = ["MaskWriterPort", "URI"]
