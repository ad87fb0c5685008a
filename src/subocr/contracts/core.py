# src/subocr/contracts/core.py
from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

# -------------------------
# Colores tipados
# -------------------------
class Rgba(NamedTuple):
    """Color RGBA de 8 bits por canal. Inmutable y hashable (se usa como llave)."""
    r: int
    g: int
    b: int
    a: int

    @classmethod
    def from_hex(cls, v: int) -> "Rgba":
        """0xRRGGBBAA -> Rgba."""
        if not 0 <= v <= 0xFFFFFFFF:
            raise ValueError(f"color fuera de rango: {v:#x}")
        return cls((v >> 24) & 0xFF, (v >> 16) & 0xFF, (v >> 8) & 0xFF, v & 0xFF)

    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}{self.a:02x}"

    def is_transparent(self) -> bool:
        # cualquier transparencia cuenta, no sólo alpha == 0
        return self.a < 0xFF

# -------------------------
# Roles de color
# -------------------------
class ColorType(str, Enum):
    """Tipos de color que podemos encontrar en un subtítulo renderizado."""
    TRANSPARENT = "transparent"
    # Color de sombra/contorno: se trata como fondo para separar letras.
    SHADOW = "shadow"
    # Color opaco: tinta candidata para el reconocimiento.
    OPAQUE = "opaque"

    def is_ink(self) -> bool:
        return self is ColorType.OPAQUE

# -------------------------
# Umbrales heurísticos
# -------------------------
class ShadowThresholds(BaseModel):
    """
    Constantes empíricas del detector de sombras. Se conservan tal cual;
    quedan expuestas sólo para poder ajustarlas desde Settings.
      - opaque_inside_shadow: fracción de vecinos opacos para "opaco rodeado"
      - shadow_min_opaque / shadow_min_transparent: un color sombra toca ambos
      - significance_divisor: total >= total_adj // divisor (filtro de ruido)
    """
    model_config = ConfigDict(frozen=True)
    opaque_inside_shadow: float = Field(0.95, ge=0.0, le=1.0)
    shadow_min_opaque: float = Field(0.33, ge=0.0, le=1.0)
    shadow_min_transparent: float = Field(0.33, ge=0.0, le=1.0)
    significance_divisor: int = Field(4, ge=1)

# -------------------------
# Errores
# -------------------------
class CoordinateOverflowError(OverflowError):
    """Índice de píxel no representable como coordenada i32 con signo."""

class ClassificationInvariantError(AssertionError):
    """Defecto lógico: un color no fue clasificado en la pasada inicial."""

__all__ = [
    "Rgba", "ColorType", "ShadowThresholds",
    "CoordinateOverflowError", "ClassificationInvariantError",
]
