# src/subocr/services/color_classification_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..contracts.bitmap import RgbaBitmap, to_i32
from ..contracts.core import (
    ClassificationInvariantError,
    ColorType,
    Rgba,
    ShadowThresholds,
)
from ..ports.bitmap_read import BitmapReaderPort
from ..ports.exporters import ReportExporterPort
from ..ports.mask_write import MaskWriterPort
from .binarize_service import ink_mask


"""
Servicio de clasificación de colores de subtítulos renderizados.
Pipeline determinista (una sola pasada, sin reintentos):
  SEED (alpha) → TALLY (vecindad 3x3) → DETECT (sombras) → RETURN

Cada color termina como TRANSPARENT, SHADOW u OPAQUE. SHADOW y TRANSPARENT
son "fondo" para la etapa OCR; OPAQUE es tinta candidata.
El núcleo es puro: no lee archivos ni usa Settings. I/O sólo vía *ports*.
"""

log = logging.getLogger(__name__)

ColorClassification = Dict[Rgba, ColorType]

# 8-vecindad, sin (0, 0)
_NEIGHBOURS: Tuple[Tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)

# ----------------------
# Conteo de adyacencias
# ----------------------

class AdjacentPixelInfo:
    """Cuántos vecinos de cada ColorType tiene un color (en toda la imagen)."""

    # índice denso por rol; no sale de esta clase
    _SLOT: Mapping[ColorType, int] = MappingProxyType({
        ColorType.TRANSPARENT: 0,
        ColorType.SHADOW: 1,
        ColorType.OPAQUE: 2,
    })

    __slots__ = ("_counts",)

    def __init__(self, transparent: int = 0, shadow: int = 0, opaque: int = 0) -> None:
        self._counts = [int(transparent), int(shadow), int(opaque)]

    def count(self, ct: ColorType) -> int:
        return self._counts[self._SLOT[ct]]

    def incr_count(self, ct: ColorType) -> None:
        self._counts[self._SLOT[ct]] += 1

    def total(self) -> int:
        return sum(self._counts)

    def fraction_adj_to(self, ct: ColorType) -> float:
        total = self.total()
        if total == 0:
            raise ClassificationInvariantError("fracción de adyacencia con total == 0")
        return self.count(ct) / float(total)

    def looks_like_opaque_inside_shadow(self, th: ShadowThresholds) -> bool:
        return self.fraction_adj_to(ColorType.OPAQUE) > th.opaque_inside_shadow

    def looks_like_shadow(self, th: ShadowThresholds) -> bool:
        return (
            self.fraction_adj_to(ColorType.OPAQUE) > th.shadow_min_opaque
            and self.fraction_adj_to(ColorType.TRANSPARENT) > th.shadow_min_transparent
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AdjacentPixelInfo):
            return NotImplemented
        return self._counts == other._counts

    def __repr__(self) -> str:
        t, s, o = self._counts
        return f"AdjacentPixelInfo(transparent={t}, shadow={s}, opaque={o})"

# ----------------------
# Fases del clasificador
# ----------------------

def initial_classification(bitmap: RgbaBitmap) -> ColorClassification:
    """Divide los colores en TRANSPARENT/OPAQUE según alpha. Gana la primera observación."""
    classification: ColorClassification = {}
    for px in bitmap.pixels():
        if px in classification:
            continue
        classification[px] = ColorType.TRANSPARENT if px.is_transparent() else ColorType.OPAQUE
    return classification


def adjacency_tally(
    bitmap: RgbaBitmap, classification: Mapping[Rgba, ColorType]
) -> Dict[Rgba, AdjacentPixelInfo]:
    """
    Para cada color no transparente, cuenta el rol de sus vecinos (8-conexos).
      - vecino fuera de la imagen  -> TRANSPARENT
      - vecino del mismo color     -> no se cuenta
      - vecino sin clasificar      -> ClassificationInvariantError
    """
    adjacent: Dict[Rgba, AdjacentPixelInfo] = {
        c: AdjacentPixelInfo() for c in classification if not c.is_transparent()
    }
    for x, y, px in bitmap.enumerate_pixels():
        # Los píxeles transparentes no aportan conteos.
        if px.is_transparent():
            continue
        info = adjacent.get(px)
        if info is None:
            raise ClassificationInvariantError(f"color sin registro de adyacencia: {px.to_hex()}")
        xi, yi = to_i32(x), to_i32(y)
        for dx, dy in _NEIGHBOURS:
            px_adj = bitmap.get_opt(xi + dx, yi + dy)
            if px_adj == px:
                continue
            if px_adj is None:
                ct_adj = ColorType.TRANSPARENT
            else:
                ct_adj = classification.get(px_adj)
                if ct_adj is None:
                    raise ClassificationInvariantError(f"color vecino sin clasificar: {px_adj.to_hex()}")
            info.incr_count(ct_adj)
    return adjacent


def has_opaque_inside_shadow(
    adjacent: Mapping[Rgba, AdjacentPixelInfo], th: ShadowThresholds
) -> bool:
    """¿Hay algún color opaco relevante que parezca estar *rodeado* por una sombra?"""
    total_adj = sum(adj.total() for adj in adjacent.values())
    cutoff = total_adj // th.significance_divisor
    for adj in adjacent.values():
        if adj.total() == 0:
            continue
        # Sólo colores que representan una fracción razonable del total.
        if adj.total() >= cutoff and adj.looks_like_opaque_inside_shadow(th):
            return True
    return False


def find_shadow_colors(
    adjacent: Mapping[Rgba, AdjacentPixelInfo], th: ShadowThresholds
) -> List[Rgba]:
    return [
        c for c, adj in adjacent.items()
        if adj.total() > 0 and adj.looks_like_shadow(th)
    ]

# ----------------------
# Resultado / API principal
# ----------------------

@dataclass(frozen=True)
class ColorClassificationResult:
    classification: ColorClassification
    adjacency: Mapping[Rgba, AdjacentPixelInfo]
    have_opaque_inside_shadow: bool
    size: Tuple[int, int]                 # (width, height)

    def colors_of(self, ct: ColorType) -> Tuple[Rgba, ...]:
        return tuple(sorted(c for c, t in self.classification.items() if t is ct))


def classify_colors_detailed(
    bitmap: RgbaBitmap, thresholds: Optional[ShadowThresholds] = None
) -> ColorClassificationResult:
    th = thresholds or ShadowThresholds()

    classification = initial_classification(bitmap)
    log.debug("color classification (initial): %r", classification)

    adjacent = adjacency_tally(bitmap, classification)
    log.debug("color adjacency: %r", adjacent)

    have_opaque_inside_shadow = has_opaque_inside_shadow(adjacent, th)
    if have_opaque_inside_shadow:
        for c in find_shadow_colors(adjacent, th):
            classification[c] = ColorType.SHADOW
    log.debug("color classification (final): %r", classification)

    return ColorClassificationResult(
        classification=classification,
        adjacency=MappingProxyType(adjacent),
        have_opaque_inside_shadow=have_opaque_inside_shadow,
        size=bitmap.size,
    )


def classify_colors(
    bitmap: RgbaBitmap, thresholds: Optional[ShadowThresholds] = None
) -> ColorClassification:
    """Clasifica cada color de `bitmap` como TRANSPARENT, SHADOW u OPAQUE."""
    return classify_colors_detailed(bitmap, thresholds).classification

# ----------------------
# Especificaciones / DTOs
# ----------------------

@dataclass(frozen=True)
class ClassifySpec:
    out_mask: Optional[Path] = None       # si None -> no escribe máscara
    out_report: Optional[Path] = None     # si None -> no escribe reporte
    report_template: str = "color_classes"

@dataclass(frozen=True)
class ClassifyOutcome:
    result: ColorClassificationResult
    mask_path: Optional[Path]
    report_path: Optional[Path]

REPORT_HEADERS: Tuple[str, ...] = ("color", "role", "transparent", "shadow", "opaque", "total")

# ----------------------
# Servicio
# ----------------------

@dataclass
class ColorClassificationService:
    reader: Optional[BitmapReaderPort] = None
    mask_writer: Optional[MaskWriterPort] = None
    reporter: Optional[ReportExporterPort] = None
    thresholds: ShadowThresholds = field(default_factory=ShadowThresholds)

    def classify(self, bitmap: RgbaBitmap) -> ColorClassificationResult:
        return classify_colors_detailed(bitmap, self.thresholds)

    def run(self, uri: str, spec: ClassifySpec = ClassifySpec()) -> ClassifyOutcome:
        if self.reader is None:
            raise RuntimeError("BitmapReaderPort no configurado")
        if spec.out_mask is not None and self.mask_writer is None:
            raise RuntimeError("out_mask requiere un MaskWriterPort configurado")
        if spec.out_report is not None and self.reporter is None:
            raise RuntimeError("out_report requiere un ReportExporterPort configurado")

        bitmap = self.reader.read(uri)
        result = self.classify(bitmap)
        log.info(
            "%s: %d colores (%dx%d), sombra=%s",
            uri, len(result.classification), bitmap.width, bitmap.height,
            result.have_opaque_inside_shadow,
        )

        mask_path: Optional[Path] = None
        if spec.out_mask is not None:
            mask_path = Path(spec.out_mask)
            mask_path.parent.mkdir(parents=True, exist_ok=True)
            self.mask_writer.write(str(mask_path), ink_mask(bitmap, result.classification))  # type: ignore[union-attr]

        report_path: Optional[Path] = None
        if spec.out_report is not None:
            report_path = Path(spec.out_report)
            ctx = {
                "source": uri,
                "headers": list(REPORT_HEADERS),
                "rows": self.report_rows(result),
            }
            self.reporter.render(spec.report_template, ctx, str(report_path))  # type: ignore[union-attr]

        return ClassifyOutcome(result=result, mask_path=mask_path, report_path=report_path)

    @staticmethod
    def report_rows(result: ColorClassificationResult) -> List[Dict[str, Any]]:
        """Una fila por color, ordenada por hex (salida estable)."""
        rows: List[Dict[str, Any]] = []
        for c in sorted(result.classification, key=lambda c: c.to_hex()):
            adj = result.adjacency.get(c) or AdjacentPixelInfo()
            rows.append({
                "color": c.to_hex(),
                "role": result.classification[c].value,
                "transparent": adj.count(ColorType.TRANSPARENT),
                "shadow": adj.count(ColorType.SHADOW),
                "opaque": adj.count(ColorType.OPAQUE),
                "total": adj.total(),
            })
        return rows

__all__ = [
    "AdjacentPixelInfo",
    "ColorClassification",
    "ColorClassificationResult",
    "ClassifySpec",
    "ClassifyOutcome",
    "ColorClassificationService",
    "REPORT_HEADERS",
    "initial_classification",
    "adjacency_tally",
    "has_opaque_inside_shadow",
    "find_shadow_colors",
    "classify_colors",
    "classify_colors_detailed",
]
