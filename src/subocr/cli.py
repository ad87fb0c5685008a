# src/subocr/cli.py
from __future__ import annotations

"""
CLI de clasificación de colores para subtítulos renderizados.

Comandos:
  - classify: clasifica cada color de la imagen (transparent/shadow/opaque)
    y opcionalmente escribe la máscara de tinta y un reporte CSV.

Ejemplos rápidos:
  python -m subocr.cli classify ./frame_0001.png
  python -m subocr.cli --log-level DEBUG classify ./frame_0001.png --json
  python -m subocr.cli classify ./frame_0001.png --mask --report out/colors.csv
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from .config import Settings, get_settings
from .composition.di import build_service
from .log_utils import setup_logging
from .services.color_classification_service import (
    ClassifySpec,
    ColorClassificationResult,
)

# ----------------------
# Utilidades locales
# ----------------------

def _resolve_out(s: Settings, key: str, value: Optional[str], image: Path) -> Optional[Path]:
    # None -> no se pidió; "" -> se pidió sin ruta (usa patrón de Settings)
    if value is None:
        return None
    if value == "":
        return s.out_path(key, stem=image.stem)
    return Path(value)


def _result_to_json(result: ColorClassificationResult) -> dict:
    return {
        "size": list(result.size),
        "have_opaque_inside_shadow": result.have_opaque_inside_shadow,
        "colors": {
            c.to_hex(): ct.value
            for c, ct in sorted(result.classification.items(), key=lambda kv: kv[0].to_hex())
        },
    }

# ----------------------
# Comandos
# ----------------------

def cmd_classify(args: argparse.Namespace, s: Settings) -> int:
    image = Path(args.image)
    svc = build_service(s)
    if not svc.reader.exists(str(image)):  # type: ignore[union-attr]
        raise FileNotFoundError(f"no existe la imagen: {image}")

    spec = ClassifySpec(
        out_mask=_resolve_out(s, "mask", args.mask, image),
        out_report=_resolve_out(s, "report", args.report, image),
    )
    outcome = svc.run(str(image), spec)

    if args.json:
        print(json.dumps(_result_to_json(outcome.result), indent=2))
    else:
        for c in sorted(outcome.result.classification, key=lambda c: c.to_hex()):
            print(f"{c.to_hex()}  {outcome.result.classification[c].value}")
    if outcome.mask_path:
        print(str(outcome.mask_path), file=sys.stderr)
    if outcome.report_path:
        print(str(outcome.report_path), file=sys.stderr)
    return 0

# ----------------------
# Parser
# ----------------------

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="subocr", description="Clasificación de colores de subtítulos (shadow/opaque)")
    p.add_argument("--root", help="project_root (sobre-escribe Settings.project_root)")
    p.add_argument("--log-level", help="nivel de logging (DEBUG, INFO, ...); por defecto Settings.log_level")
    sub = p.add_subparsers(dest="cmd", required=True)

    pc = sub.add_parser("classify", help="clasifica los colores de una imagen")
    pc.add_argument("image", help="imagen de subtítulo (PNG, BMP, ...)")
    pc.add_argument("--json", action="store_true", help="salida JSON en vez de texto")
    pc.add_argument("--mask", nargs="?", const="", default=None,
                    help="escribe la máscara de tinta PNG (sin ruta: Settings.output_patterns['mask'])")
    pc.add_argument("--report", nargs="?", const="", default=None,
                    help="escribe reporte CSV (sin ruta: Settings.output_patterns['report'])")
    pc.set_defaults(func=cmd_classify)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        s = get_settings()
        upd: dict = {}
        if args.root:
            upd["project_root"] = Path(args.root).expanduser().resolve()
        if args.log_level:
            upd["log_level"] = args.log_level.upper()
        if upd:
            s = s.model_copy(update=upd)
        setup_logging(s.log_level)
        return int(bool(args.func(args, s)))  # 0 si todo bien
    except KeyboardInterrupt:
        return 130
    except Exception as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
