from __future__ import annotations
from pathlib import Path
import yaml

from ..config import Settings
from ..adapters.csv_exporter import CSVExporter
from ..adapters.pil_bitmap_reader import PilBitmapReader
from ..adapters.pil_mask_writer import PilMaskWriter
from ..services.color_classification_service import ColorClassificationService

SETTINGS_FILE = Path("config") / "settings.yaml"

def _read_yaml(path: Path) -> dict:
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}

def load_settings_from_yaml(path: Path) -> Settings:
    return Settings(**_read_yaml(path))

def build_settings(project_root: Path) -> Settings:
    cfg = (project_root / SETTINGS_FILE).resolve()
    data = _read_yaml(cfg) if cfg.exists() else {}
    # si el yaml no fija project_root, manda el directorio recibido
    data.setdefault("project_root", str(project_root))
    return Settings(**data)

def build_service(settings: Settings) -> ColorClassificationService:
    return ColorClassificationService(
        reader=PilBitmapReader(),
        mask_writer=PilMaskWriter(),
        reporter=CSVExporter(),
        thresholds=settings.shadow,
    )
