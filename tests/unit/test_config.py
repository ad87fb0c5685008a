# tests/unit/test_config.py
import pytest
import yaml
from pathlib import Path
from subocr.config import Settings, get_settings
from subocr.contracts.core import ShadowThresholds
from subocr.composition.di import build_service, build_settings, load_settings_from_yaml

def test_settings_parse_and_paths(tmp_path: Path):
    s = Settings(project_root=tmp_path)
    assert s.project_root.is_absolute()
    assert s.shadow == ShadowThresholds()
    p = s.out_path("mask", stem="frame_0001")
    assert tmp_path.resolve() in p.parents
    assert p.name == "frame_0001_mask.png"

def test_settings_placeholders_guard():
    with pytest.raises(ValueError):
        Settings(output_patterns={"mask": "out/{date}/x.png"})

def test_settings_log_level_guard():
    assert Settings(log_level="debug").log_level == "DEBUG"
    with pytest.raises(ValueError):
        Settings(log_level="chatty")

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("SUBOCR_SHADOW__OPAQUE_INSIDE_SHADOW", "0.9")
    monkeypatch.setenv("SUBOCR_LOG_LEVEL", "ERROR")
    s = get_settings()
    assert s.shadow.opaque_inside_shadow == pytest.approx(0.9)
    assert s.shadow.shadow_min_opaque == pytest.approx(0.33)
    assert s.log_level == "ERROR"
    assert get_settings() is s

def test_settings_frozen():
    s = Settings()
    with pytest.raises(ValueError):
        s.log_level = "DEBUG"

def test_build_settings_from_yaml(tmp_path: Path):
    cfg_dir = tmp_path / "config"
    cfg_dir.mkdir(parents=True)
    (cfg_dir / "settings.yaml").write_text(yaml.safe_dump({
        "log_level": "DEBUG",
        "shadow": {"opaque_inside_shadow": 0.9, "significance_divisor": 5},
        "output_patterns": {
            "mask": "masks/{stem}.png",
            "report": "reports/{stem}.csv",
        },
    }), encoding="utf-8")

    st = build_settings(tmp_path)
    assert st.project_root == tmp_path.resolve()
    assert st.shadow.significance_divisor == 5
    out = st.out_path("report", stem="ep01")
    assert "reports/ep01.csv" in str(out).replace("\\", "/")

    st2 = load_settings_from_yaml(cfg_dir / "settings.yaml")
    assert st2.log_level == "DEBUG"

def test_build_settings_without_yaml(tmp_path: Path):
    st = build_settings(tmp_path)
    assert st.project_root == tmp_path.resolve()

def test_build_service_wires_thresholds(tmp_path: Path):
    st = Settings(project_root=tmp_path, shadow=ShadowThresholds(opaque_inside_shadow=0.8))
    svc = build_service(st)
    assert svc.thresholds.opaque_inside_shadow == pytest.approx(0.8)
    assert svc.reader is not None and svc.mask_writer is not None and svc.reporter is not None
