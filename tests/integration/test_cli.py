# tests/integration/test_cli.py
import csv
import json
import logging

import numpy as np
import pytest
from pathlib import Path
from PIL import Image

from subocr import cli
from tests.factories import subtitle_sample

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # la CLI reemplaza los handlers del root logger
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)

@pytest.fixture
def sample_png(tmp_path: Path) -> Path:
    path = tmp_path / "frame_0001.png"
    Image.fromarray(np.array(subtitle_sample().data)).save(path)
    return path

def test_classify_prints_roles(sample_png, capsys):
    assert cli.main(["classify", str(sample_png)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "#00000000  transparent",
        "#000000ff  shadow",
        "#999999ff  opaque",
        "#f0f0f0ff  opaque",
    ]

def test_classify_json(sample_png, capsys):
    assert cli.main(["classify", str(sample_png), "--json"]) == 0
    doc = json.loads(capsys.readouterr().out)
    assert doc["size"] == [12, 7]
    assert doc["have_opaque_inside_shadow"] is True
    assert doc["colors"]["#000000ff"] == "shadow"

def test_classify_writes_default_outputs(sample_png, tmp_path, capsys):
    rc = cli.main(["--root", str(tmp_path), "classify", str(sample_png), "--mask", "--report"])
    assert rc == 0
    mask = tmp_path / "out" / "frame_0001_mask.png"
    report = tmp_path / "out" / "frame_0001_colors.csv"
    assert mask.exists() and report.exists()
    with Image.open(mask) as im:
        assert int((np.array(im) == 0).sum()) == 24
    with open(report, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["role"] for r in rows] == ["transparent", "shadow", "opaque", "opaque"]
    assert rows[1]["total"] == "148"

def test_classify_explicit_report_path(sample_png, tmp_path):
    target = tmp_path / "custom" / "report.csv"
    assert cli.main(["classify", str(sample_png), "--report", str(target)]) == 0
    assert target.exists()

def test_missing_image_returns_error(tmp_path, capsys):
    rc = cli.main(["classify", str(tmp_path / "missing.png")])
    assert rc == 1
    assert "[ERROR]" in capsys.readouterr().err

def test_invalid_log_level_returns_error(sample_png, capsys):
    assert cli.main(["--log-level", "chatty", "classify", str(sample_png)]) == 1
