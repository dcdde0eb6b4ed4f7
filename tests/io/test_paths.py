from pathlib import Path
import pytest
from turnover_sla.io.paths import derive_output_paths, EXPORT_SUFFIX


def test_derive_output_paths_happy_path(tmp_path: Path):
    src = tmp_path / "orders_2024-Q1.xlsx"
    src.write_text("placeholder")

    export, log = derive_output_paths(src)
    assert export.parent == src.parent
    assert export.name == f"{src.stem}{EXPORT_SUFFIX}"
    assert log.parent == src.parent
    assert log.name == f"{src.stem}.log"


def test_derive_output_paths_missing_input_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        derive_output_paths(tmp_path / "missing.xlsx")
