from __future__ import annotations

from pathlib import Path
from typing import Tuple

from turnover_sla.config.logging_config import default_log_path_for_input

EXPORT_SUFFIX = "_turnover_sla.xlsx"


def derive_output_paths(input_file: Path) -> Tuple[Path, Path]:
    """
    (export workbook, log file) beside the input:
    orders.xlsx -> orders_turnover_sla.xlsx, orders.log

    FileNotFoundError when the input is missing, so the CLI can exit early.
    """
    p = Path(input_file)
    if not p.exists():
        raise FileNotFoundError(p)
    return p.with_name(f"{p.stem}{EXPORT_SUFFIX}"), default_log_path_for_input(p)
