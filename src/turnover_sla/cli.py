# src/turnover_sla/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Union

from .config.env import get_app_env
from .config.logging_config import get_logger
from .io.export import kpi_summary, summary_csv, write_export
from .io.paths import derive_output_paths
from .io.run_config import RunConfig, RunConfigError, load_run_config
from .io.workbook import read_rows
from .models import MonthBasis
from .pipelines.aggregator import overall_kpis
from .pipelines.metrics_calculator import MetricsCalculator

# Below this included/raw ratio the run is reported as low coverage.
LOW_COVERAGE_RATIO = 0.6


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="turnover-sla",
        description="Compute turnover and on-time/SLA metrics from a shipment export "
                    "and write *_turnover_sla.xlsx next to the input.",
    )
    p.add_argument("input", type=Path, help="Path to input .xlsx or .csv file.")
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="JSON run config with mapping/rules/filters. Default: $TURNOVER_SLA_CONFIG.",
    )
    p.add_argument(
        "--sheet",
        default=None,
        help="Sheet name or 0-based index. Default: $TURNOVER_SLA_SHEET or the first sheet.",
    )
    p.add_argument(
        "--header-row",
        type=int,
        default=0,
        help="0-based row index holding the column headers. Default: 0",
    )
    p.add_argument(
        "--month-basis",
        choices=[b.value for b in MonthBasis],
        default=None,
        help="Override the config's month basis (shipped, sla_due, order).",
    )
    p.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Export workbook path. Default: <input>_turnover_sla.xlsx",
    )
    p.add_argument(
        "--no-console",
        action="store_true",
        help="Disable console logging (file logging remains).",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO",
    )
    return p


def _sheet_arg(value: str | None) -> Union[str, int]:
    if value is None or value == "":
        return 0
    return int(value) if value.isdigit() else value


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        export_path, log_path = derive_output_paths(args.input)
    except FileNotFoundError:
        print(f"error: input file not found: {args.input}", file=sys.stderr)
        return 2
    if args.output is not None:
        export_path = args.output

    logger = get_logger(
        "turnover_sla",
        level=args.log_level,
        console=not args.no_console,
        log_file=log_path,
    )
    logger.info("Input: %s", args.input)
    logger.info("Export output: %s", export_path)
    logger.info("Log file: %s", log_path)

    env_cfg = get_app_env()

    # Run config: flag > env > defaults
    config_path = args.config or (
        Path(env_cfg.TURNOVER_SLA_CONFIG) if env_cfg.TURNOVER_SLA_CONFIG else None)
    if config_path is not None:
        try:
            run_cfg = load_run_config(config_path)
        except RunConfigError as e:
            logger.error("Config error: %s", e)
            return 2
        logger.info("Config: %s", config_path)
    else:
        run_cfg = RunConfig()
        logger.warning(
            "No run config given; no columns are mapped, every row will be excluded.")

    filters = run_cfg.filters
    if args.month_basis:
        filters = filters.with_month_basis(args.month_basis)

    sheet = _sheet_arg(args.sheet or env_cfg.TURNOVER_SLA_SHEET)

    try:
        rows = read_rows(args.input, sheet=sheet, header_row=args.header_row)
        logger.debug("Read %d data row(s) from sheet %r", len(rows), sheet)

        result = MetricsCalculator(logger).calculate(
            rows, run_cfg.mapping, run_cfg.rules, filters)

        write_export(result, export_path)
    except FileNotFoundError as e:
        logger.error("Input missing: %s", e)
        return 2
    except Exception as e:
        logger.exception("Failed to compute metrics: %s", e)
        return 1

    q = result.quality
    logger.info("Rows: raw=%d valid=%d included=%d",
                q.raw_rows, q.valid_rows, q.included_rows)
    logger.info("Overall: %s", kpi_summary(overall_kpis(result.rows)))
    if q.raw_rows and q.included_rows / q.raw_rows < LOW_COVERAGE_RATIO:
        logger.warning(
            "Low coverage: only %d of %d row(s) included; check mapping, status rules and filters.",
            q.included_rows, q.raw_rows)

    print(summary_csv(result))
    logger.info("Wrote export workbook → %s", export_path)
    logger.info("Done.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
