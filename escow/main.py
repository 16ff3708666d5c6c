"""Command-line entry point for escow."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from escow.adapters.exceptions import AdapterConfigurationError
from escow.adapters.factory import get_adapter
from escow.config.environment import EnvironmentConfig
from escow.config.exceptions import ConfigurationError
from escow.config.loader import DEFAULT_CONFIG_LOCATIONS, load_config, validate_config_file
from escow.config.models import AppConfig
from escow.ingestion.input_csv import parse_input_csv, write_input_csv
from escow.logging import get_logger
from escow.logging.config import configure_logging
from escow.persistence.exceptions import PersistenceError
from escow.persistence.job_store import JobStateStore
from escow.persistence.submission_store import ALL, BREEDING, PREGNANCY, SubmissionBatchStore
from escow.pipeline import LookupPipeline, NoSubmissionDataError, SubmissionPipeline
from escow.reporting.export import default_export_path, export_job_log_csv
from escow.reporting.stats import failed_records, load_job_stats
from escow.utils.timestamps import is_iso_date, today_iso

logger = get_logger(__name__, component="cli")


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > LOG_LEVEL environment variable > config file.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    else:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="escow",
        description="Facility directory lookups and breeding-record conversion",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml, then config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    lookup = subparsers.add_parser("lookup", help="Look up every pending input record")
    lookup.add_argument("--input", type=Path, default=None, help="Input CSV (default from config)")
    lookup.add_argument("--job-log", type=Path, default=None, help="Job log JSON (default from config)")

    export = subparsers.add_parser("export", help="Export the job log as CSV")
    export.add_argument("--job-log", type=Path, default=None)
    export.add_argument("--output", type=Path, default=None, help="CSV path (default: wam_search_<date>.csv)")

    stats = subparsers.add_parser("stats", help="Show job log statistics")
    stats.add_argument("--job-log", type=Path, default=None)

    failed = subparsers.add_parser("failed", help="Write failed lookups as a new input CSV")
    failed.add_argument("--job-log", type=Path, default=None)
    failed.add_argument("--output", type=Path, default=None, help="CSV path (default: failed_<date>.csv)")

    convert = subparsers.add_parser("convert", help="Convert extracted records for submission")
    convert.add_argument("--date", default=None, help="Batch date YYYY-MM-DD (default: today)")
    convert.add_argument(
        "--type",
        dest="data_type",
        default=ALL,
        choices=[ALL, BREEDING, PREGNANCY],
        help="Record type to convert (default: all)",
    )
    convert.add_argument("--yes", action="store_true", help="Skip the review confirmation prompt")

    subparsers.add_parser(
        "check-config",
        help="Validate the configuration file without running anything",
    )

    return parser


def _job_store(app_config: AppConfig, override: Optional[Path]) -> JobStateStore:
    return JobStateStore(override or app_config.paths.resolved_job_log())


def run_lookup(args: argparse.Namespace, app_config: AppConfig) -> int:
    input_path = args.input or app_config.paths.resolved_input_csv()
    try:
        records = parse_input_csv(input_path)
    except FileNotFoundError:
        print(f"Input file not found: {input_path}", file=sys.stderr)
        return 1

    if not records:
        print(f"No input records in {input_path}")
        return 1

    store = _job_store(app_config, args.job_log)
    lookup_config = app_config.lookup

    with get_adapter(lookup_config) as adapter:
        pipeline = LookupPipeline(
            adapter=adapter,
            store=store,
            delay_min=lookup_config.request_delay_min_seconds,
            delay_max=lookup_config.request_delay_max_seconds,
        )
        result = pipeline.run(records)

    print(
        f"処理: {result.processed}件 (見つかった: {result.found}件, "
        f"見つからなかった: {result.not_found}件, エラー: {result.errors}件), "
        f"処理済みスキップ: {result.skipped_already_processed}件"
    )
    if result.cancelled:
        print("中断しました。再実行すると続きから処理します。")
    return 0


def run_export(args: argparse.Namespace, app_config: AppConfig) -> int:
    store = _job_store(app_config, args.job_log)
    if not store.exists():
        print(f"Job log not found: {store.path}", file=sys.stderr)
        return 1

    output = args.output or default_export_path(app_config.paths.data_dir)
    summary = export_job_log_csv(store.load(), output)

    print(f"CSVを出力しました: {summary.path}")
    print(f"  見つかった: {summary.found}件, 見つからなかった: {summary.not_found}件")
    if summary.errors:
        print(f"  エラー（出力対象外）: {summary.errors}件")
    return 0


def run_stats(args: argparse.Namespace, app_config: AppConfig) -> int:
    stats = load_job_stats(_job_store(app_config, args.job_log))
    if stats is None:
        print("検索結果がありません。", file=sys.stderr)
        return 1
    print(stats.render())
    return 0


def run_failed(args: argparse.Namespace, app_config: AppConfig) -> int:
    store = _job_store(app_config, args.job_log)
    if not store.exists():
        print(f"Job log not found: {store.path}", file=sys.stderr)
        return 1

    records = failed_records(store.load())
    if not records:
        print("エラーになった検索はありません。")
        return 0

    output = args.output or app_config.paths.data_dir / f"failed_{today_iso()}.csv"
    write_input_csv(output, records)
    print(f"{len(records)}件を書き出しました: {output}")
    print("新しいジョブログを指定して lookup を再実行してください。")
    return 0


def run_check_config(config_path: Optional[Path]) -> int:
    """Validate the configuration file (--config, or the first default location that exists)."""
    if config_path is None:
        config_path = next((p for p in DEFAULT_CONFIG_LOCATIONS if p.exists()), None)
    if config_path is None or not config_path.exists():
        print(f"Configuration file not found: {config_path or DEFAULT_CONFIG_LOCATIONS[0]}", file=sys.stderr)
        return 1
    return 0 if validate_config_file(config_path) else 1


def run_convert(
    args: argparse.Namespace,
    app_config: AppConfig,
    prompt: Callable[[str], str] = input,
) -> int:
    date = args.date or today_iso()
    if not is_iso_date(date):
        print(f"Invalid date: {date} (expected YYYY-MM-DD)", file=sys.stderr)
        return 1

    pipeline = SubmissionPipeline(SubmissionBatchStore(app_config.paths.data_dir))
    try:
        prepared = pipeline.prepare(date, args.data_type)
    except NoSubmissionDataError as e:
        print(f"データがありません: {e}", file=sys.stderr)
        return 1

    for preview in prepared.previews:
        print(preview)

    print(f"入力データ: {prepared.path}")
    print(f"合計: {prepared.total}件")
    if args.data_type == ALL:
        print(f"  （繁殖: {prepared.breeding_count}件, 妊娠診断: {prepared.pregnancy_count}件）")
    if prepared.ambiguous_owner_count:
        print(f"要確認: 畜主IDを確認してください ({prepared.ambiguous_owner_count}件)")

    if not args.yes:
        try:
            answer = prompt("確認・編集が完了したら送信しますか？ (y/N): ").strip().lower()
        except EOFError:
            answer = ""
        if answer not in ("y", "yes"):
            print("キャンセルしました。")
            return 0

    # Re-read so review edits are what gets submitted
    submissions = pipeline.load_reviewed(prepared.path)
    if not submissions:
        logger.warning(
            "Reviewed submission file is empty",
            extra={"event": "submission.reviewed.empty", "path": str(prepared.path)},
        )
        print(f"データがありません: {prepared.path} に送信対象がありません", file=sys.stderr)
        return 1

    logger.info(
        f"{len(submissions)} reviewed entries ready for submission",
        extra={
            "event": "submission.reviewed",
            "path": str(prepared.path),
            "record_count": len(submissions),
        },
    )
    print(f"確認済み: {len(submissions)}件 ({prepared.path})")
    return 0


COMMANDS = {
    "lookup": run_lookup,
    "export": run_export,
    "stats": run_stats,
    "failed": run_failed,
    "convert": run_convert,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for escow.

    Returns:
        Exit code (0 for success or operator cancellation, 1 for failure).
    """
    args = build_parser().parse_args(argv)

    if args.command == "check-config":
        return run_check_config(args.config)

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)
        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        logger.debug(
            "Configuration loaded",
            extra={
                "event": "config.loaded",
                "command": args.command,
                "data_dir": str(app_config.paths.data_dir),
                "log_level": env_config.log_level,
            },
        )

        return COMMANDS[args.command](args, app_config)

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except AdapterConfigurationError as e:
        print(f"Adapter configuration error: {e}", file=sys.stderr)
        return 1
    except PersistenceError as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Persistence error: {e}",
            extra={"event": "cli.persistence_error", "error_type": type(e).__name__},
        )
        return 1
    except KeyboardInterrupt:
        print("\n中断しました。", file=sys.stderr)
        return 0


if __name__ == "__main__":
    sys.exit(main())
