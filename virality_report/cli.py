from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from .config import load_config, resolve_runtime_secrets
from .config_schema import AppConfig
from .errors import ConfigError, ReportInputError, ScrapeError, StorageError
from .event_log import EventLogger
from .report import ViralityReport, generate_report, report_from_record
from .scraper_client import ProfileScraper, ScraperLike
from .storage import SQLiteCreatorStore

_DB_NAME = "creators.sqlite"
_LOG_NAME = "report.log"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="virality_report")

    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser(
        "report",
        help="Scrape a profile URL and print its virality report.",
    )
    report.add_argument(
        "--config",
        required=True,
        help="Path to YAML config file.",
    )
    report.add_argument(
        "--url",
        required=True,
        help="Instagram, TikTok, or YouTube profile URL.",
    )
    report.add_argument(
        "--out",
        required=True,
        help="Directory holding the creator database and report log.",
    )
    report.add_argument(
        "--offline",
        action="store_true",
        help="Use a built-in sample payload instead of calling the scraping provider.",
    )
    report.set_defaults(_handler=_cmd_report)

    show = subparsers.add_parser(
        "show",
        help="Print the report for a previously stored creator without scraping.",
    )
    show.add_argument(
        "--out",
        required=True,
        help="Directory holding the creator database.",
    )
    show.add_argument(
        "--id",
        required=True,
        type=int,
        help="Creator record id printed by the report command.",
    )
    show.add_argument(
        "--config",
        default=None,
        help="Optional YAML config file (defaults apply when omitted).",
    )
    show.set_defaults(_handler=_cmd_show)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _print_report(report: ViralityReport) -> None:
    print(json.dumps(report.as_dict(), indent=2, ensure_ascii=False, sort_keys=True))


def _cmd_report(args: argparse.Namespace) -> int:
    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    log_path = out_dir / _LOG_NAME
    with EventLogger.open(log_path) as log:
        log.info("report_command_started", config_path=str(args.config), out_dir=str(out_dir))

        try:
            cfg = load_config(args.config)

            scraper: ScraperLike
            if bool(getattr(args, "offline", False)):
                from .offline import OfflineProfileScraper

                scraper = OfflineProfileScraper()
            else:
                secrets = resolve_runtime_secrets(cfg)
                scraper = ProfileScraper(secrets.apify_token, scraper=cfg.scraper)

            log.info(
                "config_loaded",
                config_path=str(args.config),
                actors=cfg.scraper.actors.model_dump(),
                offline=bool(getattr(args, "offline", False)),
            )

            with SQLiteCreatorStore.open(out_dir / _DB_NAME) as store:
                report = generate_report(
                    args.url,
                    config=cfg,
                    store=store,
                    scraper=scraper,
                    logger=log,
                )

            _print_report(report)
            return 0 if report.status == "completed" else 4
        except Exception as e:
            log.exception("report_command_failed", exc=e)
            raise


def _cmd_show(args: argparse.Namespace) -> int:
    cfg = load_config(args.config) if args.config else AppConfig()

    db_path = Path(args.out) / _DB_NAME
    if not db_path.exists():
        raise StorageError(f"Creator database not found: {db_path}")

    with SQLiteCreatorStore.open(db_path) as store:
        record = store.get_creator(args.id)

    if record is None:
        raise StorageError(f"Creator not found: {args.id}")

    _print_report(report_from_record(record, config=cfg))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        handler = getattr(args, "_handler")
        return int(handler(args))
    except (ConfigError, ReportInputError) as e:
        _eprint(str(e))
        return 2
    except (ScrapeError, StorageError) as e:
        _eprint(str(e))
        return 3
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
