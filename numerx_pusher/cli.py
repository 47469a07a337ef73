"""
Command-line entry point: upload CSV files to NumerX and report failures.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from numerx_pusher import __version__
from numerx_pusher.config import load_settings
from numerx_pusher.domain.request_kind import RequestKind
from numerx_pusher.errors import ConfigurationError, UnknownRequestKindError
from numerx_pusher.inputs import collect_input_files
from numerx_pusher.logging_utils import configure_logging, log_event
from numerx_pusher.pipeline.driver import PusherPipeline
from numerx_pusher.report import render_json, render_text

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="numerx-push",
        description=(
            "Upload CSV files to the NumerX data service and wait until each is indexed. "
            "Provide either a file or a directory; the directory takes over if both are given."
        ),
    )
    parser.add_argument("-a", "--authorization", default=None, help="Authorization key, sent verbatim.")
    parser.add_argument("-b", "--base-url", dest="base_url", default=None, help="Base URL of the NumerX service.")
    parser.add_argument(
        "-t",
        "--type",
        dest="kind",
        default=RequestKind.VIEWERSHIP.token,
        help=f"Request/data type, one of: {', '.join(RequestKind.tokens())}.",
    )
    parser.add_argument("-f", "--file", dest="filename", default=None, help="Input CSV file to process.")
    parser.add_argument("-d", "--dir", dest="directory", default=None, help="Directory searched for *.csv files.")
    parser.add_argument("-c", "--concurrency", type=int, default=None, help="Number of files uploaded concurrently.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log request and response details.")
    parser.add_argument("-s", "--sleep", type=float, default=None, help="Sleep time between polls, in minutes.")
    parser.add_argument("-r", "--retry", type=int, default=None, help="Upload attempts per file.")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request HTTP timeout, in seconds.")
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print the report as JSON.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("path", nargs="?", default=None, help="Input file when neither -f nor -d is given.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    filename = args.filename
    if filename is None and args.directory is None:
        filename = args.path

    try:
        settings = load_settings(
            authorization=args.authorization,
            base_url=args.base_url,
            kind_token=args.kind,
            concurrency=args.concurrency,
            poll_interval_minutes=args.sleep,
            retry_count=args.retry,
            verbose=args.verbose,
            http_timeout_seconds=args.timeout,
        )
        files = collect_input_files(filename=filename, directory=args.directory)
    except UnknownRequestKindError as exc:
        print(f"Wrong request type parameter value provided: {exc.token}", file=sys.stderr)
        print("Valid values are:", file=sys.stderr)
        for token in exc.valid_tokens:
            print(token, file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        parser.print_usage(sys.stderr)
        return EXIT_CONFIG_ERROR

    log_event(
        logger,
        logging.DEBUG,
        "settings_loaded",
        base_url=settings.base_url,
        kind=settings.kind.token,
        files=len(files),
        concurrency=settings.concurrency,
        poll_interval_minutes=settings.poll_interval_minutes,
        retry_count=settings.retry_count,
    )

    result = PusherPipeline(settings=settings).run(files)
    print(render_json(result) if args.as_json else render_text(result))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
