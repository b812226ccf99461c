import argparse
import sys
from pathlib import Path

from sourcemap_worker import __version__
from sourcemap_worker.config.settings import Settings
from sourcemap_worker.logging.logger import Log
from sourcemap_worker.processor.exceptions import RootDirectoryError
from sourcemap_worker.worker.batch_runner import build_batch_runner

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sourcemap-worker",
        description=(
            "Minify fingerprinted scripts under <root>/public/assets with source maps "
            "and reuse the output for plain files with identical content."
        ),
    )
    parser.add_argument("root", help="path to the application root")
    parser.add_argument(
        "-t",
        "--threads",
        type=int,
        default=None,
        help="number of concurrent minification tasks (default: 3)",
    )
    parser.add_argument(
        "-Z",
        "--no-gzip",
        dest="gzip",
        action="store_false",
        default=None,
        help="do not gzip files",
    )
    parser.add_argument(
        "-e",
        "--engine",
        default=None,
        help=(
            "minifier engine: rjsmin or terser (default: rjsmin). rjsmin maps list the "
            "original source but carry no position mappings; use terser for line-accurate maps"
        ),
    )
    parser.add_argument("--log-level", default=None, help="log level (default: INFO)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, object]:
    overrides: dict[str, object] = {
        "threads": args.threads,
        "gzip": args.gzip,
        "minifier_engine": args.engine,
        "log_level": args.log_level,
    }
    return {key: value for key, value in overrides.items() if value is not None}


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> load settings -> run one batch."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings(**_overrides(args))
        Log.configure(settings.log_level)
    except ValueError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        runner = build_batch_runner(settings)
    except ValueError as exc:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        report = runner.run(Path(args.root))
    except RootDirectoryError as exc:
        Log.error(str(exc))
        parser.print_help(sys.stderr)
        return EXIT_USAGE

    return EXIT_OK if report.ok else EXIT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
