import curses
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version

from app_state import AppState
from config_paths import LOG_PATH, ensure_config_dirs
from file_type_handler import FileTypeHandler, UnsupportedFileType

# Make ESC snappy
os.environ.setdefault("ESCDELAY", "25")
from orchestrator import Orchestrator

logger = logging.getLogger(__name__)

USAGE = (
    "cellgrid - terminal spreadsheet grid\n\n"
    "Usage:\n"
    "  cellgrid [path]     open .csv, .xlsx or .parquet (created on save)\n"
    "  cellgrid -v         print version\n"
    "  cellgrid -h         show this help\n"
    "  cellgrid --debug    log debug output to the config dir\n"
)


def _version() -> str:
    try:
        return version("cellgrid")
    except PackageNotFoundError:
        return "0.0.0"


def configure_logging(debug: bool = False, path: str = LOG_PATH):
    ensure_config_dirs()
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def load_state(path: str | None) -> AppState:
    if path is None:
        return AppState()
    handler = FileTypeHandler(path)
    sheets = handler.load_or_create()
    return AppState(sheets, file_path=path, file_handler=handler)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    if "-v" in args or "-V" in args:
        print(_version())
        return 0

    if "-h" in args or "--help" in args:
        print(USAGE)
        return 0

    debug = "--debug" in args
    args = [a for a in args if a != "--debug"]
    if len(args) > 1:
        print(USAGE, file=sys.stderr)
        return 2

    configure_logging(debug)
    path = args[0] if args else None
    try:
        state = load_state(path)
    except (UnsupportedFileType, OSError, ValueError) as exc:
        logger.error("load failed for %s: %s", path, exc)
        print(f"Load failed: {exc}", file=sys.stderr)
        return 1

    logger.info("opened %s (%d sheets)", path or "<new>", len(state.sheet_order))
    curses.wrapper(lambda stdscr: Orchestrator(stdscr, state).run())
    return 0


if __name__ == "__main__":
    sys.exit(main())
