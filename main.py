# Main.py
""""" Entry point for the expression calculator.

   Responsibilities:
   - Evaluate piped stdin or the command line arguments once and exit
   - Otherwise load configuration and start the Qt GUI
   - Report errors with a caret line under the offending span (exit code 1)

"""""
import sys
import logging
import argparse
from pathlib import Path

from Calculator import config_manager as config_manager, Registry, error as E
from Calculator.MathEngine import Executor
from Calculator.debugger import Debugger

logger = logging.getLogger(__name__)


# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent


def check_files_exist():

    """
      Warn in development if the settings files are missing / moved / renamed.
      config_manager falls back to its defaults, so this is not fatal.
    """

    package_dir = PROJECT_ROOT / "Calculator"
    REQUIRED = [
        package_dir / "config.json",
        package_dir / "ui_strings.json",
    ]

    missing_files = [file_path.name for file_path in REQUIRED if not file_path.exists()]
    for file_name in missing_files:
        logger.warning("Missing settings file, using defaults: %s", file_name)
    return missing_files


def build_parser():
    parser = argparse.ArgumentParser(
        prog="calculator",
        description="Arbitrary precision expression calculator.",
    )
    parser.add_argument("expression", nargs="*", help="Expression to evaluate")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print the evaluation trace")
    parser.add_argument("-p", "--precision", type=int, default=None,
                        help="Digits after the decimal point (default: from config.json)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for rand()")
    parser.add_argument("--gui", action="store_true", help="Start the graphical calculator")
    return parser


def stdin_is_piped():
    return not sys.stdin.isatty()


def error_marker(expression, error):
    """Return the expression and a caret line under the error location."""
    if error.location is None:
        return ""
    carets = " " * error.location.start + "^" * max(error.location.size(), 1)
    return f"{expression}\n{carets}"


def run_immediate(expression, precision, debugger):
    executor = Executor(debugger)

    try:
        result = executor.execute(expression, precision)
    except E.MathError as e:
        if debugger.enabled:
            print(debugger)
        print(f"Error: {e}", file=sys.stderr)
        marker = error_marker(expression, e)
        if marker:
            print(marker, file=sys.stderr)
        return 1

    if debugger.enabled:
        print(debugger)

    print(result)
    return 0


def run_gui():
    # Imported lazily: PySide6 / pynput need a display
    from Calculator import UI as UI

    all_settings = config_manager.load_setting_value("all")
    logger.info("Config loaded: %s", all_settings)

    # Delegate control to the UI layer; the UI owns the event loop.
    return UI.main()


def run(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    check_files_exist()

    if args.seed is not None:
        Registry.seed_random(args.seed)

    try:
        precision = args.precision if args.precision is not None else config_manager.load_precision()
    except E.MathError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    if precision < 0:
        print(f"Error: Invalid precision: {precision}", file=sys.stderr)
        return 1

    debugger = Debugger(enabled=args.verbose)

    if args.gui:
        return run_gui()
    if args.expression:
        return run_immediate(" ".join(args.expression), precision, debugger)
    if stdin_is_piped():
        return run_immediate(sys.stdin.read(), precision, debugger)
    return run_gui()


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
