import logging
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication

from phpactor_complete.services.symbol_at_cursor import symbol_at_cursor
from phpactor_complete.settings_store import JsonSettingsStore
from phpactor_complete.ui.completion_manager import CompletionManager

USAGE = "usage: main.py FILE OFFSET [--prefix TEXT] [--settings PATH] [--verbose]"


def _split_cli_args(argv: list[str]) -> tuple[list[str], dict[str, str], bool]:
    positional: list[str] = []
    options: dict[str, str] = {}
    verbose = False
    idx = 0
    while idx < len(argv):
        arg = argv[idx]
        if arg in {"-v", "--verbose"}:
            verbose = True
        elif arg in {"--prefix", "--settings"}:
            if idx + 1 >= len(argv):
                raise ValueError(f"{arg} needs a value")
            options[arg[2:]] = argv[idx + 1]
            idx += 1
        else:
            positional.append(arg)
        idx += 1
    return positional, options, verbose


def _load_settings(path_value: str | None) -> dict:
    if not path_value:
        return {}
    store = JsonSettingsStore(Path(path_value).expanduser())
    store.load()
    if store.last_error:
        print(f"[phpactor-complete] Ignoring settings file: {store.last_error}", file=sys.stderr)
    return dict(store.completion_settings())


def main(argv: list[str] | None = None) -> int:
    try:
        positional, options, verbose = _split_cli_args(list(sys.argv[1:] if argv is None else argv))
        file_path, offset_text = positional
        offset = int(offset_text)
    except ValueError as exc:
        print(f"{USAGE}\n{exc}" if str(exc) else USAGE, file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        source = Path(file_path).read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Cannot read {file_path}: {exc}", file=sys.stderr)
        return 1
    if not 0 <= offset <= len(source):
        print(f"Offset {offset} is outside {file_path} (length {len(source)}).", file=sys.stderr)
        return 2

    settings = _load_settings(options.get("settings"))
    settings["request_async"] = False

    app = QCoreApplication.instance() or QCoreApplication([sys.argv[0]])
    manager = CompletionManager(settings=settings, parent=app)
    manager.statusMessage.connect(lambda text: print(f"[phpactor-complete] {text}", file=sys.stderr))
    try:
        manager.open_buffer(file_path, lambda: (source, offset))
        prefix = options.get("prefix")
        if prefix is None:
            prefix = symbol_at_cursor(source, offset) or ""
        for candidate in manager.candidates(file_path, prefix):
            print(f"{candidate.display_text}\t{candidate.kind}\t{candidate.annotation}")
    finally:
        manager.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
