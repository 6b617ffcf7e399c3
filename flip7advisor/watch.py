from __future__ import annotations
import argparse
import json
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Set

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .decision_engine import DecisionEngine
from .report import format_report
from .state import RoundState


def load_snapshot(path: Path) -> RoundState:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError("Snapshot must be a JSON object")
    return RoundState.from_dict(data)


@dataclass
class App:
    decision: DecisionEngine
    settle_delay: float = 0.10

    def handle_snapshot(self, path: Path) -> None:
        # small delay to avoid partial writes
        time.sleep(self.settle_delay)
        try:
            state = load_snapshot(path)
        except (OSError, ValueError) as exc:
            print(f"Skipping {path.name}: {exc}")
            return
        out = self.decision.compute(state)
        print()
        print(f"Snapshot: {path.name}")
        print(format_report(state, out))


class SnapshotHandler(FileSystemEventHandler):
    def __init__(self, app: App, exts: Set[str]) -> None:
        self.app = app
        self.exts = exts

    def _maybe_handle(self, src: str) -> None:
        if not src:
            return
        p = Path(src)
        if p.suffix.lower() not in self.exts:
            return
        self.app.handle_snapshot(p)

    def on_created(self, event):  # type: ignore[override]
        if event.is_directory:
            return
        self._maybe_handle(event.src_path)

    def on_moved(self, event):  # type: ignore[override]
        if event.is_directory:
            return
        self._maybe_handle(getattr(event, "dest_path", ""))


def main() -> None:
    parser = argparse.ArgumentParser(description="Watch a folder for round snapshots (JSON) and print Flip 7 advice for each.")
    parser.add_argument("--watch", required=True, help="Folder to watch for snapshot files.")
    parser.add_argument("--ext", action="append", default=[".json"], help="Allowed snapshot extensions (repeatable).")

    args = parser.parse_args()
    watch_dir = Path(args.watch).expanduser()

    if not watch_dir.exists():
        raise SystemExit(f"Watch dir does not exist: {watch_dir}")

    app = App(decision=DecisionEngine())
    exts = {e.lower() if e.startswith(".") else f".{e.lower()}" for e in args.ext}
    handler = SnapshotHandler(app, exts)
    observer = Observer()
    observer.schedule(handler, str(watch_dir), recursive=False)

    print(f"Watching: {watch_dir}")
    print("Waiting for round snapshots...")

    observer.start()
    try:
        while True:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()


if __name__ == "__main__":
    main()
