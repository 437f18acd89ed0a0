"""
sublayouts - Demo session.

Run with:  python -m sublayouts

Arma un workspace con cinco ventanas, las agrupa con los comandos del
keymap y muestra el estado despues de cada paso.
"""

import logging
import sys

from sublayouts.config.keymap import (
    DEFAULT_GROUP_KEYMAP,
    DEFAULT_MERGE_KEYMAP,
    build_keymap,
    press,
)
from sublayouts.core.combo_parser import parse_combo
from sublayouts.core.commands import CommandDispatcher, build_group_commands
from sublayouts.core.messages import Broadcast, IncGap, Merge
from sublayouts.tiling import persistence
from sublayouts.tiling.layouts import LayoutCycle, MonocleLayout, TallLayout
from sublayouts.tiling.rect import Rect
from sublayouts.tiling.sublayout import sub_layout
from sublayouts.tiling.workspace import Workspace

SCREEN = Rect(0, 0, 1920, 1080)


class SafeStreamHandler(logging.StreamHandler):
    """Handler that replaces unencodable characters instead of crashing."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            enc = getattr(self.stream, "encoding", "utf-8") or "utf-8"
            safe = msg.encode(enc, errors="replace").decode(enc, errors="replace")
            self.stream.write(safe + self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)


def setup_logging(level: int = logging.DEBUG) -> None:
    fmt = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
    handler = SafeStreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # El allocator loguea cada grupo en cada redraw
    logging.getLogger("sublayouts.tiling.allocator").setLevel(logging.INFO)


def _step(ws: Workspace, title: str) -> None:
    ws.redraw(SCREEN)
    print("")
    print(f"== {title}")
    print(ws.dump_state())


def main() -> None:
    setup_logging()

    # Grupo 0: pestanas; grupo 1: empieza en Tall
    modifier = sub_layout(
        advance_counts=[0, 1],
        base=LayoutCycle([MonocleLayout(gap=0), TallLayout(gap=0)]),
    )
    ws = Workspace(1, "demo", modifier=modifier)
    for name in ("term", "editor", "browser", "mail", "music"):
        ws.add_window(name)

    dispatcher = CommandDispatcher()
    build_group_commands(dispatcher, ws)
    keymap = build_keymap(dispatcher, DEFAULT_MERGE_KEYMAP)
    group_keymap = build_keymap(dispatcher, DEFAULT_GROUP_KEYMAP)

    _step(ws, "inicio")

    ws.send_message(Merge("editor", "term"))
    _step(ws, "merge editor <- term")

    press(dispatcher, keymap, *parse_combo("mod+ctrl+j"))
    _step(ws, "pull_group_down")

    press(dispatcher, group_keymap, *parse_combo("mod+space"))
    _step(ws, "siguiente layout interior")

    ws.send_message(Broadcast(IncGap(4)))
    _step(ws, "broadcast IncGap")

    saved = persistence.dumps(ws.modifier)
    press(dispatcher, keymap, *parse_combo("mod+ctrl+m"))
    _step(ws, "merge_all")

    dispatcher.execute("unmerge_all")
    _step(ws, "unmerge_all")

    restored = persistence.loads(saved)
    print("")
    print("== estado guardado antes de merge_all")
    print(restored.dump_state())

    print("")
    print(dispatcher.dump_state())


if __name__ == "__main__":
    main()
