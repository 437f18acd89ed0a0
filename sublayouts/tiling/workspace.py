"""
sublayouts.tiling.workspace - Workspace con grupos de ventanas.

Cada workspace tiene un ID, un nombre, el Stack de sus ventanas, la
arrangement exterior (un LayoutCycle) y un Sublayout que agrupa
ventanas.  Es el "host" del modificador: le presta su Stack, acepta
reordenamientos y cambios de foco, y corre el redibujado en dos fases.

El workspace no sabe nada de monitores: el llamador le pasa el area de
trabajo cuando le pide que se redibuje.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Optional

from sublayouts.core.messages import GroupMessage, Message, NextLayout, PrevLayout
from sublayouts.core.stack import Stack, WindowId, flatten, insert_up
from sublayouts.tiling import persistence
from sublayouts.tiling.directional import Direction, find_nearest_window
from sublayouts.tiling.layouts import (
    Layout,
    LayoutCycle,
    MonocleLayout,
    Placement,
    TallLayout,
    ThreeColumnLayout,
    WideLayout,
)
from sublayouts.tiling.rect import Rect
from sublayouts.tiling.sublayout import Sublayout, sub_tabbed

log = logging.getLogger(__name__)


# Layouts exteriores por defecto para cada workspace nuevo
def _default_layouts() -> list[Layout]:
    """Crea una copia fresca de los layouts por defecto."""
    return [
        TallLayout(),
        WideLayout(),
        MonocleLayout(),
        ThreeColumnLayout(),
    ]


class Workspace:
    """
    Workspace virtual con ventanas agrupables.

    Uso tipico:
        ws = Workspace(1)
        ws.add_window("term")
        ws.add_window("editor")
        ws.send_message(Merge("editor", "term"))
        placements = ws.redraw(Rect(0, 0, 1920, 1080))
    """

    def __init__(
        self,
        ws_id: int,
        name: str | None = None,
        layouts: list[Layout] | None = None,
        modifier: Sublayout | None = None,
    ) -> None:
        self._id = ws_id
        self._name = name or f"Workspace {ws_id}"
        self._layout: Layout = LayoutCycle(
            layouts if layouts is not None else _default_layouts()
        )
        self._modifier = modifier if modifier is not None else sub_tabbed()

        self._stack: Optional[Stack] = None
        self._placements: list[Placement] = []
        self._area: Optional[Rect] = None

    # ------------------------------------------------------------------
    # Propiedades basicas
    # ------------------------------------------------------------------
    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, value: str) -> None:
        self._name = value

    @property
    def modifier(self) -> Sublayout:
        return self._modifier

    @property
    def outer_layout(self) -> Layout:
        """Arrangement exterior activa."""
        return self._layout

    @property
    def layout_name(self) -> str:
        return self._layout.name

    @property
    def placements(self) -> list[Placement]:
        """Posiciones calculadas en el ultimo redraw (copia)."""
        return list(self._placements)

    @property
    def area(self) -> Optional[Rect]:
        return self._area

    # ------------------------------------------------------------------
    # Ventanas (contrato Host)
    # ------------------------------------------------------------------
    @property
    def stack(self) -> Optional[Stack]:
        return self._stack

    @property
    def windows(self) -> list[WindowId]:
        return flatten(self._stack)

    @property
    def window_count(self) -> int:
        return len(self._stack) if self._stack is not None else 0

    @property
    def focused(self) -> Optional[WindowId]:
        return self._stack.focus if self._stack is not None else None

    def contains(self, window: WindowId) -> bool:
        return self._stack is not None and window in self._stack

    def replace_stack(self, stack: Optional[Stack]) -> None:
        self._stack = stack

    def focus_window(self, window: WindowId) -> bool:
        """Enfoca *window*.  False si no esta en el workspace."""
        if self._stack is None:
            return False
        focused = self._stack.focus_on(window)
        if focused is None:
            return False
        self._stack = focused
        return True

    def add_window(self, window: WindowId) -> bool:
        """
        Agrega una ventana encima del foco y la enfoca.

        Returns:
            True si se agrego, False si ya estaba.
        """
        if self.contains(window):
            return False
        self._stack = insert_up(self._stack, window)
        log.info("WS %d +WIN %s", self._id, window)
        return True

    def remove_window(self, window: WindowId) -> bool:
        """
        Remueve una ventana.  Su grupo la pierde en el siguiente redraw.

        Returns:
            True si se removio, False si no estaba.
        """
        if not self.contains(window):
            return False
        self._stack = self._stack.delete(window)
        log.info("WS %d -WIN %s", self._id, window)
        return True

    # ------------------------------------------------------------------
    # Foco (salta ventanas ocultas dentro de grupos)
    # ------------------------------------------------------------------
    def focus_down(self) -> Optional[WindowId]:
        return self._cycle_focus(Stack.focus_down)

    def focus_up(self) -> Optional[WindowId]:
        return self._cycle_focus(Stack.focus_up)

    def _cycle_focus(self, step: Callable[[Stack], Stack]) -> Optional[WindowId]:
        if self._stack is None:
            return None
        hidden = set(self._modifier.hidden_windows())
        st = step(self._stack)
        for _ in range(len(self._stack)):
            if st.focus not in hidden:
                break
            st = step(st)
        else:
            return self.focused
        self._stack = st
        return st.focus

    # ------------------------------------------------------------------
    # Mensajes
    # ------------------------------------------------------------------
    def send_message(self, message: Message) -> bool:
        """
        Entrega *message* al modificador y, si no es un comando de
        grupo, tambien a la arrangement exterior.

        Returns:
            True si algo cambio.
        """
        changed = self._modifier.handle_message(message, self)
        if not isinstance(message, GroupMessage):
            changed = self.send_outer(message) or changed
        return changed

    def send_outer(self, message: Message) -> bool:
        """Entrega *message* solo a la arrangement exterior."""
        replacement = self._layout.handle_message(message)
        if replacement is None:
            return False
        self._layout = replacement
        return True

    def next_layout(self) -> bool:
        """Cambia la arrangement exterior a la siguiente (circular)."""
        changed = self.send_outer(NextLayout())
        if changed:
            log.info("WS %d layout -> %s", self._id, self.layout_name)
        return changed

    def prev_layout(self) -> bool:
        changed = self.send_outer(PrevLayout())
        if changed:
            log.info("WS %d layout -> %s", self._id, self.layout_name)
        return changed

    # ------------------------------------------------------------------
    # Redraw
    # ------------------------------------------------------------------
    def redraw(self, area: Rect) -> list[Placement]:
        """
        Recalcula las posiciones de todas las ventanas dentro de *area*.

        Corre las dos fases del modificador alrededor de la arrangement
        exterior: modify_layout -> outer.run -> redo_layout.
        """
        representatives = self._modifier.modify_layout(self)
        arrangement, replacement = self._layout.run(representatives, area)
        if replacement is not None:
            self._layout = replacement

        self._placements = self._modifier.redo_layout(self, arrangement)
        self._area = area

        log.debug(
            "WS %d redraw: %s | %d grupos, %d ventanas | area=%s",
            self._id,
            self.layout_name,
            len(arrangement),
            len(self._placements),
            area,
        )
        return self.placements

    def rect_of(self, window: WindowId) -> Optional[Rect]:
        for w, rect in self._placements:
            if w == window:
                return rect
        return None

    def window_in_direction(self, direction: Direction) -> Optional[WindowId]:
        """
        Ventana visible mas cercana al foco en *direction*, segun las
        posiciones del ultimo redraw.
        """
        focused = self.focused
        if focused is None:
            return None
        hidden = set(self._modifier.hidden_windows())
        candidates = {
            w: rect
            for w, rect in self._placements
            if w not in hidden and self.contains(w)
        }
        return find_nearest_window(focused, candidates, direction)

    # ------------------------------------------------------------------
    # Estado
    # ------------------------------------------------------------------
    def save_state(self) -> dict[str, Any]:
        """Estado del workspace (ventanas, layout exterior y grupos)."""
        return {
            "stack": persistence.encode_stack(self._stack) if self._stack is not None else None,
            "layout": self._layout.to_state(),
            "sublayout": persistence.dump_sublayout(self._modifier),
        }

    def restore_state(self, data: dict[str, Any]) -> bool:
        """
        Restaura un estado guardado con save_state().

        El modificador siempre se restaura (vacio si su estado es
        invalido).  Si el Stack o el layout exterior son invalidos se
        conservan los actuales y se retorna False.  Si *data* no es un
        dict no se toca nada.
        """
        if not isinstance(data, dict):
            log.warning("WS %d: estado invalido (%s), se ignora", self._id, type(data).__name__)
            return False

        self._modifier = persistence.restore_sublayout(
            data.get("sublayout"),
            self._modifier.defaults,
            self._modifier.pairing,
        )
        try:
            raw_stack = data.get("stack")
            stack = persistence.decode_stack(raw_stack) if raw_stack is not None else None
            layout = Layout.from_state(data["layout"])
        except (persistence.StateRestoreError, KeyError, TypeError, ValueError) as exc:
            log.warning("WS %d: estado invalido, se conserva el actual: %s", self._id, exc)
            return False

        self._stack = stack
        self._layout = layout
        self._placements = []
        log.info("WS %d restaurado: %d ventanas, layout=%s", self._id, self.window_count, self.layout_name)
        return True

    # ------------------------------------------------------------------
    # Debug
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        lines = [
            f"--- Workspace {self._id}: {self._name} ---",
            f"    Layout: {self.layout_name}",
            f"    Ventanas: {self.window_count}",
            f"    Stack: {self._stack}",
        ]
        for w, rect in self._placements:
            role = "focus" if w == self.focused else "win"
            lines.append(f"    [{role}] {w} {rect}")
        lines.append(self._modifier.dump_state())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Workspace(id={self._id}, name={self._name!r}, "
            f"layout={self.layout_name}, "
            f"windows={self.window_count})"
        )
