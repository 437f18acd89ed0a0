"""
sublayouts.tiling.allocator - Asignacion de layouts interiores por grupo.

En cada redibujado, despues de que la arrangement exterior asigno un
rectangulo a la ventana representante de cada grupo, el allocator:

    1. Elige una instancia de layout interior para cada grupo: reutiliza
       la del slot anterior o crea una nueva a partir de LayoutDefaults.
    2. Reproduce los mensajes diferidos dirigidos a miembros del grupo.
    3. Corre el layout interior dentro del rectangulo del grupo.
    4. Guarda (layout actualizado, Stack del grupo) como slot para el
       siguiente redibujado.

Por defecto las instancias siguen el orden de los slots, no la identidad
del grupo (SlotPairing.POSITION): si la arrangement exterior reordena los
grupos, cada grupo hereda la instancia que ocupaba su posicion.
SlotPairing.GROUP hace que la instancia siga al grupo.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from sublayouts.core.messages import Message, NextLayout
from sublayouts.core.stack import Stack, WindowId
from sublayouts.tiling.groups import GroupTable
from sublayouts.tiling.layouts import Layout, MonocleLayout, Placement

log = logging.getLogger(__name__)

# (mensaje, ventana destino)
DeferredMessage = tuple[Message, WindowId]


class SlotPairing(enum.Enum):
    """Como se asocian las instancias anteriores a los grupos actuales."""
    POSITION = "position"
    GROUP = "group"


@dataclass(frozen=True, slots=True)
class Slot:
    """Instancia de layout interior y el Stack del grupo que manejo."""

    layout: Layout
    stack: Stack


# ============================================================================
# LayoutDefaults
# ============================================================================
@dataclass(frozen=True)
class LayoutDefaults:
    """
    Directiva de layouts por defecto para grupos nuevos.

    Atributos:
        advance_counts: advance_counts[i] es cuantas veces avanzar (NextLayout)
                        el layout base para el grupo en la posicion i.
                        Las posiciones sin entrada usan el base sin avanzar.
        base:           Layout interior base.
    """

    advance_counts: tuple[int, ...] = ()
    base: Layout = field(default_factory=lambda: MonocleLayout(gap=0))

    def seed(self, position: int) -> Layout:
        """Instancia nueva para un grupo en *position*."""
        if position >= len(self.advance_counts):
            return self.base
        return advance(self.base, self.advance_counts[position])


def advance(layout: Layout, steps: int) -> Layout:
    """Aplica NextLayout *steps* veces; un rechazo deja el layout igual."""
    for _ in range(max(0, steps)):
        layout = layout.handle_message(NextLayout()) or layout
    return layout


# ============================================================================
# Resultado
# ============================================================================
@dataclass(slots=True)
class Allocation:
    """Resultado de un redibujado."""

    placements: list[Placement] = field(default_factory=list)
    slots: list[Slot] = field(default_factory=list)


# ============================================================================
# Allocator
# ============================================================================
def _pick_layout(
    position: int,
    group: Stack,
    previous: Sequence[Slot],
    used: set[int],
    defaults: LayoutDefaults,
    pairing: SlotPairing,
) -> tuple[Layout, bool]:
    """Retorna (layout, reutilizado)."""
    if pairing is SlotPairing.POSITION:
        if position < len(previous):
            used.add(position)
            return previous[position].layout, True
        return defaults.seed(position), False

    # Por identidad: el primer slot libre cuyo grupo comparte miembros
    members = set(group.flatten())
    for i, slot in enumerate(previous):
        if i in used:
            continue
        if slot.stack.focus == group.focus or members.intersection(slot.stack.flatten()):
            used.add(i)
            return slot.layout, True
    return defaults.seed(position), False


def replay(
    layout: Layout, group: Stack, queue: Sequence[DeferredMessage]
) -> Layout:
    """
    Aplica en orden los mensajes de *queue* dirigidos a miembros de
    *group*.  Un rechazo (None) deja el layout como estaba.
    """
    for message, target in queue:
        if target not in group:
            continue
        replacement = layout.handle_message(message)
        if replacement is not None:
            layout = replacement
    return layout


def allocate(
    arrangement: Sequence[Placement],
    table: GroupTable,
    previous: Sequence[Slot],
    queue: Sequence[DeferredMessage],
    defaults: LayoutDefaults,
    pairing: SlotPairing = SlotPairing.POSITION,
) -> Allocation:
    """
    Resuelve el layout interior de cada grupo y calcula las posiciones
    finales.

    Args:
        arrangement: (representante, rectangulo) en el orden de la
                     arrangement exterior.
        table:       Tabla de grupos reconciliada.
        previous:    Slots del redibujado anterior.
        queue:       Mensajes diferidos, en orden de llegada.
        defaults:    Directiva para instancias nuevas.
        pairing:     Politica de reutilizacion de instancias.

    Returns:
        Allocation con las posiciones concatenadas (orden exterior, y
        dentro de cada grupo el orden del layout interior) y los slots
        a persistir, en el mismo orden.
    """
    result = Allocation()
    used: set[int] = set()

    for position, (representative, rect) in enumerate(arrangement):
        group = table.get(representative)
        if group is None:
            log.debug("allocate: %r no tiene grupo, sin posiciones", representative)
            continue

        layout, reused = _pick_layout(position, group, previous, used, defaults, pairing)
        layout = replay(layout, group, queue)

        placements, replacement = layout.run(group, rect)
        if replacement is not None:
            layout = replacement

        result.placements.extend(placements)
        result.slots.append(Slot(layout, group))

        log.debug(
            "allocate[%d] %s -> %s en %s (%s)",
            position,
            group,
            layout.name,
            rect,
            "reutilizado" if reused else "nuevo",
        )

    return result
