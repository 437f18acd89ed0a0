"""
sublayouts.tiling.sublayout - Modificador de layout con grupos anidados.

Sublayout envuelve la arrangement exterior de un workspace.  Cada grupo
de ventanas ocupa un solo rectangulo de la arrangement exterior y dentro
de el corre su propia arrangement interior (pestanas, tall, ...).

Un redibujado tiene dos fases que deben correr en orden:

    1. modify_layout(host)  -> reconcilia la tabla de grupos, deja los
       miembros de cada grupo contiguos en el host y retorna el Stack de
       representantes (una ventana por grupo) para la arrangement
       exterior.
    2. redo_layout(host, arrangement) -> con los rectangulos que asigno
       la arrangement exterior, resuelve el layout interior de cada
       grupo, reproduce los mensajes diferidos y retorna las posiciones
       finales de todas las ventanas.

Entre redibujados, handle_message() procesa los comandos de grupo
(Merge, UnMerge, ...) y encola los mensajes dirigidos a layouts
interiores.  Despues de UnMerge la ventana liberada queda sin grupo
hasta la siguiente reconciliacion.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Optional, Protocol

from sublayouts.core.messages import (
    Broadcast,
    Merge,
    MergeAll,
    Message,
    SubMessage,
    UnMerge,
    UnMergeAll,
    WithGroup,
)
from sublayouts.core.stack import Stack, WindowId, filter_stack, flatten
from sublayouts.tiling.allocator import (
    DeferredMessage,
    LayoutDefaults,
    Slot,
    SlotPairing,
    allocate,
)
from sublayouts.tiling.groups import GroupTable, reconcile
from sublayouts.tiling.layouts import Layout, MonocleLayout, Placement
from sublayouts.tiling.rewriter import regroup

log = logging.getLogger(__name__)


# ============================================================================
# Host
# ============================================================================
class Host(Protocol):
    """Lo que el modificador necesita del workspace que lo contiene."""

    @property
    def stack(self) -> Optional[Stack]:
        """Stack plano actual de ventanas (None si no hay ventanas)."""
        ...

    def replace_stack(self, stack: Optional[Stack]) -> None:
        """Reemplaza el orden (y foco) de las ventanas del workspace."""
        ...

    def focus_window(self, window: WindowId) -> None:
        """Mueve el foco de entrada a *window*."""
        ...


# ============================================================================
# Sublayout
# ============================================================================
class Sublayout:
    """
    Estado del modificador de un workspace: tabla de grupos, slots de
    layouts interiores del ultimo redibujado y cola de mensajes
    diferidos.

    Uso tipico (desde el host):
        stack = sub.modify_layout(host)
        arrangement, _ = outer.run(stack, area)
        placements = sub.redo_layout(host, arrangement)
    """

    def __init__(
        self,
        defaults: Optional[LayoutDefaults] = None,
        pairing: SlotPairing = SlotPairing.POSITION,
        table: Optional[GroupTable] = None,
        slots: Iterable[Slot] = (),
        queue: Iterable[DeferredMessage] = (),
    ) -> None:
        self._defaults = defaults if defaults is not None else LayoutDefaults()
        self._pairing = pairing
        self._table = table if table is not None else GroupTable()
        self._slots: list[Slot] = list(slots)
        self._queue: list[DeferredMessage] = list(queue)

    # ------------------------------------------------------------------
    # Propiedades
    # ------------------------------------------------------------------
    @property
    def table(self) -> GroupTable:
        return self._table

    @property
    def slots(self) -> list[Slot]:
        """Slots del ultimo redibujado (copia)."""
        return list(self._slots)

    @property
    def queue(self) -> list[DeferredMessage]:
        """Mensajes pendientes para el siguiente redibujado (copia)."""
        return list(self._queue)

    @property
    def defaults(self) -> LayoutDefaults:
        return self._defaults

    @property
    def pairing(self) -> SlotPairing:
        return self._pairing

    def hidden_windows(self) -> list[WindowId]:
        """Ventanas que no son el foco de su grupo (no visibles)."""
        return self._table.hidden_windows()

    def group_of(self, window: WindowId) -> Optional[Stack]:
        return self._table.group_of(window)

    # ------------------------------------------------------------------
    # Redibujado en dos fases
    # ------------------------------------------------------------------
    def reconcile(self, host: Host) -> GroupTable:
        """Sincroniza la tabla de grupos con el Stack actual del host."""
        self._table = reconcile(host.stack, self._table)
        return self._table

    def modify_layout(self, host: Host) -> Optional[Stack]:
        """
        Fase 1: reconcilia, reagrupa el host y retorna el Stack de
        representantes para la arrangement exterior.
        """
        self.reconcile(host)
        self._rewrite(host)
        return filter_stack(host.stack, lambda w: w in self._table)

    def redo_layout(
        self, host: Host, arrangement: Sequence[Placement]
    ) -> list[Placement]:
        """
        Fase 2: corre los layouts interiores dentro de los rectangulos
        que asigno la arrangement exterior.  Vacia la cola de mensajes.
        """
        self.reconcile(host)
        result = allocate(
            arrangement,
            self._table,
            self._slots,
            self._queue,
            self._defaults,
            self._pairing,
        )
        if self._queue:
            log.debug("redo_layout: %d mensajes diferidos consumidos", len(self._queue))
        self._slots = result.slots
        self._queue = []
        return result.placements

    # ------------------------------------------------------------------
    # Comandos
    # ------------------------------------------------------------------
    def handle_message(self, message: Message, host: Host) -> bool:
        """
        Procesa un comando de grupo o encola un mensaje para los layouts
        interiores.

        Returns:
            True si cambio el estado del modificador (tabla o cola).
        """
        if isinstance(message, SubMessage):
            return self._sub_message(message, host)
        if isinstance(message, Broadcast):
            return self._enqueue_visible(message.message, host)
        if isinstance(message, WithGroup):
            return self._with_group(message, host)
        if isinstance(message, Merge):
            return self._merge(message.source, message.target, host)
        if isinstance(message, UnMerge):
            return self._unmerge(message.window, host)
        if isinstance(message, MergeAll):
            return self._merge_all(message.window, host)
        if isinstance(message, UnMergeAll):
            return self._unmerge_all(host)
        # Cualquier otro mensaje se reenvia a todos los layouts interiores
        return self._enqueue_visible(message, host)

    def _sub_message(self, message: SubMessage, host: Host) -> bool:
        if message.window not in flatten(host.stack):
            log.debug("SubMessage: ventana desconocida %r", message.window)
            return False
        self._queue.append((message.message, message.window))
        return True

    def _enqueue_visible(self, message: Message, host: Host) -> bool:
        """
        Encola *message* para cada ventana visible del host.  Las
        ventanas ocultas dentro de un grupo se omiten para que cada
        grupo lo reciba una sola vez.
        """
        hidden = set(self._table.hidden_windows())
        targets = [w for w in flatten(host.stack) if w not in hidden]
        if not targets:
            return False
        self._queue.extend((message, w) for w in targets)
        return True

    def _with_group(self, message: WithGroup, host: Host) -> bool:
        group = self._table.group_of(message.window)
        if group is None:
            log.debug("WithGroup: %r no pertenece a ningun grupo", message.window)
            return False

        # El transform puede emitir otros comandos (merge_dir)
        before = self._table
        changed = message.transform(group)
        if changed is None or changed == group:
            return self._table != before

        members = set(changed.flatten())
        table = self._table.without(group.focus).filter_windows(
            lambda w: w not in members
        )
        self._set_table(table.replace(None, changed), host)

        if changed.focus != message.window:
            host.focus_window(changed.focus)
        return True

    def _merge(self, source: WindowId, target: WindowId, host: Host) -> bool:
        src = self._table.group_of(source)
        dst = self._table.group_of(target)
        if src is None or dst is None:
            log.debug("Merge(%r, %r): ventana sin grupo", source, target)
            return False
        if src.focus == dst.focus:
            return False

        table = self._table.without(src.focus, dst.focus)
        src = src.focus_on(source) or src
        merged = Stack(source, src.up, src.down + tuple(dst.flatten()))
        self._set_table(table.replace(None, merged), host)

        log.info("Merge %r <- %r: %s", source, target, merged)
        return True

    def _unmerge(self, window: WindowId, host: Host) -> bool:
        if window not in self._table.windows():
            log.debug("UnMerge: %r no esta en ningun grupo", window)
            return False
        self._set_table(self._table.filter_windows(lambda w: w != window), host)
        log.info("UnMerge %r", window)
        return True

    def _merge_all(self, window: WindowId, host: Host) -> bool:
        order: list[WindowId] = [w for w in flatten(host.stack) if w in self._table]
        order += [key for key in self._table if key not in order]
        members = [w for key in order for w in self._table[key].flatten()]

        everything = Stack.from_list(members)
        merged = everything.focus_on(window) if everything is not None else None
        if merged is None:
            log.debug("MergeAll: %r no esta en ningun grupo", window)
            return False

        self._set_table(GroupTable([merged]), host)
        log.info("MergeAll -> %s", merged)
        return True

    def _unmerge_all(self, host: Host) -> bool:
        table = GroupTable.singletons(self._table.windows())
        if table == self._table:
            return False
        self._set_table(table, host)
        log.info("UnMergeAll: %d grupos", len(table))
        return True

    # ------------------------------------------------------------------
    # Internos
    # ------------------------------------------------------------------
    def _set_table(self, table: GroupTable, host: Host) -> None:
        self._table = table
        self._rewrite(host)

    def _rewrite(self, host: Host) -> None:
        rebuilt = regroup(host.stack, self._table)
        if rebuilt is not None:
            host.replace_stack(rebuilt)

    # ------------------------------------------------------------------
    # Representacion
    # ------------------------------------------------------------------
    def dump_state(self) -> str:
        lines = [
            f"--- Sublayout ({self._pairing.value}) ---",
            f"    Grupos: {len(self._table)}",
            f"    Slots: {len(self._slots)}",
            f"    Cola: {len(self._queue)}",
        ]
        for key, group in self._table.items():
            lines.append(f"    [{key}] {group}")
        for i, slot in enumerate(self._slots):
            lines.append(f"    slot-{i}: {slot.layout.name} {slot.stack}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Sublayout(groups={len(self._table)}, "
            f"slots={len(self._slots)}, "
            f"queued={len(self._queue)})"
        )


# ============================================================================
# Constructores
# ============================================================================
def sub_layout(
    advance_counts: Iterable[int] = (),
    base: Optional[Layout] = None,
    pairing: SlotPairing = SlotPairing.POSITION,
) -> Sublayout:
    """
    Crea un modificador cuyos grupos nuevos usan *base* avanzado
    advance_counts[i] veces segun su posicion.
    """
    defaults = LayoutDefaults(
        advance_counts=tuple(advance_counts),
        base=base if base is not None else MonocleLayout(gap=0),
    )
    return Sublayout(defaults, pairing)


def sub_tabbed(pairing: SlotPairing = SlotPairing.POSITION) -> Sublayout:
    """Grupos mostrados como pestanas: Monocle sin gaps en cada grupo."""
    return sub_layout((), MonocleLayout(gap=0), pairing)
