"""
sublayouts.tiling.groups - Tabla de grupos y reconciliacion.

Un grupo es un Stack de ventanas que se muestra como una sola unidad
(pestanas) dentro de un rectangulo de la arrangement exterior.  La
GroupTable asocia cada grupo a su ventana enfocada (la "key").

Invariantes:
    I1. keys == { stack.focus for stack in tabla }
    I2. cada ventana del workspace esta en exactamente un grupo
        (puede romperse temporalmente despues de UnMerge; la siguiente
        reconciliacion lo restablece).
    I3. ninguna ventana esta en dos grupos a la vez.

reconcile() deriva una tabla al dia a partir de la anterior y del
Stack plano que reporta el host.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from typing import Optional

from sublayouts.core.stack import Stack, WindowId, flatten

log = logging.getLogger(__name__)


# ============================================================================
# GroupTable
# ============================================================================
class GroupTable(Mapping[WindowId, Stack]):
    """
    Mapeo inmutable key -> Stack del grupo, con key == stack.focus.

    Las operaciones de modificacion retornan una tabla nueva.  La
    igualdad ignora el orden de insercion.
    """

    __slots__ = ("_groups",)

    def __init__(self, stacks: Iterable[Stack] = ()) -> None:
        # Si dos stacks comparten focus, gana el primero
        groups: dict[WindowId, Stack] = {}
        for st in stacks:
            groups.setdefault(st.focus, st)
        self._groups = groups

    @classmethod
    def singletons(cls, windows: Iterable[WindowId]) -> GroupTable:
        """Un grupo de una sola ventana por cada ventana."""
        return cls(Stack.single(w) for w in windows)

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------
    def __getitem__(self, key: WindowId) -> Stack:
        return self._groups[key]

    def __iter__(self) -> Iterator[WindowId]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    @property
    def stacks(self) -> list[Stack]:
        return list(self._groups.values())

    def windows(self) -> list[WindowId]:
        """Todas las ventanas de todos los grupos (con repeticiones si las hay)."""
        return [w for st in self._groups.values() for w in st.flatten()]

    def group_of(self, window: WindowId) -> Optional[Stack]:
        """Grupo cuya key es *window*, o el que la contiene como miembro."""
        st = self._groups.get(window)
        if st is not None:
            return st
        for st in self._groups.values():
            if window in st:
                return st
        return None

    def hidden_windows(self) -> list[WindowId]:
        """Miembros no enfocados de todos los grupos."""
        return [w for st in self._groups.values() for w in st.unfocused()]

    # ------------------------------------------------------------------
    # Modificaciones (retornan tabla nueva)
    # ------------------------------------------------------------------
    def replace(self, old_key: Optional[WindowId], stack: Stack) -> GroupTable:
        """Quita la entrada *old_key* (si existe) y agrega *stack* bajo su focus."""
        others = [
            st for key, st in self._groups.items() if key not in (old_key, stack.focus)
        ]
        return GroupTable([*others, stack])

    def without(self, *keys: WindowId) -> GroupTable:
        return GroupTable(st for key, st in self._groups.items() if key not in keys)

    def filter_windows(self, pred: Callable[[WindowId], bool]) -> GroupTable:
        """
        Filtra los miembros de cada grupo; los grupos que quedan vacios
        desaparecen y los demas se re-indexan por su (posible) nuevo focus.
        """
        survivors = (st.filter(pred) for st in self._groups.values())
        return GroupTable(st for st in survivors if st is not None)

    # ------------------------------------------------------------------
    # Invariantes
    # ------------------------------------------------------------------
    def violations(self, live: Iterable[WindowId] = ()) -> list[str]:
        """
        Lista legible de invariantes rotas respecto a *live*.

        Vacia si la tabla es consistente.
        """
        problems: list[str] = []
        for key, st in self._groups.items():
            if key != st.focus:
                problems.append(f"key {key!r} != focus {st.focus!r}")

        seen: set[WindowId] = set()
        for w in self.windows():
            if w in seen:
                problems.append(f"ventana {w!r} en dos grupos")
            seen.add(w)

        live = list(live)
        if live:
            missing = [w for w in live if w not in seen]
            extra = [w for w in seen if w not in set(live)]
            if missing:
                problems.append(f"ventanas sin grupo: {missing!r}")
            if extra:
                problems.append(f"ventanas fuera del workspace: {extra!r}")
        return problems

    # ------------------------------------------------------------------
    # Representacion
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if isinstance(other, GroupTable):
            return self._groups == other._groups
        return super().__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        groups = ", ".join(f"{k!r}: {st}" for k, st in self._groups.items())
        return f"GroupTable({{{groups}}})"


# ============================================================================
# Reconciliacion
# ============================================================================
def reconcile(host: Optional[Stack], previous: GroupTable) -> GroupTable:
    """
    Actualiza *previous* para seguir los cambios del workspace.

    Pasos:
        1. Ventanas nuevas en el host -> grupos de una sola ventana.
        2. Ventanas que ya no estan en el host -> se filtran de su grupo
           (el grupo desaparece si queda vacio).  Una ventana repetida en
           dos grupos se queda solo en el primero.
        3. Si el foco del host esta dentro de un grupo, ese grupo adopta
           el orden y el foco del host restringido a sus miembros, y se
           re-indexa bajo la ventana enfocada.

    Args:
        host:     Stack actual del workspace (None si esta vacio).
        previous: Tabla anterior.

    Returns:
        Tabla nueva que cumple I1-I3 respecto a *host*.
    """
    live = flatten(host)
    live_set = set(live)

    seen: set[WindowId] = set()
    stacks: list[Stack] = []
    dead = 0
    for st in previous.stacks:
        kept = st.filter(lambda w: w in live_set and w not in seen)
        dead += len(st) - (len(kept) if kept is not None else 0)
        if kept is None:
            continue
        seen.update(kept.flatten())
        stacks.append(kept)

    news = [w for w in live if w not in seen]
    table = GroupTable(stacks + [Stack.single(w) for w in news])

    if host is not None:
        group = table.group_of(host.focus)
        if group is not None:
            members = set(group.flatten())
            followed = host.filter(lambda w: w in members)
            if followed is not None and followed != group:
                table = table.replace(group.focus, followed)

    if news or dead:
        log.debug("reconcile: +%d nuevas, -%d muertas", len(news), dead)
    return table
