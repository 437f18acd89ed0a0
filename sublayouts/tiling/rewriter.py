"""
sublayouts.tiling.rewriter - Reordenamiento del Stack del workspace.

La arrangement exterior solo ve una ventana por grupo, asi que los
miembros de cada grupo deben quedar contiguos en el Stack del host para
que ocultar o levantar el grupo sea coherente.  regroup() quita del
Stack cada ventana agrupada y la reinserta justo encima del foco,
respetando el orden interno de cada grupo y el orden de los
representantes en el host.
"""

from __future__ import annotations

import logging
from typing import Optional

from sublayouts.core.stack import Stack, WindowId, insert_up
from sublayouts.tiling.groups import GroupTable

log = logging.getLogger(__name__)


def grouped_order(host: Stack, table: GroupTable) -> list[WindowId]:
    """
    Ventanas agrupadas en el orden en que deben quedar: grupo por grupo
    segun el orden de los representantes en *host*, y dentro de cada
    grupo segun su propio Stack.  Solo incluye ventanas presentes en
    *host*.
    """
    live = set(host.flatten())
    order: list[WindowId] = []
    for rep in host.flatten():
        group = table.get(rep)
        if group is None:
            continue
        order.extend(w for w in group.flatten() if w in live)
    return order


def regroup(host: Optional[Stack], table: GroupTable) -> Optional[Stack]:
    """
    Calcula el nuevo Stack del host con los grupos contiguos.

    Returns:
        El Stack reordenado, o None si el host esta vacio o el orden no
        cambia (no hay nada que aplicar).
    """
    if host is None:
        return None

    grouped = grouped_order(host, table)
    if not grouped:
        return None

    members = set(grouped)
    rest = host.filter(lambda w: w not in members)

    rebuilt = rest
    for w in reversed(grouped):
        rebuilt = insert_up(rebuilt, w)

    # Devolver el foco a donde estaba
    rebuilt = rebuilt.focus_on(host.focus) or rebuilt

    if rebuilt.flatten() == host.flatten():
        return None

    log.debug("regroup: %s -> %s", host, rebuilt)
    return rebuilt
