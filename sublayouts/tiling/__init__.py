"""
sublayouts.tiling - Grupos de ventanas y layouts anidados.

Este paquete contiene:
    - rect        : Estructura Rect para geometria de areas
    - layouts     : Layouts (Tall, Wide, Monocle, ThreeColumn, LayoutCycle)
    - groups      : GroupTable y reconciliacion con el workspace
    - allocator   : Asignacion de layouts interiores por grupo
    - rewriter    : Reordenamiento del Stack para grupos contiguos
    - sublayout   : Sublayout - modificador con comandos de grupo
    - directional : Merges direccionales (pull/push)
    - workspace   : Workspace - host del modificador
    - persistence : Guardado y restauracion del estado
"""

from sublayouts.tiling.rect import Rect
from sublayouts.tiling.layouts import (
    Layout,
    LayoutCycle,
    LayoutType,
    MonocleLayout,
    TallLayout,
    ThreeColumnLayout,
    WideLayout,
)
from sublayouts.tiling.groups import GroupTable, reconcile
from sublayouts.tiling.allocator import LayoutDefaults, Slot, SlotPairing
from sublayouts.tiling.sublayout import Sublayout, sub_layout, sub_tabbed
from sublayouts.tiling.directional import Direction
from sublayouts.tiling.workspace import Workspace

__all__ = [
    "Rect",
    "Layout",
    "LayoutCycle",
    "LayoutType",
    "MonocleLayout",
    "TallLayout",
    "ThreeColumnLayout",
    "WideLayout",
    "GroupTable",
    "reconcile",
    "LayoutDefaults",
    "Slot",
    "SlotPairing",
    "Sublayout",
    "sub_layout",
    "sub_tabbed",
    "Direction",
    "Workspace",
]
