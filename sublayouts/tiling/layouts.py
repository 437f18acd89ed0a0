"""
sublayouts.tiling.layouts - Arrangements (layouts) de ventanas.

Cada layout implementa la interfaz base `Layout`, que es el mismo
contrato para la arrangement exterior (un rectangulo por grupo) y para
las arrangements interiores (una por grupo):

    run(stack, area)        -> (placements, reemplazo | None)
    handle_message(message) -> reemplazo | None

Los layouts son valores: handle_message() nunca modifica la instancia,
retorna una copia ajustada o None si el mensaje no aplica.

Layouts disponibles:
    - TallLayout       : Master a la izquierda, stack a la derecha
    - WideLayout       : Master arriba, stack abajo
    - MonocleLayout    : Todas las ventanas ocupan el area (pestanas)
    - ThreeColumnLayout: Tres columnas (izquierda, centro master, derecha)
    - LayoutCycle      : Lista circular de layouts (NextLayout / PrevLayout)
"""

from __future__ import annotations

import abc
import copy
import enum
import logging
from typing import Any, Optional

from sublayouts.core.messages import (
    Expand,
    IncGap,
    IncMasterN,
    JumpToLayout,
    Message,
    NextLayout,
    PrevLayout,
    Shrink,
)
from sublayouts.core.stack import Stack, WindowId, flatten
from sublayouts.tiling.rect import Rect

log = logging.getLogger(__name__)

# (ventana, posicion final)
Placement = tuple[WindowId, Rect]


# ============================================================================
# LayoutType enum
# ============================================================================
class LayoutType(enum.Enum):
    """Identificador de cada tipo de layout."""
    TALL = "tall"
    WIDE = "wide"
    MONOCLE = "monocle"
    THREE_COLUMN = "three_column"
    CYCLE = "cycle"


# ============================================================================
# Helpers de gaps
# ============================================================================
def _gapped_rows(
    area: Rect, count: int, gap: int, left: int, right: int
) -> list[Rect]:
    """Filas de *area* con gap exterior arriba/abajo y gap//2 entre filas."""
    rects: list[Rect] = []
    for i, row in enumerate(area.slice_rows(count)):
        top = gap if i == 0 else gap // 2
        bottom = gap if i == count - 1 else gap // 2
        rects.append(Rect(
            x=row.x + left,
            y=row.y + top,
            w=max(0, row.w - left - right),
            h=max(0, row.h - top - bottom),
        ))
    return rects


def _gapped_columns(
    area: Rect, count: int, gap: int, top: int, bottom: int
) -> list[Rect]:
    """Columnas de *area* con gap exterior a los lados y gap//2 entre ellas."""
    rects: list[Rect] = []
    for i, col in enumerate(area.slice_columns(count)):
        left = gap if i == 0 else gap // 2
        right = gap if i == count - 1 else gap // 2
        rects.append(Rect(
            x=col.x + left,
            y=col.y + top,
            w=max(0, col.w - left - right),
            h=max(0, col.h - top - bottom),
        ))
    return rects


# ============================================================================
# Layout (clase base abstracta)
# ============================================================================
class Layout(abc.ABC):
    """
    Interfaz abstracta para un layout.

    Un layout recibe N ventanas y un area disponible, y calcula un
    rectangulo por ventana.  La correspondencia es por indice: el
    rectangulo[i] es la posicion de la ventana[i] en el orden aplanado
    del Stack.

    Parametros ajustables comunes:
        - master_ratio: Fraccion del area para el master (0.1 - 0.9).
        - gap:          Pixeles de separacion entre ventanas.
        - nmaster:      Numero de ventanas en el area master.
    """

    # Mensajes de ajuste que este layout entiende
    accepts: tuple[type[Message], ...] = (Shrink, Expand, IncGap)

    def __init__(
        self,
        master_ratio: float = 0.55,
        gap: int = 4,
        nmaster: int = 1,
    ) -> None:
        self._master_ratio = max(0.1, min(0.9, master_ratio))
        self._gap = max(0, gap)
        self._nmaster = max(0, nmaster)

    # ------------------------------------------------------------------
    # Propiedades
    # ------------------------------------------------------------------
    @property
    def master_ratio(self) -> float:
        return self._master_ratio

    @property
    def gap(self) -> int:
        return self._gap

    @property
    def nmaster(self) -> int:
        return self._nmaster

    # ------------------------------------------------------------------
    # Interfaz abstracta
    # ------------------------------------------------------------------
    @property
    @abc.abstractmethod
    def layout_type(self) -> LayoutType:
        ...

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Nombre legible del layout."""
        ...

    @abc.abstractmethod
    def arrange(self, count: int, area: Rect) -> list[Rect]:
        """
        Calcula las posiciones para *count* ventanas dentro de *area*.

        Returns:
            Lista de Rect con exactamente *count* elementos.
        """
        ...

    # ------------------------------------------------------------------
    # Contrato de arrangement
    # ------------------------------------------------------------------
    def run(
        self, stack: Optional[Stack], area: Rect
    ) -> tuple[list[Placement], Optional[Layout]]:
        """
        Posiciona las ventanas de *stack* dentro de *area*.

        Returns:
            (placements, reemplazo).  Los layouts simples nunca se
            reemplazan al correr, asi que el reemplazo es None.
        """
        windows = flatten(stack)
        if not windows:
            return [], None

        rects = self.arrange(len(windows), area)
        if len(rects) != len(windows):
            log.error(
                "Layout %s retorno %d rects para %d ventanas",
                self.name,
                len(rects),
                len(windows),
            )
            return [], None

        return list(zip(windows, rects)), None

    def handle_message(self, message: Message) -> Optional[Layout]:
        """
        Retorna una copia ajustada segun *message*, o None si el mensaje
        no aplica o no cambia nada.
        """
        if not isinstance(message, self.accepts):
            return None

        if isinstance(message, Shrink):
            changed = self._replace(_master_ratio=max(0.1, self._master_ratio - message.step))
        elif isinstance(message, Expand):
            changed = self._replace(_master_ratio=min(0.9, self._master_ratio + message.step))
        elif isinstance(message, IncMasterN):
            changed = self._replace(_nmaster=max(0, self._nmaster + message.delta))
        elif isinstance(message, IncGap):
            changed = self._replace(_gap=max(0, self._gap + message.delta))
        else:
            return None

        return None if changed == self else changed

    def _replace(self, **attrs: Any) -> Layout:
        new = copy.copy(self)
        for attr, value in attrs.items():
            setattr(new, attr, value)
        return new

    # ------------------------------------------------------------------
    # Serializacion
    # ------------------------------------------------------------------
    def to_state(self) -> dict[str, Any]:
        return {
            "type": self.layout_type.value,
            "master_ratio": self._master_ratio,
            "gap": self._gap,
            "nmaster": self._nmaster,
        }

    @staticmethod
    def from_state(data: dict[str, Any]) -> Layout:
        """
        Reconstruye un layout guardado con to_state().

        Raises:
            KeyError / ValueError: si el tipo o los campos son invalidos.
        """
        layout_type = LayoutType(data["type"])
        if layout_type is LayoutType.CYCLE:
            return LayoutCycle(
                [Layout.from_state(d) for d in data["layouts"]],
                index=int(data.get("index", 0)),
            )
        cls = LAYOUT_CLASSES[layout_type]
        return cls(
            master_ratio=float(data["master_ratio"]),
            gap=int(data["gap"]),
            nmaster=int(data.get("nmaster", 1)),
        )

    # ------------------------------------------------------------------
    # Representacion
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Layout):
            return NotImplemented
        return self.to_state() == other.to_state()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"master_ratio={self._master_ratio:.2f}, "
            f"gap={self._gap}, nmaster={self._nmaster})"
        )


# ============================================================================
# TallLayout - Master a la izquierda, stack a la derecha
# ============================================================================
class TallLayout(Layout):
    """
    Layout tipo 'tall' (master-stack vertical).

    Si hay nmaster ventanas o menos (o nmaster == 0), todas se apilan
    en una sola columna.  Si no, las primeras nmaster ocupan la columna
    izquierda segun master_ratio y las demas la columna derecha.

    Esquema (nmaster=1, 3 ventanas):
        +----------+------+
        |          |  2   |
        |    1     +------+
        | (master) |  3   |
        +----------+------+
    """

    accepts = (Shrink, Expand, IncMasterN, IncGap)

    @property
    def layout_type(self) -> LayoutType:
        return LayoutType.TALL

    @property
    def name(self) -> str:
        return "Tall"

    def arrange(self, count: int, area: Rect) -> list[Rect]:
        if count <= 0:
            return []

        gap = self._gap
        nmaster = self._nmaster

        # Una sola columna
        if nmaster == 0 or count <= nmaster:
            return _gapped_rows(area, count, gap, gap, gap)

        master_area, stack_area = area.split_horizontal(self._master_ratio)
        masters = _gapped_rows(master_area, nmaster, gap, gap, gap // 2)
        stack = _gapped_rows(stack_area, count - nmaster, gap, gap // 2, gap)
        return masters + stack


# ============================================================================
# WideLayout - Master arriba, stack abajo
# ============================================================================
class WideLayout(Layout):
    """
    Layout tipo 'wide' (master-stack horizontal).

    Esquema (nmaster=1, 3 ventanas):
        +------------------+
        |    1 (master)    |
        +--------+---------+
        |   2    |    3    |
        +--------+---------+
    """

    accepts = (Shrink, Expand, IncMasterN, IncGap)

    @property
    def layout_type(self) -> LayoutType:
        return LayoutType.WIDE

    @property
    def name(self) -> str:
        return "Wide"

    def arrange(self, count: int, area: Rect) -> list[Rect]:
        if count <= 0:
            return []

        gap = self._gap
        nmaster = self._nmaster

        # Una sola fila
        if nmaster == 0 or count <= nmaster:
            return _gapped_columns(area, count, gap, gap, gap)

        master_area, stack_area = area.split_vertical(self._master_ratio)
        masters = _gapped_columns(master_area, nmaster, gap, gap, gap // 2)
        stack = _gapped_columns(stack_area, count - nmaster, gap, gap // 2, gap)
        return masters + stack


# ============================================================================
# MonocleLayout - Todas las ventanas ocupan el area
# ============================================================================
class MonocleLayout(Layout):
    """
    Layout tipo 'monocle'.

    Todas las ventanas reciben el mismo rectangulo; solo la enfocada es
    visible en la practica.  Es la arrangement interior natural de un
    grupo mostrado como pestanas.
    """

    accepts = (IncGap,)

    @property
    def layout_type(self) -> LayoutType:
        return LayoutType.MONOCLE

    @property
    def name(self) -> str:
        return "Monocle"

    def arrange(self, count: int, area: Rect) -> list[Rect]:
        if count <= 0:
            return []
        return [area.pad(self._gap)] * count


# ============================================================================
# ThreeColumnLayout - Tres columnas (izquierda, centro master, derecha)
# ============================================================================
class ThreeColumnLayout(Layout):
    """
    Layout de tres columnas.

    El master ocupa la columna central; las demas ventanas se reparten
    alternando entre la columna izquierda y la derecha.  Con 2 ventanas
    se comporta como Tall.

    Esquema (5 ventanas):
        +------+----------+------+
        |  2   |          |  3   |
        +------+  1       +------+
        |  4   | (master) |  5   |
        +------+----------+------+
    """

    def __init__(
        self,
        master_ratio: float = 0.50,
        gap: int = 4,
        nmaster: int = 1,
    ) -> None:
        super().__init__(master_ratio=master_ratio, gap=gap, nmaster=nmaster)

    @property
    def layout_type(self) -> LayoutType:
        return LayoutType.THREE_COLUMN

    @property
    def name(self) -> str:
        return "ThreeColumn"

    def arrange(self, count: int, area: Rect) -> list[Rect]:
        if count <= 0:
            return []

        gap = self._gap

        if count == 1:
            return [area.pad(gap)]

        if count == 2:
            left, right = area.split_horizontal(self._master_ratio)
            return (
                _gapped_rows(left, 1, gap, gap, gap // 2)
                + _gapped_rows(right, 1, gap, gap // 2, gap)
            )

        # Laterales iguales, centro segun master_ratio
        left_w = int(area.w * (1.0 - self._master_ratio) / 2.0)
        center_w = int(area.w * self._master_ratio)
        left_area = Rect(area.x, area.y, left_w, area.h)
        center_area = Rect(area.x + left_w, area.y, center_w, area.h)
        right_area = Rect(
            area.x + left_w + center_w, area.y, area.w - left_w - center_w, area.h
        )

        left_idx = [i for i in range(1, count) if i % 2 == 1]
        right_idx = [i for i in range(1, count) if i % 2 == 0]

        slots: list[Optional[Rect]] = [None] * count
        slots[0] = _gapped_rows(center_area, 1, gap, gap // 2, gap // 2)[0]
        for idx, rect in zip(left_idx, _gapped_rows(left_area, len(left_idx), gap, gap, gap // 2)):
            slots[idx] = rect
        for idx, rect in zip(right_idx, _gapped_rows(right_area, len(right_idx), gap, gap // 2, gap)):
            slots[idx] = rect

        return [s for s in slots if s is not None]


# ============================================================================
# LayoutCycle - Lista circular de layouts
# ============================================================================
class LayoutCycle(Layout):
    """
    Lista circular de layouts con un indice activo.

    NextLayout / PrevLayout avanzan el indice (circular), JumpToLayout
    selecciona por tipo, y cualquier otro mensaje se delega al layout
    activo.  Es la "variante siguiente" que usa la directiva de layouts
    por defecto de los grupos nuevos.
    """

    def __init__(self, layouts: list[Layout], index: int = 0) -> None:
        if not layouts:
            raise ValueError("LayoutCycle necesita al menos un layout")
        super().__init__()
        self._layouts = list(layouts)
        self._index = index % len(self._layouts)

    @property
    def layout_type(self) -> LayoutType:
        return LayoutType.CYCLE

    @property
    def current(self) -> Layout:
        """Layout activo."""
        return self._layouts[self._index]

    @property
    def index(self) -> int:
        return self._index

    @property
    def layouts(self) -> list[Layout]:
        return list(self._layouts)

    @property
    def name(self) -> str:
        return self.current.name

    @property
    def master_ratio(self) -> float:
        return self.current.master_ratio

    @property
    def gap(self) -> int:
        return self.current.gap

    @property
    def nmaster(self) -> int:
        return self.current.nmaster

    def arrange(self, count: int, area: Rect) -> list[Rect]:
        return self.current.arrange(count, area)

    def run(
        self, stack: Optional[Stack], area: Rect
    ) -> tuple[list[Placement], Optional[Layout]]:
        placements, replacement = self.current.run(stack, area)
        if replacement is None:
            return placements, None
        return placements, self._with_current(replacement)

    def handle_message(self, message: Message) -> Optional[Layout]:
        n = len(self._layouts)

        if isinstance(message, NextLayout):
            if n < 2:
                return None
            return self._with_index(self._index + 1)

        if isinstance(message, PrevLayout):
            if n < 2:
                return None
            return self._with_index(self._index - 1)

        if isinstance(message, JumpToLayout):
            for i, layout in enumerate(self._layouts):
                if layout.layout_type.value == message.name:
                    return None if i == self._index else self._with_index(i)
            log.debug("JumpToLayout: %r no esta en el ciclo", message.name)
            return None

        replacement = self.current.handle_message(message)
        if replacement is None:
            return None
        return self._with_current(replacement)

    def _with_index(self, index: int) -> LayoutCycle:
        return LayoutCycle(self._layouts, index % len(self._layouts))

    def _with_current(self, layout: Layout) -> LayoutCycle:
        layouts = list(self._layouts)
        layouts[self._index] = layout
        return LayoutCycle(layouts, self._index)

    def to_state(self) -> dict[str, Any]:
        return {
            "type": LayoutType.CYCLE.value,
            "index": self._index,
            "layouts": [layout.to_state() for layout in self._layouts],
        }

    def __repr__(self) -> str:
        names = "|".join(layout.name for layout in self._layouts)
        return f"LayoutCycle({names}, index={self._index})"


LAYOUT_CLASSES: dict[LayoutType, type[Layout]] = {
    LayoutType.TALL: TallLayout,
    LayoutType.WIDE: WideLayout,
    LayoutType.MONOCLE: MonocleLayout,
    LayoutType.THREE_COLUMN: ThreeColumnLayout,
}
