"""
sublayouts.tiling.rect - Estructura geometrica Rect.

Rectangulo inmutable que describe un area de pantalla: el area que la
arrangement exterior asigna a cada grupo, y la posicion final de cada
ventana dentro de ese area.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Rect:
    """
    Rectangulo inmutable definido por posicion (x, y) y dimensiones (w, h).

    Atributos:
        x: Coordenada horizontal de la esquina superior-izquierda.
        y: Coordenada vertical de la esquina superior-izquierda.
        w: Ancho en pixeles.
        h: Alto en pixeles.
    """

    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    @property
    def center(self) -> tuple[int, int]:
        return (self.x + self.w // 2, self.y + self.h // 2)

    # ------------------------------------------------------------------
    # Operaciones geometricas
    # ------------------------------------------------------------------
    def split_horizontal(self, ratio: float = 0.5) -> tuple[Rect, Rect]:
        """Divide en columna izquierda / derecha segun *ratio* del ancho."""
        left_w = int(self.w * ratio)
        return (
            Rect(self.x, self.y, left_w, self.h),
            Rect(self.x + left_w, self.y, self.w - left_w, self.h),
        )

    def split_vertical(self, ratio: float = 0.5) -> tuple[Rect, Rect]:
        """Divide en fila superior / inferior segun *ratio* del alto."""
        top_h = int(self.h * ratio)
        return (
            Rect(self.x, self.y, self.w, top_h),
            Rect(self.x, self.y + top_h, self.w, self.h - top_h),
        )

    def slice_rows(self, count: int) -> list[Rect]:
        """
        Divide el rectangulo en *count* filas de igual alto.

        La ultima fila absorbe los pixeles sobrantes.
        """
        if count <= 0:
            return []
        base_h = self.h // count
        rows: list[Rect] = []
        for i in range(count):
            y = self.y + i * base_h
            h = base_h if i < count - 1 else self.bottom - y
            rows.append(Rect(self.x, y, self.w, h))
        return rows

    def slice_columns(self, count: int) -> list[Rect]:
        """Divide el rectangulo en *count* columnas de igual ancho."""
        if count <= 0:
            return []
        base_w = self.w // count
        cols: list[Rect] = []
        for i in range(count):
            x = self.x + i * base_w
            w = base_w if i < count - 1 else self.right - x
            cols.append(Rect(x, self.y, w, self.h))
        return cols

    def pad(self, gap: int) -> Rect:
        """Reduce el rectangulo con un margen uniforme (nunca negativo)."""
        return Rect(
            self.x + gap,
            self.y + gap,
            max(0, self.w - 2 * gap),
            max(0, self.h - 2 * gap),
        )

    # ------------------------------------------------------------------
    # Serializacion
    # ------------------------------------------------------------------
    def to_list(self) -> list[int]:
        return [self.x, self.y, self.w, self.h]

    @classmethod
    def from_list(cls, values: list[int]) -> Rect:
        x, y, w, h = values
        return cls(int(x), int(y), int(w), int(h))

    def __str__(self) -> str:
        return f"Rect({self.w}x{self.h}+{self.x}+{self.y})"
