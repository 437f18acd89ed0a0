"""
sublayouts.tiling.persistence - Guardado y restauracion del estado.

Convierte el estado de un Sublayout (y de un Workspace) a estructuras
compatibles con JSON y de vuelta, sin perdida:

    {
        "version": 1,
        "defaults": {"advance_counts": [...], "base": layout},
        "pairing": "position",
        "groups": [stack, ...],
        "slots": [{"layout": layout, "stack": stack}, ...],
        "queue": [{"message": message, "window": w}, ...]
    }

    stack   = {"focus": w, "up": [...], "down": [...]}
    layout  = Layout.to_state()
    message = {"type": NombreDeClase, ...campos}

Los identificadores de ventana deben ser escalares JSON.  Las entradas
que no se pueden codificar (por ejemplo un WithGroup encolado, que lleva
una funcion) se descartan con un warning.

Si el estado guardado es invalido, restore_sublayout() no falla:
retorna un modificador vacio.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Callable
from typing import Any, Optional

from sublayouts.core.messages import MESSAGE_TYPES, Message
from sublayouts.core.stack import Stack
from sublayouts.tiling.allocator import LayoutDefaults, Slot, SlotPairing
from sublayouts.tiling.groups import GroupTable
from sublayouts.tiling.layouts import Layout
from sublayouts.tiling.sublayout import Sublayout

log = logging.getLogger(__name__)

STATE_VERSION = 1

_SCALARS = (str, int, float, bool, type(None))


class StateRestoreError(ValueError):
    """El estado guardado no tiene la estructura esperada."""


# ============================================================================
# Stacks
# ============================================================================
def _check_window(w: Any) -> Any:
    if not isinstance(w, _SCALARS) or w is None:
        raise StateRestoreError(f"identificador de ventana no escalar: {w!r}")
    return w


def encode_stack(stack: Stack) -> dict[str, Any]:
    return {
        "focus": _check_window(stack.focus),
        "up": [_check_window(w) for w in stack.up],
        "down": [_check_window(w) for w in stack.down],
    }


def decode_stack(data: Any) -> Stack:
    if not isinstance(data, dict) or "focus" not in data:
        raise StateRestoreError(f"stack invalido: {data!r}")
    up = data.get("up", [])
    down = data.get("down", [])
    if not isinstance(up, list) or not isinstance(down, list):
        raise StateRestoreError(f"stack invalido: {data!r}")
    return Stack(
        _check_window(data["focus"]),
        tuple(_check_window(w) for w in up),
        tuple(_check_window(w) for w in down),
    )


# ============================================================================
# Mensajes
# ============================================================================
def _encode_value(value: Any) -> Any:
    if isinstance(value, Message):
        return encode_message(value)
    if isinstance(value, _SCALARS):
        return value
    raise TypeError(f"valor no serializable: {value!r}")


def encode_message(message: Message) -> dict[str, Any]:
    """
    Raises:
        TypeError: si algun campo no es un escalar ni otro mensaje.
    """
    data: dict[str, Any] = {"type": type(message).__name__}
    if dataclasses.is_dataclass(message):
        for f in dataclasses.fields(message):
            data[f.name] = _encode_value(getattr(message, f.name))
    return data


def _decode_value(value: Any) -> Any:
    if isinstance(value, dict):
        return decode_message(value)
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# Anotacion del campo (texto, por `from __future__ import annotations`)
# -> validador del valor decodificado
_FIELD_CHECKS: dict[str, Callable[[Any], bool]] = {
    "float": _is_number,
    "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "str": lambda v: isinstance(v, str),
    "Message": lambda v: isinstance(v, Message),
    "WindowId": lambda v: isinstance(v, _SCALARS) and v is not None,
    "Optional[WindowId]": lambda v: isinstance(v, _SCALARS),
}


def _check_field(cls: type, f: dataclasses.Field, value: Any) -> Any:
    annotation = f.type if isinstance(f.type, str) else getattr(f.type, "__name__", "")
    check = _FIELD_CHECKS.get(annotation)
    if check is None or not check(value):
        raise StateRestoreError(
            f"campo {cls.__name__}.{f.name} invalido: {value!r}"
        )
    return value


def decode_message(data: Any) -> Message:
    """
    Raises:
        StateRestoreError: si el tipo es desconocido o algun campo no
                           tiene el tipo que declara la clase.
    """
    if not isinstance(data, dict):
        raise StateRestoreError(f"mensaje invalido: {data!r}")
    cls = MESSAGE_TYPES.get(data.get("type", ""))
    if cls is None:
        raise StateRestoreError(f"tipo de mensaje desconocido: {data.get('type')!r}")
    if not dataclasses.is_dataclass(cls):
        return cls()
    kwargs = {
        f.name: _check_field(cls, f, _decode_value(data[f.name]))
        for f in dataclasses.fields(cls)
        if f.name in data
    }
    return cls(**kwargs)


# ============================================================================
# Sublayout
# ============================================================================
def dump_sublayout(sub: Sublayout) -> dict[str, Any]:
    """Estado completo de *sub* como dict compatible con JSON."""
    queue: list[dict[str, Any]] = []
    for message, window in sub.queue:
        try:
            queue.append({"message": encode_message(message), "window": _check_window(window)})
        except (TypeError, StateRestoreError) as exc:
            log.warning("Mensaje diferido descartado al guardar (%s): %s", exc, message)

    groups: list[dict[str, Any]] = []
    for group in sub.table.values():
        try:
            groups.append(encode_stack(group))
        except StateRestoreError as exc:
            log.warning("Grupo descartado al guardar: %s", exc)

    slots: list[dict[str, Any]] = []
    for slot in sub.slots:
        try:
            slots.append({"layout": slot.layout.to_state(), "stack": encode_stack(slot.stack)})
        except StateRestoreError as exc:
            log.warning("Slot descartado al guardar: %s", exc)

    return {
        "version": STATE_VERSION,
        "defaults": {
            "advance_counts": list(sub.defaults.advance_counts),
            "base": sub.defaults.base.to_state(),
        },
        "pairing": sub.pairing.value,
        "groups": groups,
        "slots": slots,
        "queue": queue,
    }


def _load_sublayout(data: Any, defaults: LayoutDefaults, pairing: SlotPairing) -> Sublayout:
    if not isinstance(data, dict):
        raise StateRestoreError("el estado no es un dict")
    version = data.get("version", STATE_VERSION)
    if version != STATE_VERSION:
        raise StateRestoreError(f"version no soportada: {version!r}")

    if "defaults" in data:
        raw = data["defaults"]
        if not isinstance(raw, dict):
            raise StateRestoreError(f"defaults invalidos: {raw!r}")
        defaults = LayoutDefaults(
            advance_counts=tuple(int(k) for k in raw.get("advance_counts", [])),
            base=Layout.from_state(raw["base"]),
        )
    if "pairing" in data:
        pairing = SlotPairing(data["pairing"])

    groups = [decode_stack(g) for g in data.get("groups", [])]
    keys = [g.focus for g in groups]
    duplicated = sorted({repr(k) for k in keys if keys.count(k) > 1})
    if duplicated:
        raise StateRestoreError(f"grupos con la misma clave: {', '.join(duplicated)}")

    table = GroupTable(groups)
    problems = table.violations()
    if problems:
        raise StateRestoreError("; ".join(problems))

    slots = [
        Slot(Layout.from_state(s["layout"]), decode_stack(s["stack"]))
        for s in data.get("slots", [])
    ]
    queue = [
        (decode_message(q["message"]), _check_window(q["window"]))
        for q in data.get("queue", [])
    ]
    return Sublayout(defaults, pairing, table, slots, queue)


def restore_sublayout(
    data: Any,
    defaults: Optional[LayoutDefaults] = None,
    pairing: SlotPairing = SlotPairing.POSITION,
) -> Sublayout:
    """
    Reconstruye un Sublayout guardado con dump_sublayout().

    Si *data* es invalido se registra un warning y se retorna un
    Sublayout vacio (sin grupos, slots ni cola) con *defaults* y
    *pairing*.
    """
    defaults = defaults if defaults is not None else LayoutDefaults()
    try:
        sub = _load_sublayout(data, defaults, pairing)
    except (StateRestoreError, KeyError, TypeError, ValueError) as exc:
        log.warning("Estado de Sublayout invalido, se usa uno vacio: %s", exc)
        return Sublayout(defaults, pairing)

    log.info(
        "Sublayout restaurado: %d grupos, %d slots, %d mensajes",
        len(sub.table),
        len(sub.slots),
        len(sub.queue),
    )
    return sub


# ============================================================================
# Texto
# ============================================================================
def dumps(sub: Sublayout) -> str:
    return json.dumps(dump_sublayout(sub), sort_keys=True)


def loads(
    text: str,
    defaults: Optional[LayoutDefaults] = None,
    pairing: SlotPairing = SlotPairing.POSITION,
) -> Sublayout:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        log.warning("Estado de Sublayout no es JSON valido: %s", exc)
        data = None
    return restore_sublayout(data, defaults, pairing)
