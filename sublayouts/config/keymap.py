"""
sublayouts.config.keymap - Keybindings de grupos.

Dos tablas de keybindings, como strings de combo -> nombre de comando:

    DEFAULT_MERGE_KEYMAP (uso normal):
        Mod + Ctrl + H/J/K/L   -> pull_group en esa direccion
        Mod + Ctrl + M         -> Juntar todo en un grupo
        Mod + Ctrl + U         -> Sacar la ventana enfocada de su grupo
        Mod + Ctrl + Period    -> Pestana anterior del grupo
        Mod + Ctrl + Comma     -> Pestana siguiente del grupo
        Mod + J / Mod + K      -> Foco al grupo siguiente / anterior

    DEFAULT_GROUP_KEYMAP (submapa para el layout interior del grupo):
        Mod + Space            -> Siguiente layout interior
        Mod + J / Mod + Tab    -> Pestana siguiente
        Mod + K / Mod+Shift+Tab-> Pestana anterior
        Mod + H / Mod + L      -> Encoger / agrandar master interior
        Mod + M                -> Enfocar la primera pestana
        Mod + Comma / Period   -> Mas / menos ventanas master interiores
        Mod + Return           -> Mover la pestana enfocada al inicio
"""

from __future__ import annotations

import logging

from sublayouts.core.combo_parser import ComboParseError, Modifier, parse_combo
from sublayouts.core.commands import CommandDispatcher

log = logging.getLogger(__name__)

# (combo, comando)
KeymapEntry = tuple[str, str]
Binding = tuple[Modifier, str]


DEFAULT_GROUP_KEYMAP: list[KeymapEntry] = [
    ("mod+space", "group_next_layout"),
    ("mod+j", "group_focus_down"),
    ("mod+k", "group_focus_up"),
    ("mod+h", "group_shrink"),
    ("mod+l", "group_expand"),
    ("mod+tab", "group_focus_down"),
    ("mod+shift+tab", "group_focus_up"),
    ("mod+m", "group_focus_master"),
    ("mod+comma", "group_inc_master"),
    ("mod+period", "group_dec_master"),
    ("mod+return", "group_swap_master"),
]

DEFAULT_MERGE_KEYMAP: list[KeymapEntry] = [
    ("mod+ctrl+h", "pull_group_left"),
    ("mod+ctrl+l", "pull_group_right"),
    ("mod+ctrl+k", "pull_group_up"),
    ("mod+ctrl+j", "pull_group_down"),
    ("mod+ctrl+m", "merge_all"),
    ("mod+ctrl+u", "unmerge"),
    ("mod+ctrl+period", "group_focus_up"),
    ("mod+ctrl+comma", "group_focus_down"),
    ("mod+j", "focus_down"),
    ("mod+k", "focus_up"),
]


def build_keymap(
    dispatcher: CommandDispatcher,
    entries: list[KeymapEntry],
) -> dict[Binding, str]:
    """
    Resuelve *entries* a un mapa (modificadores, tecla) -> comando.

    Las entradas con combos invalidos o con comandos que el dispatcher
    no conoce se omiten con un warning.  Si dos entradas usan el mismo
    combo gana la ultima.
    """
    keymap: dict[Binding, str] = {}
    for combo, command in entries:
        try:
            binding = parse_combo(combo)
        except ComboParseError as exc:
            log.warning("Keymap: combo invalido %r (%s), se omite", combo, exc)
            continue
        if not dispatcher.has(command):
            log.warning("Keymap: comando %r no encontrado, se omite", command)
            continue
        keymap[binding] = command

    log.info("Keymap: %d/%d bindings", len(keymap), len(entries))
    return keymap


def press(
    dispatcher: CommandDispatcher,
    keymap: dict[Binding, str],
    modifiers: Modifier,
    key: str,
) -> bool:
    """Ejecuta el comando asociado a (modifiers, key), si hay uno."""
    command = keymap.get((modifiers, key))
    if command is None:
        log.debug("Keymap: sin binding para %s+%s", modifiers, key)
        return False
    return dispatcher.execute(command)
