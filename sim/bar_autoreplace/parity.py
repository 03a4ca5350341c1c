"""
BAR Unit AutoReplace - Lua Parity Constants
=============================================
Central registry of all constants that must match the Lua widget values.
Each constant includes its source file and line reference.
"""

from bar_autoreplace.models import CMD

# ---------------------------------------------------------------------------
# Hotkeys (unit_auto_replace_with_existing.lua:203-205)
# ---------------------------------------------------------------------------
# SDL keycodes are lowercase ASCII.

KEY_U = 117   # Ctrl-U: tag selection
KEY_J = 106   # Ctrl-J: untag selection

TAG_BINDING = "ctrl+u"
UNTAG_BINDING = "ctrl+j"

# ---------------------------------------------------------------------------
# Order queue lookahead (unit_auto_replace_with_existing.lua:177,218,275)
# ---------------------------------------------------------------------------
# Spring.GetUnitCommands(unitID, 20)

COMMAND_LOOKAHEAD = 20

# ---------------------------------------------------------------------------
# Command ids used by the widget
# ---------------------------------------------------------------------------

CMD_STOP = CMD.STOP
CMD_WAIT = CMD.WAIT
CMD_MOVE = CMD.MOVE
CMD_UNLOAD_UNITS = CMD.UNLOAD_UNITS

# ---------------------------------------------------------------------------
# Echo messages (unit_auto_replace_with_existing.lua:174,193,301)
# ---------------------------------------------------------------------------

ECHO_PREFIX = "AutoReplace"
ECHO_TAG = "{prefix}: {name}"
ECHO_UNTAG = "{prefix} unset: {name}"
ECHO_REPLACED = "replaced {name}"
