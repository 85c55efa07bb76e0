"""Terminal escape sequence boundary scanner.

Recognized forms, all copied through verbatim:

* CSI: ``ESC [`` ... final byte in ``@``..``~``
* OSC: ``ESC ]`` ... ``BEL`` or ``ESC \\``
* string-terminated (DCS, SOS, PM, APC): ``ESC P|X|^|_`` ... ``BEL`` or ``ESC \\``
* two-character sequences: ``ESC`` + intermediate byte ``0x20``..``0x2F`` + one more character

An ``ESC`` followed by anything else is a bare escape; the next character is
ordinary text. A newline always ends a pending sequence and is rendered as a
newline, so an unterminated sequence cannot swallow the rest of the stream.
"""

from __future__ import annotations

from .models import EscapeState

ESC = "\x1b"
BEL = "\x07"

_STRING_INTRODUCERS = frozenset("PX^_")


def advance(state: EscapeState, ch: str) -> tuple[EscapeState, bool]:
    """Return the next scanner state and whether ``ch`` belongs to a sequence."""
    if state is EscapeState.IDLE:
        if ch == ESC:
            return EscapeState.START, True
        return EscapeState.IDLE, False

    if ch == "\n":
        return EscapeState.IDLE, False

    if state is EscapeState.START:
        if ch == "[":
            return EscapeState.CSI, True
        if ch == "]":
            return EscapeState.OSC, True
        if ch in _STRING_INTRODUCERS:
            return EscapeState.STRING, True
        if " " <= ch <= "/":
            return EscapeState.FE, True
        if ch == ESC:
            return EscapeState.START, True
        return EscapeState.IDLE, False

    if state is EscapeState.CSI:
        if "@" <= ch <= "~":
            return EscapeState.IDLE, True
        return EscapeState.CSI, True

    if state is EscapeState.FE:
        return EscapeState.IDLE, True

    if state in (EscapeState.OSC, EscapeState.OSC_ESC):
        return _string_step(state is EscapeState.OSC_ESC, ch, EscapeState.OSC, EscapeState.OSC_ESC)

    if state in (EscapeState.STRING, EscapeState.STRING_ESC):
        return _string_step(state is EscapeState.STRING_ESC, ch, EscapeState.STRING, EscapeState.STRING_ESC)

    raise ValueError(f"Unknown escape state: {state}")


def _string_step(
    saw_escape: bool,
    ch: str,
    body: EscapeState,
    body_escape: EscapeState,
) -> tuple[EscapeState, bool]:
    if ch == BEL or (saw_escape and ch == "\\"):
        return EscapeState.IDLE, True
    if ch == ESC:
        return body_escape, True
    return body, True
