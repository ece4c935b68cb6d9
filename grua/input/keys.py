"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, navigation keys, and SGR mouse wheel events.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x15": "CTRL_U",
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
}
_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
    b"Z": "SHIFT_TAB",
}
_CSI_TILDE_KEYS: dict[bytes, str] = {
    b"1": "HOME",
    b"7": "HOME",
    b"4": "END",
    b"8": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _read_utf8_tail(fd: int, lead: bytes) -> bytes:
    """Complete a multi-byte UTF-8 character that started with ``lead``."""
    first = lead[0]
    if first >= 0xF0:
        missing = 3
    elif first >= 0xE0:
        missing = 2
    elif first >= 0xC0:
        missing = 1
    else:
        return lead
    data = lead
    for _ in range(missing):
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            break
        data += part
    return data


def _decode_sgr_mouse(fd: int) -> str:
    # SGR mouse: ESC [ < btn ; col ; row (M/m)
    payload: list[bytes] = []
    while True:
        part = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return "ESC"
        if part in {b"M", b"m"}:
            break
        payload.append(part)
        if len(payload) > 64:
            return "ESC"
    try:
        btn_s, col_s, row_s = b"".join(payload).decode("ascii").split(";")
        btn = int(btn_s)
        col = int(col_s)
        row = int(row_s)
    except ValueError:
        return "ESC"
    if btn & 0b0100_0000:
        button = btn & 0b11
        if button == 0:
            return f"MOUSE_WHEEL_UP:{col}:{row}"
        if button == 1:
            return f"MOUSE_WHEEL_DOWN:{col}:{row}"
    return "MOUSE"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; returns ``""`` when ``timeout_ms`` elapses."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""

        ch = os.read(fd, 1)
        if not ch:
            return ""

    control = _CONTROL_KEYS.get(ch)
    if control is not None:
        return control

    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch).decode("utf-8", errors="replace")

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq == b"O":
        # SS3 form used by some terminals for Home/End and arrows.
        final = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return "ESC"
        return _CSI_FINAL_KEYS.get(final, "ESC")
    if seq != b"[":
        _PENDING_BYTES.append(seq)
        return "ESC"

    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    final_key = _CSI_FINAL_KEYS.get(seq)
    if final_key is not None:
        return final_key
    if seq == b"<":
        return _decode_sgr_mouse(fd)
    if seq in _CSI_TILDE_KEYS:
        terminator = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if terminator == b"~":
            return _CSI_TILDE_KEYS[seq]
    return "ESC"


def parse_mouse_col_row(mouse_key: str) -> tuple[int | None, int | None]:
    """Parse ``MOUSE_*:col:row`` key tokens into integer coordinates."""
    parts = mouse_key.split(":")
    if len(parts) < 3:
        return None, None
    try:
        return int(parts[1]), int(parts[2])
    except ValueError:
        return None, None


__all__ = ["read_key", "parse_mouse_col_row"]
