"""Byte values of the keys the dispatcher recognises in raw mode."""

from __future__ import annotations

KEY_NULL = 0x00
KEY_CTRL_A = 0x01
KEY_CTRL_B = 0x02
KEY_CTRL_C = 0x03
KEY_CTRL_D = 0x04
KEY_CTRL_E = 0x05
KEY_CTRL_F = 0x06
KEY_CTRL_H = 0x08
KEY_TAB = 0x09
KEY_CTRL_K = 0x0B
KEY_CTRL_L = 0x0C
KEY_ENTER = 0x0D
KEY_CTRL_N = 0x0E
KEY_CTRL_P = 0x10
KEY_CTRL_T = 0x14
KEY_CTRL_U = 0x15
KEY_CTRL_W = 0x17
KEY_ESC = 0x1B
KEY_BACKSPACE = 0x7F


def is_printable_ascii(byte: int) -> bool:
    return 0x20 <= byte <= 0x7E


def is_digit(byte: int) -> bool:
    return 0x30 <= byte <= 0x39
