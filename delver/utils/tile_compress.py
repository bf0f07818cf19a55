"""Utility helpers for compact encoding of tile map rows.

Format strategy:
  - Input: one string per map row, one character per tile.
  - Each row is run-length encoded as ``<count><tile>`` pairs and prefixed
    with the ``R:`` marker (e.g. ``"WWWWFFH"`` -> ``"R:4W2F1H"``).
  - If the encoded row is not shorter than the raw row, the raw row is kept.

Compressed grammar (simple):
  R:<n1><c1><n2><c2>...

Limitations:
  - Tile characters must not be digits.
  - Decoding a malformed row yields an empty string.
"""

from __future__ import annotations

from typing import Iterable, List


def compress_row(row: str) -> str:
    """Return the run-length encoding of ``row`` or ``row`` itself if not shorter.

    Args:
        row: A string of single-character tile codes.

    Returns:
        ``R:`` prefixed run-length string, or the original row when encoding
        brings no size benefit.
    """
    if not row:
        return row
    pieces = []
    run_char = row[0]
    run_len = 0
    for ch in row:
        if ch == run_char:
            run_len += 1
            continue
        pieces.append(f"{run_len}{run_char}")
        run_char, run_len = ch, 1
    pieces.append(f"{run_len}{run_char}")
    encoded = "R:" + "".join(pieces)
    return encoded if len(encoded) < len(row) else row


def decompress_row(data: str) -> str:
    """Inverse of :func:`compress_row`.

    Rows without the ``R:`` prefix are returned unchanged. On a parsing
    failure an empty string is returned (caller should treat empty as a
    failed decode).
    """
    if not data or not data.startswith("R:"):
        return data
    out = []
    digits = ""
    for ch in data[2:]:
        if ch.isdigit():
            digits += ch
            continue
        if not digits:
            return ""
        out.append(ch * int(digits))
        digits = ""
    if digits:
        return ""
    return "".join(out)


def encode_rows(rows: Iterable[str]) -> List[str]:
    return [compress_row(r) for r in rows]


def decode_rows(rows: Iterable[str]) -> List[str]:
    return [decompress_row(r) for r in rows]


__all__ = ["compress_row", "decompress_row", "encode_rows", "decode_rows"]
