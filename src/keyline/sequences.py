"""Split raw terminal input into one chunk per key.

Input read from a terminal can carry several keys at once (type-ahead,
pasted text, auto-repeated arrows), and an escape sequence can be split
across two reads. ``split_sequences`` cuts a buffer into complete
sequences and returns whatever is left of an unfinished escape sequence
so the caller can wait for the rest.
"""

from __future__ import annotations

ESC = "\x1b"


def sequence_status(data: str) -> str:
    """Check if *data* is a complete escape sequence or needs more input.

    Returns 'complete', 'incomplete', or 'not-escape'.
    """
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI sequences: ESC [ params final-byte
    if after_esc.startswith("["):
        if len(data) < 3:
            return "incomplete"
        return "complete" if 0x40 <= ord(data[-1]) <= 0x7E else "incomplete"

    # SS3 sequences: ESC O
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key sequences: ESC followed by a single character
    return "complete"


def split_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences.

    Returns (sequences, remainder); the remainder is a trailing escape
    sequence that has not finished arriving yet.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            candidate = remaining[:seq_end]
            if sequence_status(candidate) == "complete":
                sequences.append(candidate)
                pos += seq_end
                break
            seq_end += 1
        else:
            return sequences, remaining

    return sequences, ""
