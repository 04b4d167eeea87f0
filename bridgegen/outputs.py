"""Writing generated files into an output directory."""

from __future__ import annotations

import os
from pathlib import Path

BLANK = "// Blank bridgegen placeholder"


class TooManySectionsError(RuntimeError):
    """Raised when more include_cpp blocks were found than were expected."""


def write_if_changed(
    directory: str | os.PathLike[str], filename: str, content: bytes | str
) -> bool:
    """Write ``content`` unless the file already holds exactly that.

    Leaving an unchanged file alone keeps its timestamp. Returns whether the
    file was written.
    """
    data = content.encode("utf-8") if isinstance(content, str) else content
    path = Path(directory) / filename
    try:
        if path.read_bytes() == data:
            return False
    except OSError:
        pass
    path.write_bytes(data)
    return True


def write_placeholders(
    outdir: str | os.PathLike[str],
    counter: int,
    desired_number: int | None,
    extension: str,
) -> list[Path]:
    """Pad the output up to ``desired_number`` files with blank placeholders.

    Returns the placeholder paths, in order.
    """
    if desired_number is None:
        return []
    if counter > desired_number:
        raise TooManySectionsError("More include_cpp! sections were found than expected")
    written = []
    for index in range(counter, desired_number):
        fname = f"gen{index}.{extension}"
        write_if_changed(outdir, fname, BLANK)
        written.append(Path(outdir) / fname)
    return written