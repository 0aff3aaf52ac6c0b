"""Write a generated file map to disk."""

import logging
from collections.abc import Mapping
from pathlib import Path

import anyio

from scaffold_forge.exceptions import FileWriteError

__all__ = ("write_file_tree",)

logger = logging.getLogger("scaffold_forge")


async def write_file_tree(target_dir: "Path | str", files: "Mapping[str, str | bytes]") -> None:
    """Write every file of a file map below ``target_dir``.

    Missing directories are created and existing files are overwritten. Text is
    written as UTF-8, binary content byte for byte.

    Args:
        target_dir: The project directory.
        files: Relative POSIX path -> content.

    Raises:
        FileWriteError: If a directory or file cannot be written.
    """
    root = anyio.Path(target_dir)
    for name, content in files.items():
        path = root.joinpath(*name.split("/"))
        try:
            await path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                await path.write_bytes(content)
            else:
                await path.write_text(content, encoding="utf-8", newline="")
        except OSError as e:
            raise FileWriteError(str(path), e.strerror or str(e)) from e
        logger.debug("Wrote %s", path)
