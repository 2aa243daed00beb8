"""Reading local data files off the event loop."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from pathlib import Path

# One reader per measure in the largest currency catalogue.
_MAX_READERS = 7
_FILE_READERS = ThreadPoolExecutor(
    max_workers=_MAX_READERS,
    thread_name_prefix="inflationkit-read",
)


async def read_text(path: Path, *, encoding: str = "utf-8") -> str:
    """Read a text file on the bounded reader pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _FILE_READERS, partial(path.read_text, encoding=encoding)
    )
