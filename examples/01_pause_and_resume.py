#!/usr/bin/env python3
"""
01_pause_and_resume.py - Abort half way, then resume with a range request

Demonstrates:
- ResumableFetch.start() returning a pending task
- Aborting from the progress callback (bytes are kept)
- Resuming from the byte offset reached and saving the reassembled body

Note: Requires internet connection to run
"""

import asyncio
from pathlib import Path

from resumable_fetch import (
    AiohttpClient,
    ResumableFetch,
    TransferProgress,
    build_settings,
    create_app,
)

URL = "https://proof.ovh.net/files/1Mb.dat"


async def main() -> None:
    """Fetch 1Mb, pausing at 40% and resuming after a short wait."""
    print("Starting pause/resume example...")
    app = create_app(build_settings(chunk_size=32 * 1024, timeout=60.0))

    async with AiohttpClient() as client:
        fetch = ResumableFetch.from_settings(URL, client, app.settings)
        paused = False

        def on_progress(progress: TransferProgress) -> None:
            nonlocal paused
            print(f"  {progress.loaded:>9,} / {progress.total or 0:,} bytes "
                  f"({progress.percent:5.1f}%)")
            if not paused and progress.fraction >= 0.4:
                paused = True
                fetch.abort()

        fetch.on_progress = on_progress

        try:
            await fetch.start()
        except asyncio.CancelledError:
            print(f"Paused: {fetch!r}")

        await asyncio.sleep(1)

        print("Resuming...")
        response = await fetch.start()

    destination = Path("./downloads/01-resumed-1Mb.dat")
    destination.parent.mkdir(parents=True, exist_ok=True)
    await response.save(destination)
    print(f"Done: {response!r} -> {destination}")


if __name__ == "__main__":
    asyncio.run(main())
