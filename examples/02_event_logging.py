#!/usr/bin/env python3
"""
02_event_logging.py - Transfer lifecycle via events

Demonstrates:
- Subscribing to transfer.* events on the fetch's emitter
- started -> progress -> (abort) -> started (resumed) -> progress -> completed
- Event model structure and fields

Note: Requires internet connection to run
"""

import asyncio
from datetime import datetime

from resumable_fetch import AiohttpClient, ResumableFetch
from resumable_fetch.events import TransferEvent

URL = "https://proof.ovh.net/files/1Mb.dat"
EVENT_TYPES = (
    "transfer.started",
    "transfer.progress",
    "transfer.completed",
    "transfer.failed",
)


def on_any_event(event: TransferEvent) -> None:
    """Log any transfer event with timestamp."""
    ts = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    event_type = event.event_type

    detail = ""
    if event_type == "transfer.started":
        size = f"{event.total_bytes:,}" if event.total_bytes else "unknown"
        detail = f"resumed={event.resumed} offset={event.offset} size={size}"
    elif event_type == "transfer.progress":
        detail = f"{event.bytes_downloaded:,} bytes ({event.percent:.1f}%)"
    elif event_type == "transfer.completed":
        detail = f"{event.total_bytes:,} bytes"
    elif event_type == "transfer.failed":
        detail = f"error={event.error.exc_type}"

    print(f"[{ts}] {event_type:<20} | {detail}")


async def main() -> None:
    print("Starting event logging example...")
    print("-" * 70)

    async with AiohttpClient() as client:
        fetch = ResumableFetch(URL, client, chunk_size=128 * 1024)
        for event_type in EVENT_TYPES:
            fetch.emitter.on(event_type, on_any_event)

        async def pause_once(event: TransferEvent) -> None:
            if event.bytes_downloaded >= 256 * 1024:
                fetch.emitter.off("transfer.progress", pause_once)
                fetch.abort()

        fetch.emitter.on("transfer.progress", pause_once)

        try:
            await fetch.start()
        except asyncio.CancelledError:
            print(f"{'-' * 30} aborted at byte {fetch.downloaded_length:,}")

        await fetch.start()

    print("-" * 70)
    print("Event logging example complete.")


if __name__ == "__main__":
    asyncio.run(main())
