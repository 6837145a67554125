"""Fetch from several mirrors and compare the four combinators.

Run with: python examples/mirrors.py
"""

from __future__ import annotations

import asyncio
import logging

from settle import (
    AggregateFailure,
    RejectionError,
    Trace,
    all_,
    all_settled,
    any_,
    race,
)
from settle.logging import configure_logging

logger = logging.getLogger("mirrors")

MIRRORS = {
    "eu": (0.30, "payload from eu"),
    "us": (0.10, None),
    "ap": (0.50, "payload from ap"),
}


async def fetch(mirror: str) -> str:
    delay, payload = MIRRORS[mirror]
    await asyncio.sleep(delay)
    if payload is None:
        raise ConnectionError(f"{mirror} mirror unreachable")
    return payload


async def main() -> None:
    names = list(MIRRORS)

    records = await all_settled([fetch(name) for name in names])
    for name, record in zip(names, records):
        logger.info("%s -> %s", name, record.to_dict())

    try:
        await all_([fetch(name) for name in names])
    except ConnectionError as exc:
        logger.info("all_ failed fast: %s", exc)

    try:
        await race([fetch(name) for name in names])
    except ConnectionError as exc:
        logger.info("race settled with the quickest outcome, a failure: %s", exc)

    trace = Trace()
    first = await any_([fetch(name) for name in names], trace=trace)
    logger.info("any_ picked: %s (%d trace events)", first, len(trace))

    try:
        await any_([fetch("us"), fetch("us")])
    except RejectionError as exc:
        failure: AggregateFailure = exc.reason
        logger.info("any_ exhausted: %s", [str(r) for r in failure])

    # Let the losing fetches finish before the loop closes.
    await asyncio.sleep(0.6)


if __name__ == "__main__":
    configure_logging("INFO")
    asyncio.run(main())
