import asyncio
import time

import pytest

from site_crawler.crawler.rate_limit import PacingGate


@pytest.mark.asyncio()
async def test_initiations_are_spaced_across_tasks():
    interval = 0.05
    gate = PacingGate(interval)
    stamps = []

    async def worker():
        for _ in range(3):
            await gate.wait()
            stamps.append(time.monotonic())

    await asyncio.gather(*(worker() for _ in range(3)))

    stamps.sort()
    assert len(stamps) == 9
    assert stamps[-1] - stamps[0] >= (len(stamps) - 1) * interval * 0.99
    gaps = [b - a for a, b in zip(stamps, stamps[1:])]
    assert min(gaps) >= interval * 0.99


@pytest.mark.asyncio()
async def test_first_request_is_not_delayed():
    gate = PacingGate(5.0)
    start = time.monotonic()
    await gate.wait()
    assert time.monotonic() - start < 1.0


@pytest.mark.asyncio()
async def test_zero_interval_never_sleeps():
    gate = PacingGate(0)
    start = time.monotonic()
    for _ in range(50):
        await gate.wait()
    assert time.monotonic() - start < 1.0


def test_negative_interval_rejected():
    with pytest.raises(ValueError):
        PacingGate(-1)
