"""SamplerLoop tests — warm-up, cadence, failure absorption, and stopping.

All loop tests use the ``fast_cadence`` fixture (10 ms ticks, 30 ms refresh
interval) and a stop event, so each test finishes in well under a second.
"""

from __future__ import annotations

import asyncio
import os

import pytest

from resmon.sysstat.sampler import SamplerLoop


# ── Helpers ───────────────────────────────────────────────────────────────────

async def run_for(sampler: SamplerLoop, seconds: float) -> None:
    """Run *sampler* for roughly *seconds*, then stop it via its stop event."""
    task = asyncio.create_task(sampler.run())
    await asyncio.sleep(seconds)
    assert not task.done(), "sampler exited on its own"
    sampler.stop_event.set()
    await asyncio.wait_for(task, timeout=1.0)


async def wait_until(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.005)


# ─────────────────────────────────────────────────────────────────────────────
# 1. Sampling a single pass
# ─────────────────────────────────────────────────────────────────────────────

def test_sample_derives_snapshot_from_provider(store, fake_provider):
    sampler = SamplerLoop(store, fake_provider, pid=1234)
    fake_provider.track(1234)

    snap = sampler.sample()

    assert snap.cpu_usage == pytest.approx(25.0)
    assert snap.memory_usage == pytest.approx(25.0)
    assert snap.memory_total == 16 * 1024**3
    assert snap.process_cpu_usage == 3.5
    assert snap.process_memory_usage == 50 * 1024**2


def test_pid_defaults_to_current_process(store, fake_provider):
    assert SamplerLoop(store, fake_provider).pid == os.getpid()


def test_failed_process_lookup_zeroes_process_metrics(store, make_provider):
    provider = make_provider(process=None)
    sampler = SamplerLoop(store, provider, pid=1234)
    provider.track(1234)

    snap = sampler.sample()

    assert snap.process_cpu_usage == 0.0
    assert snap.process_memory_usage == 0
    # Host metrics unaffected
    assert snap.cpu_usage == pytest.approx(25.0)


def test_process_counter_error_zeroes_process_metrics(store, make_provider):
    provider = make_provider(failing={"process"})
    snap = SamplerLoop(store, provider, pid=1).sample()
    assert snap.process_cpu_usage == 0.0
    assert snap.process_memory_usage == 0


def test_unavailable_counter_defaults_to_zero_only_for_that_counter(store, make_provider):
    provider = make_provider(failing={"memory_total"})
    sampler = SamplerLoop(store, provider, pid=1)
    provider.track(1)

    snap = sampler.sample()

    assert snap.memory_total == 0
    assert snap.memory_usage == 0.0  # guarded, not a ZeroDivisionError
    assert snap.memory_used == 4 * 1024**3
    assert snap.cpu_usage == pytest.approx(25.0)
    assert snap.process_memory_usage == 50 * 1024**2


def test_failed_refresh_does_not_skip_the_cycle(store, make_provider):
    provider = make_provider(failing={"cpu", "memory", "processes"})
    sampler = SamplerLoop(store, provider, pid=1)

    assert sampler.sample_and_publish() is True
    assert store.initialized


def test_publish_skipped_when_lock_held_then_retried(store, fake_provider):
    sampler = SamplerLoop(store, fake_provider, pid=1)

    store._lock.acquire()
    try:
        assert sampler.sample_and_publish() is False
    finally:
        store._lock.release()
    assert not store.initialized
    assert sampler.published == 0

    assert sampler.sample_and_publish() is True
    assert sampler.published == 1
    assert store.initialized


# ─────────────────────────────────────────────────────────────────────────────
# 2. Loop cadence
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_loop_publishes_after_warmup(store, fake_provider, fast_cadence):
    sampler = SamplerLoop(store, fake_provider, stop_event=asyncio.Event())

    await run_for(sampler, 0.2)

    assert fake_provider.refresh_all_calls == 1
    assert fake_provider.tracked == [os.getpid()]
    assert sampler.published >= 2
    assert store.read().cpu_usage == pytest.approx(25.0)


@pytest.mark.asyncio
async def test_no_publish_before_refresh_interval_elapses(store, fake_provider, fast_cadence):
    """With a frozen clock the loop keeps ticking but never refreshes."""
    now = [100.0]
    sampler = SamplerLoop(store, fake_provider, stop_event=asyncio.Event(), clock=lambda: now[0])
    task = asyncio.create_task(sampler.run())

    await asyncio.sleep(0.1)
    assert fake_provider.refresh_all_calls == 1
    assert fake_provider.refresh_cpu_calls == 0
    assert not store.initialized

    now[0] += 1.0  # past the refresh interval
    await wait_until(lambda: store.initialized)
    assert fake_provider.refresh_cpu_calls == 1

    sampler.stop_event.set()
    await asyncio.wait_for(task, timeout=1.0)


@pytest.mark.asyncio
async def test_loop_continues_when_process_lookup_fails(store, make_provider, fast_cadence):
    provider = make_provider(process=None)
    sampler = SamplerLoop(store, provider, stop_event=asyncio.Event())

    await run_for(sampler, 0.2)

    assert sampler.cycles >= 2
    snap = store.read()
    assert snap.process_cpu_usage == 0.0
    assert snap.process_memory_usage == 0


@pytest.mark.asyncio
async def test_loop_survives_unexpected_provider_exception(store, make_provider, fast_cadence):
    provider = make_provider(raises=RuntimeError("provider exploded"))
    sampler = SamplerLoop(store, provider, stop_event=asyncio.Event())

    await run_for(sampler, 0.2)

    assert provider.refresh_cpu_calls >= 2
    assert not store.initialized


# ─────────────────────────────────────────────────────────────────────────────
# 3. Stopping
# ─────────────────────────────────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_stop_event_ends_loop_within_a_tick(store, fake_provider, fast_cadence):
    stop = asyncio.Event()
    task = asyncio.create_task(SamplerLoop(store, fake_provider, stop_event=stop).run())
    await asyncio.sleep(0.05)

    stop.set()
    await asyncio.wait_for(task, timeout=0.1)
    assert task.done()


@pytest.mark.asyncio
async def test_stop_during_warmup_never_publishes(store, fake_provider, monkeypatch):
    import resmon.sysstat.sampler as _sampler_mod
    monkeypatch.setattr(_sampler_mod, "WARMUP_DELAY", 5.0)

    stop = asyncio.Event()
    task = asyncio.create_task(SamplerLoop(store, fake_provider, stop_event=stop).run())
    await asyncio.sleep(0.02)
    stop.set()
    await asyncio.wait_for(task, timeout=0.5)

    assert fake_provider.refresh_all_calls == 1
    assert not store.initialized


@pytest.mark.asyncio
async def test_cancel_stops_loop_without_stop_event(store, fake_provider, fast_cadence):
    task = asyncio.create_task(SamplerLoop(store, fake_provider).run())
    await asyncio.sleep(0.1)
    assert store.initialized

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
