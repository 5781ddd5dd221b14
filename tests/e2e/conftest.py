"""E2E conftest — real psutil provider and the real sampling cadence.

E2E tests exercise the monitor end-to-end on the host running the tests:
    - PsutilProvider reading live counters
    - Default warm-up / tick / refresh constants (> 2 s per test)

Every module here is marked ``slow``. Skip them with:
    RESMON_SKIP_SLOW=1 pytest
"""
