"""Tests for the sliding-window rate limiter."""
import threading
import pytest
from rate_limiter import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start
        self.slept = []

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.slept.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def make_limiter(clock, max_calls=20, window=61):
    return SlidingWindowRateLimiter(max_calls, window, time_func=clock.time, sleep_func=clock.sleep)


def test_admits_up_to_limit_without_waiting(clock):
    limiter = make_limiter(clock)

    waits = [limiter.admit() for _ in range(20)]

    assert waits == [0.0] * 20
    assert clock.slept == []
    assert limiter.recent_calls() == 20


def test_call_over_limit_waits_for_oldest(clock):
    """N+1 back-to-back calls: the last one waits W minus the elapsed time."""
    limiter = make_limiter(clock)
    for _ in range(20):
        limiter.admit()
        clock.now += 1

    waited = limiter.admit()

    # oldest pull was 20s ago
    assert waited == 41
    assert clock.slept == [41]


def test_waiting_call_is_recorded(clock):
    limiter = make_limiter(clock, max_calls=2, window=10)
    limiter.admit()
    limiter.admit()

    limiter.admit()

    # the first two aged out during the wait, the waiting call took a slot
    assert limiter.recent_calls() == 1


def test_never_more_than_limit_in_any_window(clock):
    limiter = make_limiter(clock, max_calls=3, window=10)
    admitted = []
    for _ in range(12):
        limiter.admit()
        admitted.append(clock.time())
        clock.now += 0.5

    for t in admitted:
        in_window = [a for a in admitted if t <= a < t + 10]
        assert len(in_window) <= 3


def test_old_entries_pruned(clock):
    limiter = make_limiter(clock, max_calls=2, window=61)
    limiter.admit()
    limiter.admit()

    clock.now += 61

    assert limiter.recent_calls() == 0
    assert limiter.admit() == 0.0


@pytest.mark.parametrize("max_calls,window", [(0, 61), (-1, 61), (20, 0)])
def test_rejects_bad_settings(max_calls, window):
    with pytest.raises(ValueError):
        SlidingWindowRateLimiter(max_calls, window)


def test_waiting_caller_blocks_other_admissions(clock):
    """A caller sleeping for a slot holds the lock, so later callers queue behind it."""
    entered_sleep = threading.Event()
    gate = threading.Event()
    sleepers = []

    def gated_sleep(seconds):
        sleepers.append(threading.current_thread().name)
        entered_sleep.set()
        assert gate.wait(timeout=5)
        clock.sleep(seconds)

    limiter = SlidingWindowRateLimiter(1, 61, time_func=clock.time, sleep_func=gated_sleep)
    limiter.admit()
    order = []

    def caller(name):
        limiter.admit()
        order.append(name)

    a = threading.Thread(target=caller, args=("A",), name="A")
    b = threading.Thread(target=caller, args=("B",), name="B")
    a.start()
    assert entered_sleep.wait(timeout=5)
    b.start()

    b.join(timeout=0.3)
    assert b.is_alive()
    assert order == []

    gate.set()
    a.join(timeout=5)
    b.join(timeout=5)

    assert sorted(order) == ["A", "B"]
    # B only got the lock once A was admitted, then waited out A's slot
    assert sleepers == ["A", "B"]
    assert clock.slept == [61, 61]
