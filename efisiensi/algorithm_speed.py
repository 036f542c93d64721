import time
from typing import Callable, Any, Tuple


def measure_time(func: Callable, *args, repeats: int = 1, warmup: int = 0, **kwargs) -> Tuple[float, Any]:
    """
    Average wall time per call of func(*args, **kwargs).
    'warmup' untimed calls run first (numpy first-call overhead).
    Returns (avg_seconds, result of the last timed call).
    """
    for _ in range(max(0, warmup)):
        func(*args, **kwargs)
    timings = []
    result = None
    for _ in range(max(1, repeats)):
        start = time.perf_counter()
        result = func(*args, **kwargs)
        timings.append(time.perf_counter() - start)
    return sum(timings) / len(timings), result


def measure_throughput(func: Callable, nbytes: int, *args, repeats: int = 1, warmup: int = 0, **kwargs) -> Tuple[float, float, Any]:
    """
    Time a function that processes nbytes per call.
    Returns (avg_seconds, MiB_per_second, last_result).
    """
    elapsed, result = measure_time(func, *args, repeats=repeats, warmup=warmup, **kwargs)
    if elapsed <= 0:
        return elapsed, float("inf"), result
    return elapsed, nbytes / (1024 * 1024) / elapsed, result
