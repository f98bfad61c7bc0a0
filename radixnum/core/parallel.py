"""Run independent digit operations on a thread pool."""

from __future__ import annotations

import contextvars
import logging
import os
from concurrent.futures import ThreadPoolExecutor

log = logging.getLogger(__name__)


def _worker_count(n_jobs, n_calls):
    if n_jobs == 0 or n_jobs < -1:
        raise ValueError(f"n_jobs must be -1 or a positive integer, got {n_jobs}.")
    workers = (os.cpu_count() or 1) if n_jobs == -1 else n_jobs
    return max(1, min(workers, n_calls))


def parallel_map(func, args_list, n_jobs=1):
    """Call ``func(*args)`` for every entry of ``args_list``.

    Calls may share read-only operands, but each must write to its own
    output digits. The kernels keep no state between calls, so
    threads are enough to keep many multiplications in flight.

    Each call runs in a copy of the caller's :mod:`contextvars` context,
    taken at submission, so the backend and multiplication strategy active
    in the caller are active in the worker too.

    Parameters
    ----------
    func : callable
        Function to call.
    args_list : iterable of tuples
        Positional arguments for each call.
    n_jobs : int, default 1
        Number of worker threads. 1 runs the calls in order on the calling
        thread, -1 uses one thread per CPU.

    Returns
    -------
    list
        Return values in the order of ``args_list``. The first failing call,
        in that order, has its exception re-raised.
    """
    args_list = list(args_list)
    workers = _worker_count(n_jobs, len(args_list))
    if workers == 1:
        return [func(*args) for args in args_list]

    log.debug("parallel_map: %d calls on %d threads", len(args_list), workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="radixnum") as executor:
        futures = [executor.submit(contextvars.copy_context().run, func, *args) for args in args_list]
        return [future.result() for future in futures]
