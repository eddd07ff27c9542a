# petcare/utils/concurrency.py
from concurrent.futures import ThreadPoolExecutor
from flask import current_app


def run_parallel(*funcs):
    """Run independent reads concurrently and return their results in order.

    Every call runs inside its own application context, so each gets its own
    database session. Results must be plain data; ORM instances are detached
    once the worker's context is torn down. The first exception raised by a
    worker propagates to the caller.
    """
    if not funcs:
        return []
    app = current_app._get_current_object()
    max_workers = max(1, min(len(funcs), app.config.get('PARALLEL_READ_WORKERS', 2)))

    def call_in_context(func):
        with app.app_context():
            return func()

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(call_in_context, func) for func in funcs]
        return [future.result() for future in futures]
