"""
a small test harness: register cases with `@test("...")`, check with
`assert_that` / `assert_equal` / `assert_raises`, and print a report with `run()`.

test functions stay plain `test_*` functions, so pytest collects the same
modules without the harness.
"""
import sys
import time
import traceback
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Type

_registry: Dict[str, List[Dict[str, Any]]] = {
    'cases': [],
    'results': []
}


class _c:
    ok = '\033[92m'
    fail = '\033[91m'
    warn = '\033[93m'
    info = '\033[94m'
    grey = '\033[90m'
    reset = '\033[0m'


class SuiteAssertionError(AssertionError):
    """a failed check, as opposed to an unexpected error inside the case."""


# --- public api ---

def test(description: str) -> Callable:
    """decorator registering a function as a test case."""

    def decorator(func: Callable) -> Callable:
        _registry['cases'].append({'func': func, 'description': description})

        @wraps(func)
        def wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        return wrapper

    return decorator


def assert_that(condition: Any, message: str = "assertion failed") -> None:
    if not condition:
        raise SuiteAssertionError(message)


def assert_equal(actual: Any, expected: Any, message: str = "values differ") -> None:
    if actual != expected:
        raise SuiteAssertionError(f"{message}: expected {expected!r}, got {actual!r}")


def assert_raises(exc_type: Type[BaseException], func: Callable[[], Any],
                  message: Optional[str] = None) -> BaseException:
    """runs `func` and returns the raised exception; fails when nothing (or something else) is raised."""
    try:
        func()
    except exc_type as e:
        return e
    except Exception as e:
        raise SuiteAssertionError(
            message or f"expected {exc_type.__name__}, got {type(e).__name__}: {e}") from e
    raise SuiteAssertionError(message or f"expected {exc_type.__name__}, nothing was raised")


def run(title: str = "test run", verbose: bool = False) -> bool:
    """runs every registered case, prints a report and returns whether all passed."""
    print(f"\n{_c.info}--- {title} ---{_c.reset}")
    start_time = time.perf_counter()
    results = _registry['results'] = []

    for case in _registry['cases']:
        error = None
        try:
            case['func']()
        except SuiteAssertionError as e:
            error = f"assertion failed: {e}"
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
            if verbose:
                traceback.print_exc()

        results.append({'passed': error is None, 'description': case['description'], 'error': error})
        if error is None:
            print(f"  {_c.ok}pass{_c.reset}  {case['description']}")
        else:
            print(f"  {_c.fail}FAIL{_c.reset}  {case['description']}")
            print(f"    {_c.grey}-> {error}{_c.reset}")

    _print_summary(start_time)
    # a script may register and run several batches
    _registry['cases'] = []
    return all(r['passed'] for r in results)


def main(title: str) -> None:
    """entry point for `python some_test.py`: run and exit non-zero on failure."""
    sys.exit(0 if run(title, verbose='-v' in sys.argv) else 1)


def _print_summary(start_time: float) -> None:
    duration = (time.perf_counter() - start_time) * 1000
    results = _registry['results']
    total = len(results)
    passed_count = sum(1 for r in results if r['passed'])
    failed_count = total - passed_count
    color = _c.ok if failed_count == 0 else _c.fail

    print(f"\n{color}--- summary ---{_c.reset}")
    print(f"  ran {_c.info}{total}{_c.reset} tests in {_c.warn}{duration:.2f}ms{_c.reset}")
    print(f"  {_c.ok}passed: {passed_count}{_c.reset}, {_c.fail}failed: {failed_count}{_c.reset}\n")
