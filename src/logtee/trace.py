"""
Function tracing decorator.

Routes entry/exit/raise lines through the process-wide TeeLogger at
DEBUG. When no sink accepts DEBUG the wrapped function is called
straight through.
"""

import functools
import inspect
from pathlib import Path

from .levels import DEBUG


def _short_repr(value) -> str:
    if isinstance(value, Path):
        return f"Path('{value}')"
    if isinstance(value, str) and len(value) > 50:
        return f"'{value[:47]}...'"
    if isinstance(value, (list, tuple)) and len(value) > 3:
        return f"[...{len(value)} items...]"
    return repr(value)


def trace(func):
    """Decorator to trace function calls via the TeeLogger singleton."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        # Lazy import: manager imports levels, and trace is re-exported
        # from the package root
        from .manager import get_tee

        tee = get_tee()
        if not tee.enabled_for(DEBUG):
            return func(*args, **kwargs)

        module = inspect.getmodule(func)
        where = f"{module.__name__ if module else 'unknown'}.{func.__qualname__}"
        args_str = ', '.join(
            [_short_repr(a) for a in args]
            + [f"{k}={_short_repr(v)}" for k, v in kwargs.items()]
        )

        tee.debug("[TRACE] >> {}({})\n", where, args_str)
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            tee.debug("[TRACE] !! {} raised: {}: {}\n", where, type(e).__name__, e)
            raise
        if result is not None:
            tee.debug("[TRACE] << {} returned: {}\n", where, _short_repr(result))
        return result

    return wrapper
