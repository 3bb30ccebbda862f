"""
Error taxonomy and the last-resort diagnostic path.

Nothing in here is ever raised out of a logging call. The registry and the
level table raise these to the TeeLogger facade, which turns them into
Warning/Error emissions or, when the emitter itself can't be trusted, a
direct write to stderr via report_failure().
"""

import os
import sys


class TeeError(Exception):
    """Base class for logtee errors."""


class AllocationFailure(TeeError):
    """Growing the level table or the sink registry failed."""


class InvalidConfiguration(TeeError):
    """A configuration value is unusable (bad prefix, bad line_max, ...)."""


class InvalidPrefix(InvalidConfiguration):
    """Level prefix is empty or missing."""


class SinkUnavailable(TeeError):
    """A sink path could not be opened for appending."""

    def __init__(self, path, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"can't open '{path}' for logging: {describe_error(cause)}")


def describe_error(err=None) -> str:
    """Human-readable description of an OS error.

    Accepts an errno int, an exception, or None. None means "the exception
    currently being handled", falling back to errno 0 when there is none,
    which is what strerror(errno) yields on a clean errno.
    """
    if err is None:
        err = sys.exc_info()[1]
        if err is None:
            return os.strerror(0)
    if isinstance(err, int):
        return os.strerror(err)
    if isinstance(err, OSError):
        if err.strerror:
            return err.strerror
        if err.errno is not None:
            return os.strerror(err.errno)
    return str(err) or type(err).__name__


def report_failure(where: str, what: str, err=None) -> None:
    """Write a diagnostic straight to stderr, bypassing the emitter.

    Format mirrors perror(): ``<where>: <what>: <description>``.
    """
    stream = sys.stderr if sys.stderr is not None else sys.__stderr__
    if stream is None:
        return
    try:
        stream.write(f"{where}: {what}: {describe_error(err)}\n")
        stream.flush()
    except (OSError, ValueError):
        pass
