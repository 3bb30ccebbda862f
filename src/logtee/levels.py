"""
Severity levels and the level table.

Levels are plain integers on an open scale, higher means more urgent.
The constants below are the built-in set; callers may emit at, threshold
on, and register prefixes for any other integer.

    ←── less urgent ───────────────────── more urgent ──→
     ...   -1     0      1        2       3      ...
          debug  info  warning  error   fatal

The routing rule is simple:

    sink.threshold <= message.level  →  sink receives the message
"""

from typing import Iterator, List, Optional, Tuple

from .errors import AllocationFailure, InvalidConfiguration, InvalidPrefix


DEBUG = -1
INFO = 0
WARNING = 1
ERROR = 2
FATAL = 3

# Default prefixes reminiscent of Xorg logs
BUILTIN_LEVELS: Tuple[Tuple[int, str], ...] = (
    (DEBUG, "(DD): "),
    (INFO, "(II): "),
    (WARNING, "(WW): "),
    (ERROR, "(EE): "),
    (FATAL, "(FF): "),
)

LEVEL_NAMES = {
    'debug': DEBUG,
    'info': INFO,
    'warning': WARNING,
    'error': ERROR,
    'fatal': FATAL,
}


def parse_level(value) -> int:
    """Parse a level given as an int, a numeric string, or a built-in name.

    Raises:
        ValueError: if the value is neither a known name nor an integer
    """
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.lower() in LEVEL_NAMES:
        return LEVEL_NAMES[text.lower()]
    return int(text)


def _as_level(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"invalid level {value!r}") from exc


class LevelTable:
    """Ordered (level, prefix) pairs, seeded lazily with BUILTIN_LEVELS.

    Duplicate level values are allowed. lookup() scans in insertion order
    and returns the last match, so the most recent registration wins.
    """

    def __init__(self):
        self._entries: Optional[List[Tuple[int, str]]] = None

    @property
    def initialized(self) -> bool:
        return self._entries is not None

    def initialize(self) -> None:
        """Populate with the built-in levels unless already populated."""
        if self._entries is None:
            self._entries = list(BUILTIN_LEVELS)

    def add(self, level: int, prefix: str) -> None:
        """Append a (level, prefix) pair.

        Raises:
            InvalidPrefix: prefix is None or empty (table untouched)
            InvalidConfiguration: level is not an integer (table untouched)
            AllocationFailure: growing the table failed; the table is
                left empty and no lookup succeeds until reset()
        """
        if not prefix:
            raise InvalidPrefix("invalid prefix")
        level = _as_level(level)
        self.initialize()
        try:
            self._entries.append((level, str(prefix)))
        except MemoryError as exc:
            self._entries = []
            raise AllocationFailure("cannot grow level table") from exc

    def lookup(self, level: int) -> Optional[str]:
        """Return the prefix registered for level, or None."""
        found = None
        for lvl, prefix in self._entries or ():
            if lvl == level:
                found = prefix
        return found

    def reset(self) -> None:
        """Discard everything and restore exactly the built-in set."""
        self._entries = list(BUILTIN_LEVELS)

    def __len__(self) -> int:
        return len(self._entries or ())

    def __iter__(self) -> Iterator[Tuple[int, str]]:
        return iter(list(self._entries or ()))
