"""
Process-wide registry of atomic uncertain variables.

Every value created with an explicit, positive standard deviation gets a
unique id here. Derived values keep partial derivatives keyed by these ids
and look the original standard deviations up on demand.
"""

import itertools
import logging
import math
import threading
from contextlib import contextmanager
from numbers import Real
from typing import Dict, Iterable, List

from ..exceptions import InvalidArgumentError, VariableNotFoundError

logger = logging.getLogger(__name__)


class ReadWriteLock:
    """Many concurrent readers or a single writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read_locked(self):
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self):
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class VariableRegistry:
    """
    Thread-safe store of original standard deviations, indexed by variable id.

    Ids start at 1 and are never reused until :meth:`clear` is called; 0 means
    "no variable". The table only grows, so its size is bounded by the number
    of atomic values ever created rather than by the number of operations.
    """

    def __init__(self):
        self._ids = itertools.count(1)
        self._lock = ReadWriteLock()
        self._stddevs: Dict[int, float] = {}

    def register(self, stddev: float) -> int:
        """
        Register a new atomic variable.

        Parameters
        ----------
        stddev : float
            Original standard deviation, must be >= 0

        Returns
        -------
        int
            Fresh, strictly positive variable id
        """
        if not isinstance(stddev, Real) or isinstance(stddev, bool):
            raise TypeError(f"Standard deviation must be a real number, got {type(stddev).__name__}")
        stddev = float(stddev)
        if stddev < 0 or math.isnan(stddev):
            raise InvalidArgumentError(f"Standard deviation cannot be negative, got {stddev}")

        # minted under the write lock so clear() cannot interleave with a registration
        with self._lock.write_locked():
            var_id = next(self._ids)
            self._stddevs[var_id] = stddev
        return var_id

    def lookup(self, var_id: int) -> float:
        """Return the original standard deviation of ``var_id``."""
        with self._lock.read_locked():
            try:
                return self._stddevs[var_id]
            except KeyError:
                raise VariableNotFoundError(f"Unknown variable id in registry: {var_id}") from None

    def lookup_many(self, var_ids: Iterable[int]) -> List[float]:
        """Look up several ids while holding the read lock once."""
        stddevs = []
        with self._lock.read_locked():
            for var_id in var_ids:
                try:
                    stddevs.append(self._stddevs[var_id])
                except KeyError:
                    raise VariableNotFoundError(f"Unknown variable id in registry: {var_id}") from None
        return stddevs

    def clear(self):
        """Forget every variable and restart ids at 1. Meant for test isolation only."""
        with self._lock.write_locked():
            count = len(self._stddevs)
            self._stddevs.clear()
            self._ids = itertools.count(1)
        logger.debug("Cleared variable registry (%d variables dropped)", count)

    def size(self) -> int:
        with self._lock.read_locked():
            return len(self._stddevs)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, var_id) -> bool:
        with self._lock.read_locked():
            return var_id in self._stddevs

    def __repr__(self):
        return f"VariableRegistry(size={self.size()})"


_default_registry = VariableRegistry()


def get_registry() -> VariableRegistry:
    """Return the process-wide registry used by every UncertainValue."""
    return _default_registry


def register(stddev: float) -> int:
    return _default_registry.register(stddev)


def lookup(var_id: int) -> float:
    return _default_registry.lookup(var_id)


def clear():
    _default_registry.clear()


def size() -> int:
    return _default_registry.size()
