"""Bounded moving average used to smooth power-rail readings."""


class MovingAverage:
    """
    Running mean over the last ``capacity`` integer samples.

    Samples are written into a ring buffer; the running sum is adjusted by
    the evicted value once the buffer has wrapped. The mean is truncated
    toward zero, like C long division.
    """

    __slots__ = ("_buffer", "_capacity", "_pos", "_count", "_sum")

    def __init__(self, capacity: int) -> None:
        """Initialize an empty window of ``capacity`` samples."""
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._buffer = [0] * capacity
        self._pos = 0
        self._count = 0
        self._sum = 0

    @property
    def capacity(self) -> int:
        """Window size in samples."""
        return self._capacity

    @property
    def count(self) -> int:
        """Number of valid samples, ``min(observations, capacity)``."""
        return self._count

    @property
    def total(self) -> int:
        """Sum of the valid samples."""
        return self._sum

    def observe(self, sample: int) -> int:
        """Record ``sample`` and return the current average."""
        if self._count == self._capacity:
            self._sum -= self._buffer[self._pos]
        else:
            self._count += 1
        self._buffer[self._pos] = sample
        self._sum += sample
        self._pos = (self._pos + 1) % self._capacity
        return self.average

    @property
    def average(self) -> int:
        """Mean of the valid samples, 0 before the first observation."""
        if self._count == 0:
            return 0
        quotient = abs(self._sum) // self._count
        return quotient if self._sum >= 0 else -quotient
