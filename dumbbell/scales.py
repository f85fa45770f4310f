"""Band and linear scales used to map the view model onto layout units.

The arithmetic follows the conventions of the common SVG charting scales:
band scales split a continuous range into equal bands with inner/outer padding,
and linear scales can be "niced" so their domain ends on round tick values.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


@dataclass(frozen=True, slots=True)
class BandScale:
    """Ordinal scale assigning each domain value an equal-width band.

    Args:
        domain: Ordered, de-duplicated band names.
        range: Start and end of the continuous output range.
        padding_inner: Fraction of the step left empty between bands (0-1).
        padding_outer: Fraction of the step left empty at each end.
        align: Distribution of the outer space (0.5 centers the bands).
    """

    domain: tuple[str, ...]
    range: tuple[float, float]
    padding_inner: float = 0.0
    padding_outer: float = 0.0
    align: float = 0.5

    @classmethod
    def create(
        cls,
        domain: Sequence[str],
        range: tuple[float, float],
        *,
        padding: float = 0.0,
    ) -> BandScale:
        """Build a band scale with equal inner and outer padding.

        Args:
            domain: Band names; duplicates keep their first position.
            range: Output range.
            padding: Inner and outer padding fraction.

        Returns:
            BandScale over the de-duplicated domain.
        """

        return cls(
            domain=tuple(dict.fromkeys(domain)),
            range=range,
            padding_inner=min(max(padding, 0.0), 1.0),
            padding_outer=max(padding, 0.0),
        )

    @property
    def step(self) -> float:
        """Distance between the starts of adjacent bands."""

        r0, r1 = self.range
        start, stop = (r1, r0) if r1 < r0 else (r0, r1)
        n = len(self.domain)
        return (stop - start) / max(1.0, n - self.padding_inner + self.padding_outer * 2)

    @property
    def bandwidth(self) -> float:
        """Width of each band."""

        return self.step * (1 - self.padding_inner)

    def positions(self) -> tuple[float, ...]:
        """Return the start of every band, aligned to `domain`."""

        r0, r1 = self.range
        reverse = r1 < r0
        start, stop = (r1, r0) if reverse else (r0, r1)
        n = len(self.domain)
        step = self.step
        start += (stop - start - step * (n - self.padding_inner)) * self.align
        values = [start + step * idx for idx in range(n)]
        if reverse:
            values.reverse()
        return tuple(values)

    def offsets(self) -> dict[str, float]:
        """Return a name -> band start mapping for repeated lookups."""

        return dict(zip(self.domain, self.positions()))

    def __call__(self, value: str) -> float | None:
        """Return the band start for `value`, or None when it is not in the domain."""

        return self.offsets().get(value)


def _tick_spec(start: float, stop: float, count: float) -> tuple[int, int, float]:
    """Return (first index, last index, increment) for ticks spanning [start, stop]."""

    step = (stop - start) / max(0.0, count)
    power = math.floor(math.log10(step))
    error = step / math.pow(10, power)
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = math.pow(10, -power) / factor
        i1 = round(start * inc)
        i2 = round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = math.pow(10, power) * factor
        i1 = round(start / inc)
        i2 = round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def tick_increment(start: float, stop: float, count: float) -> float:
    """Return the signed tick increment for a domain, or 0 when there is none.

    A positive result is the step between ticks; a negative result `-k` means
    the step is `1 / k` (kept as a reciprocal to avoid float drift).
    """

    if count <= 0 or not (stop > start) or not math.isfinite(stop - start):
        return 0.0
    return _tick_spec(start, stop, count)[2]


def ticks(start: float, stop: float, count: float) -> tuple[float, ...]:
    """Return round tick values within [start, stop].

    Args:
        start: Domain start.
        stop: Domain end.
        count: Approximate number of ticks wanted.

    Returns:
        Tick values in the direction of the domain; a zero-width domain yields
        the single value.
    """

    if not count > 0:
        return ()
    if start == stop:
        return (float(start),)
    reverse = stop < start
    if reverse:
        start, stop = stop, start
    i1, i2, inc = _tick_spec(start, stop, count)
    if not i2 >= i1:
        return ()
    n = i2 - i1 + 1
    if inc < 0:
        values = [(i1 + idx) / -inc for idx in range(n)]
    else:
        values = [(i1 + idx) * inc for idx in range(n)]
    if reverse:
        values.reverse()
    return tuple(values)


@dataclass(frozen=True, slots=True)
class LinearScale:
    """Continuous linear mapping from a numeric domain to an output range."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def nice(self, count: int = 10) -> LinearScale:
        """Return a copy whose domain is extended to round tick boundaries.

        A zero-width domain has no tick increment and is returned unchanged.
        """

        d0, d1 = self.domain
        reverse = d1 < d0
        start, stop = (d1, d0) if reverse else (d0, d1)
        prestep: float | None = None
        for _ in range(10):
            step = tick_increment(start, stop, count)
            if step == prestep:
                break
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            prestep = step
        domain = (stop, start) if reverse else (start, stop)
        return LinearScale(domain=domain, range=self.range)

    def __call__(self, value: float) -> float:
        """Map a domain value into the range.

        A zero-width domain maps every value to the middle of the range.
        """

        d0, d1 = self.domain
        r0, r1 = self.range
        span = d1 - d0
        t = 0.5 if span == 0 else (value - d0) / span
        return r0 + (r1 - r0) * t

    def ticks(self, count: int = 10) -> tuple[float, ...]:
        """Return round tick values inside the domain."""

        return ticks(self.domain[0], self.domain[1], count)
