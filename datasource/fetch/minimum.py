# datasource/fetch/minimum.py
"""
Completeness thresholds for DataSource.fetch_multiple().

The loose option values accepted at the call boundary (None, True, "60%",
-1, 3, "3") are parsed once into one of the variants below, which then
resolve against the number of requested URLs into a plain int.

    parse_minimum(None).resolve(4)    -> 4   (All)
    parse_minimum(True).resolve(4)    -> 1   (AtLeastOne)
    parse_minimum("60%").resolve(4)   -> 3   (Percentage, rounded up)
    parse_minimum(-1).resolve(4)      -> 3   (AllBut, clamped to >= 1)
    parse_minimum(2).resolve(4)       -> 2   (AbsoluteCount)

A resolved value of 0 means "all".
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Union

from ..exceptions import InvalidMinimum

_PERCENT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*%\s*$")
_INT_RE = re.compile(r"^\s*-?\d+\s*$")


@dataclass(frozen=True)
class All:
    def resolve(self, total: int) -> int:
        return total


@dataclass(frozen=True)
class AtLeastOne:
    def resolve(self, total: int) -> int:
        return 1


@dataclass(frozen=True)
class Percentage:
    percent: float

    def resolve(self, total: int) -> int:
        return math.ceil(total * (self.percent / 100)) or total


@dataclass(frozen=True)
class AbsoluteCount:
    count: int

    def resolve(self, total: int) -> int:
        return self.count or total


@dataclass(frozen=True)
class AllBut:
    count: int

    def resolve(self, total: int) -> int:
        return max(total - self.count, 1)


Threshold = Union[All, AtLeastOne, Percentage, AbsoluteCount, AllBut]

MinimumOption = Union[
    None, bool, int, float, str, All, AtLeastOne, Percentage, AbsoluteCount, AllBut
]


def _from_int(n: int) -> Threshold:
    if n < 0:
        return AllBut(-n)
    if n == 0:
        return All()
    return AbsoluteCount(n)


def parse_minimum(value: MinimumOption) -> Threshold:
    if value is None or value is False:
        return All()
    if value is True:
        return AtLeastOne()
    if isinstance(value, (All, AtLeastOne, Percentage, AbsoluteCount, AllBut)):
        return value
    if isinstance(value, int):
        return _from_int(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidMinimum(f"Cannot interpret minimum={value!r}")
        return _from_int(math.ceil(value))
    if isinstance(value, str):
        m = _PERCENT_RE.match(value)
        if m:
            return Percentage(float(m.group(1)))
        if _INT_RE.match(value):
            return _from_int(int(value))
        if not value.strip():
            return All()
    raise InvalidMinimum(f"Cannot interpret minimum={value!r}")


def resolve_minimum(value: MinimumOption, total: int) -> int:
    return parse_minimum(value).resolve(total)


__all__ = [
    "All",
    "AtLeastOne",
    "Percentage",
    "AbsoluteCount",
    "AllBut",
    "Threshold",
    "MinimumOption",
    "parse_minimum",
    "resolve_minimum",
]
