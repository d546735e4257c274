"""
Turn a raw model output into a real-world price.

The upstream model may answer with a direct price, a per-square-metre rate,
a log-price or a price in thousands. Every interpretation is generated and
the one landing in a believable price band wins.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Literal

from .extractor import DECIMAL_RE

RuleTag = Literal["raw", "per_sqm", "exp_per_sqm", "pow10_per_sqm", "exp", "pow10", "x1000"]

PLAUSIBLE_MIN = 50_000
PLAUSIBLE_MAX = 2_000_000_000

AREA_FEATURE = "procedure_area"

@dataclass(frozen=True)
class Candidate:
    value: float
    rule: RuleTag

    @property
    def per_area(self) -> bool:
        return "per_sqm" in self.rule

def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf

def _pow10(x: float) -> float:
    try:
        return 10.0 ** x
    except OverflowError:
        return math.inf

def feature_area(features: Dict[str, Any]) -> float:
    """Numeric `procedure_area`, or 0 when missing or unusable."""
    area = (features or {}).get(AREA_FEATURE)
    if area is None or isinstance(area, bool):
        return 0.0
    if isinstance(area, str):
        # Plain decimals only; "1_000", "1e3" or "1,200" are not areas
        area = area.strip()
        if not DECIMAL_RE.match(area):
            return 0.0
    try:
        area = float(area)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return area if math.isfinite(area) else 0.0

def candidates(raw_number: float, features: Dict[str, Any]) -> list[Candidate]:
    """All finite interpretations, in fixed rule order."""
    area = feature_area(features)
    out = [Candidate(raw_number, "raw")]
    if area > 0:
        out.append(Candidate(raw_number * area, "per_sqm"))
        out.append(Candidate(_exp(raw_number) * area, "exp_per_sqm"))
        out.append(Candidate(_pow10(raw_number) * area, "pow10_per_sqm"))
    out.append(Candidate(_exp(raw_number), "exp"))
    out.append(Candidate(_pow10(raw_number), "pow10"))
    out.append(Candidate(raw_number * 1_000, "x1000"))
    return [c for c in out if math.isfinite(c.value)]

def is_plausible(value: float) -> bool:
    return PLAUSIBLE_MIN <= value <= PLAUSIBLE_MAX

def resolve(raw_number: float, features: Dict[str, Any]) -> Candidate:
    """
    Pick the plausible candidate, preferring per-area rules and then the
    larger value. With nothing in range, the largest candidate is returned.
    """
    cands = candidates(raw_number, features)
    plausible = [c for c in cands if is_plausible(c.value)]
    if plausible:
        # sorted() is stable so equal keys keep rule order
        return sorted(plausible, key=lambda c: (not c.per_area, -c.value))[0]
    if not cands:
        return Candidate(raw_number, "raw")
    return sorted(cands, key=lambda c: -c.value)[0]
