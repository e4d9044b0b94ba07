"""srcset parsing and candidate selection."""

import re
from typing import List, Optional

from substack_twin.models import ImageCandidate
from substack_twin.urls import to_absolute_url

# URL followed by a width ("112w") or density ("2x") descriptor, then a comma or the end.
# URLs may themselves contain commas (Substack CDN: w_112,h_112,c_fill).
_ENTRY = re.compile(r"(\S+)\s+(\d+w|\d+(?:\.\d+)?x)(?=\s*,|\s*$)")

PREFERRED_MIN_WIDTH = 256
PREFERRED_MAX_WIDTH = 512
PREFERRED_MIN_DPR = 2.0


def parse_srcset(srcset: Optional[str]) -> List[ImageCandidate]:
    results: List[ImageCandidate] = []
    for match in _ENTRY.finditer(srcset or ""):
        url = match.group(1).lstrip(",")
        desc = match.group(2)
        if not url:
            continue
        width = 0
        dpr = None
        try:
            if desc.endswith("w"):
                width = int(desc[:-1])
            else:
                dpr = float(desc[:-1])
        except ValueError:
            continue
        results.append(ImageCandidate(url=url, width=width, dpr=dpr))
    return results


def pick_best_candidate(candidates: List[ImageCandidate]) -> Optional[ImageCandidate]:
    if not candidates:
        return None

    by_width = sorted((c for c in candidates if c.width > 0), key=lambda c: c.width)
    if by_width:
        for c in by_width:
            if PREFERRED_MIN_WIDTH <= c.width <= PREFERRED_MAX_WIDTH:
                return c
        return by_width[-1]

    by_dpr = sorted(candidates, key=lambda c: c.dpr or 0)
    for c in by_dpr:
        if (c.dpr or 0) >= PREFERRED_MIN_DPR:
            return c
    return by_dpr[-1]


def pick_best_from_srcset(srcset: Optional[str], base_url: str) -> Optional[str]:
    best = pick_best_candidate(parse_srcset(srcset))
    if best is None:
        return None
    return to_absolute_url(best.url, base_url)
