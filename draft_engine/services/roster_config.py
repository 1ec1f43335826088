"""Convert between roster slot counts and roster configurations."""
import re
from dataclasses import dataclass, fields
from typing import List

from draft_engine.models.settings import RosterConfig, SlotTemplate
from draft_engine.services.league_defaults import ALL_POSITIONS, HITTER_POSITIONS


@dataclass
class RosterCounts:
    """Number of slots of each kind."""
    C: int = 0
    B1: int = 0  # 1B
    B2: int = 0  # 2B
    B3: int = 0  # 3B
    SS: int = 0
    OF: int = 0
    UTIL: int = 0
    SP: int = 0
    RP: int = 0
    P: int = 0
    BN: int = 0

    @property
    def total(self) -> int:
        return sum(getattr(self, f.name) for f in fields(self))


# Base label plus an optional slot number; OF/SP/RP/BN are matched by prefix
_NUMBERED_LABEL = re.compile(r'(C|1B|2B|3B|SS|UTIL|P)\d*')
_NUMBERED_FIELDS = {
    'C': 'C',
    '1B': 'B1',
    '2B': 'B2',
    '3B': 'B3',
    'SS': 'SS',
    'UTIL': 'UTIL',
    'P': 'P',
}
_PREFIX_LABELS = (('BN', 'BN'), ('OF', 'OF'), ('SP', 'SP'), ('RP', 'RP'))


def get_roster_counts(config: RosterConfig) -> RosterCounts:
    """Count slots by kind. Labels that match nothing are ignored."""
    counts = RosterCounts()
    for slot in config.slots:
        label = slot.label.upper()
        attr = None
        for prefix, name in _PREFIX_LABELS:
            if label.startswith(prefix):
                attr = name
                break
        if attr is None:
            match = _NUMBERED_LABEL.fullmatch(label)
            if match:
                attr = _NUMBERED_FIELDS[match.group(1)]
        if attr is not None:
            setattr(counts, attr, getattr(counts, attr) + 1)
    return counts


def _expand_labeled(base: str, count: int) -> List[str]:
    if count <= 0:
        return []
    if count == 1:
        return [base]
    return [f"{base}{i + 1}" for i in range(count)]


def build_roster_config_from_counts(counts: RosterCounts) -> RosterConfig:
    """Build a slot list in canonical order: hitters, pitchers, bench."""
    layout = (
        ('C', counts.C, ('C',)),
        ('1B', counts.B1, ('1B',)),
        ('2B', counts.B2, ('2B',)),
        ('3B', counts.B3, ('3B',)),
        ('SS', counts.SS, ('SS',)),
        ('OF', counts.OF, ('OF',)),
        ('UTIL', counts.UTIL, HITTER_POSITIONS),
        ('SP', counts.SP, ('SP',)),
        ('RP', counts.RP, ('RP',)),
        ('P', counts.P, ('SP', 'RP')),
        ('BN', counts.BN, ALL_POSITIONS),
    )
    slots = []
    for base, count, eligible in layout:
        for label in _expand_labeled(base, count):
            slots.append(SlotTemplate(label, eligible))
    return RosterConfig(slots=tuple(slots))
