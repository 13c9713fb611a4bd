from .errors import EmptyCollection, InvariantViolation, NotFound
from .probe import LINEAR_PROBES, PERTURB_SHIFT, default_hash, probe_sequence
from .sets import HashSet, StableSet
from .slot import STORAGE_POLICIES, MutableSlots, ReplaceSlots, SlotState
from .table import DEFAULT_GROWTH, MIN_CAPACITY, GrowthPolicy, Table

__all__ = [
    "DEFAULT_GROWTH",
    "EmptyCollection",
    "GrowthPolicy",
    "HashSet",
    "InvariantViolation",
    "LINEAR_PROBES",
    "MIN_CAPACITY",
    "MutableSlots",
    "NotFound",
    "PERTURB_SHIFT",
    "ReplaceSlots",
    "STORAGE_POLICIES",
    "SlotState",
    "StableSet",
    "Table",
    "default_hash",
    "probe_sequence",
]
