"""
Scoring Policy Configuration

Manages loading from environment variables and default values.
"""

import os
from dataclasses import dataclass, asdict


def _env_bool(key: str, default: bool) -> bool:
    """Convert an environment variable to bool"""
    val = os.environ.get(key)
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")


def _env_optional_str(key: str, default: str | None = None) -> str | None:
    """Get an environment variable as a string; empty values count as unset"""
    val = os.environ.get(key)
    if not val:
        return default
    return val


@dataclass
class ScoringPolicy:
    """Strictness policy and options for one scoring run"""
    trace: bool = False           # print the assessment of each response
    any_doc: bool = False         # match on filler only, ignoring doc id and offsets
    ignore_offsets: bool = False  # match on filler and doc id, ignoring offsets
    no_case: bool = False         # ignore case when matching fillers
    slots_path: str | None = None  # take the list of scored queries from this file

    def __post_init__(self):
        # A document wildcard is meaningless without offset wildcards
        if self.any_doc:
            self.ignore_offsets = True

    def to_dict(self) -> dict:
        """Convert to dictionary format"""
        return {"scoring_policy": asdict(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "ScoringPolicy":
        """Create from dictionary (handles presence/absence of scoring_policy key)"""
        return cls(**data.get("scoring_policy", data))


def load_policy() -> ScoringPolicy:
    """
    Load the scoring policy from environment variables

    Uses default values when environment variables are not set.

    Returns:
        ScoringPolicy
    """
    return ScoringPolicy(
        trace=_env_bool("SF_SCORER_TRACE", False),
        any_doc=_env_bool("SF_SCORER_ANYDOC", False),
        ignore_offsets=_env_bool("SF_SCORER_IGNORE_OFFSETS", False),
        no_case=_env_bool("SF_SCORER_NOCASE", False),
        slots_path=_env_optional_str("SF_SCORER_SLOTS"),
    )


def log_level_from_env(default: str = "WARNING") -> str:
    """Logging level name for the CLI"""
    return os.environ.get("SF_SCORER_LOG_LEVEL", default).upper()
