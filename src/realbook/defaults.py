import logging

from .models import StandardEntry
from .repository import StandardsRepository

_LOG = logging.getLogger(__name__)

# Loops played when a standard does not say otherwise
BASELINE_LOOPS = 2


def normalize_defaults(entries: list[StandardEntry]) -> int:
    """Give every entry without a loop count the baseline; return how many changed.

    An absent, null or zero ``DefaultLoops`` counts as unset.  Any other value
    is left alone, so a second run changes nothing.
    """
    updated = 0
    for entry in entries:
        loops = entry.default_loops
        if loops is None or (type(loops) is int and loops == 0):
            entry.default_loops = BASELINE_LOOPS
            updated += 1
    return updated


def normalize_repository(repo: StandardsRepository, dry_run: bool = False) -> int:
    """Normalize a stored collection, saving it only when something changed."""
    entries = repo.load_all()
    updated = normalize_defaults(entries)
    if updated and not dry_run:
        repo.save_all(entries)
    _LOG.info("Set DefaultLoops=%d on %d entr(ies)", BASELINE_LOOPS, updated)
    return updated
