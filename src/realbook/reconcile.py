"""Upgrade the section structure of local standards from a canonical dataset.

Entries are matched by title, trimmed and compared case-insensitively.  For
each matched pair a decision function says whether the canonical
``Sections`` list should replace the local one; the replacement is always the
whole list, never a per-section patch.  Entries without a partner on the
other side are left alone.

The default decision, :func:`sections_differ`, trusts the canonical source
whenever the section count differs or any section disagrees on its repeat
or ending structure.  Values are compared as the JSON they were read from:
an absent key and ``null`` are different values, and any list, even an
empty one, counts as present.  A simplified local arrangement with fewer
sections is overwritten too; pass another ``decide`` function to change that.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .models import StandardEntry
from .repository import StandardsRepository

_LOG = logging.getLogger(__name__)

SectionList = list[dict[str, Any]]
Decision = Callable[[SectionList, SectionList], bool]

# Stands in for a key the JSON object does not have
_MISSING = object()


def title_key(title: str) -> str:
    """Match key for titles: trimmed and lowercased."""
    return (title or "").strip().lower()


def _present(value: Any) -> bool:
    """JSON truthiness: containers count even when empty."""
    if value is _MISSING or value is None:
        return False
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def _same_value(a: Any, b: Any) -> bool:
    if a is _MISSING or b is _MISSING:
        return a is b
    # 1 and True compare equal in Python but are different repeat markers
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, (list, dict)) or isinstance(b, (list, dict)):
        # Containers read from two documents are never the same object
        return False
    return type(a) is type(b) and a == b


def _length(value: Any) -> int | None:
    return len(value) if isinstance(value, (list, str)) else None


def sections_differ(local: SectionList, canonical: SectionList) -> bool:
    """Return True if *canonical* carries structure that *local* lacks."""
    if len(local) != len(canonical):
        return True
    for mine, theirs in zip(local, canonical):
        mine_repeats = mine.get("Repeats", _MISSING)
        their_repeats = theirs.get("Repeats", _MISSING)
        if _present(mine_repeats) != _present(their_repeats):
            return True
        if not _same_value(mine_repeats, their_repeats):
            return True

        mine_endings = mine.get("Endings", _MISSING)
        their_endings = theirs.get("Endings", _MISSING)
        if _present(mine_endings) != _present(their_endings):
            return True
        if (
            _present(mine_endings)
            and _present(their_endings)
            and _length(mine_endings) != _length(their_endings)
        ):
            return True
    return False


@dataclass
class ReconcileReport:
    updated: int = 0
    titles: list[str] = field(default_factory=list)


class StructureReconciler:
    """Replace local section lists where *decide* says the canonical one wins."""

    def __init__(self, decide: Decision = sections_differ):
        self.decide = decide

    def reconcile(
        self, local: list[StandardEntry], canonical: list[StandardEntry]
    ) -> ReconcileReport:
        """Update *local* entries in place and report which ones changed."""
        index: dict[str, StandardEntry] = {}
        for entry in canonical:
            # First canonical entry with a given title wins
            index.setdefault(title_key(entry.title), entry)

        report = ReconcileReport()
        for entry in local:
            source = index.get(title_key(entry.title))
            if source is None:
                continue
            sections = source.data.get("Sections")
            if not isinstance(sections, list):
                continue
            if self.decide(entry.sections, sections):
                entry.sections = copy.deepcopy(sections)
                report.updated += 1
                report.titles.append(entry.title)
                _LOG.debug("Replaced sections of %r", entry.title)
        return report


def sync_structures(
    local_repo: StandardsRepository,
    canonical_repo: StandardsRepository,
    reconciler: StructureReconciler | None = None,
    dry_run: bool = False,
) -> ReconcileReport:
    """Reconcile a local collection against a canonical one and save it.

    The local collection is only written when at least one entry changed.
    RepositoryIoError from either repository aborts the run.
    """
    reconciler = reconciler or StructureReconciler()
    local = local_repo.load_all()
    canonical = canonical_repo.load_all()

    report = reconciler.reconcile(local, canonical)
    if report.updated and not dry_run:
        local_repo.save_all(local)
    _LOG.info("Updated repeats/sections for %d song(s)", report.updated)
    return report
