#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/refold/regeneration/requisites.py
"""Anchoring of connective text to fragments during partitioning.

The partitioner walks the tree linearly, but connective text such as a comma
or ``" = "`` logically sits between two fragments. :class:`RequisiteResolver`
anchors each requirement to one concrete fragment:

- a before-requisite is kept pending and flushed onto the next fragment added
  to any scope
- an after-requisite attaches to the most recently added child of the active
  scope; while before-requisites are pending, or when the scope has no child
  yet, it is downgraded to a before-requisite

"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from refold.regeneration.fragments import Fragment, Requisite, ScopeFragment

logger = logging.getLogger(__name__)


class RequisiteResolver:
    """Pending before-requisites of one partition pass.

    Parameters
    ----------
    top_scope : callable
        Returns the active scope

    """

    def __init__(self, top_scope: Callable[[], ScopeFragment]):
        self._top_scope = top_scope
        self.pending: list[Requisite] = []

    def require_before(self, requisite: Requisite) -> None:
        if requisite not in self.pending:
            self.pending.append(requisite)

    def require_after(self, requisite: Requisite) -> None:
        if self.pending:
            self.require_before(requisite)
            return
        last = self._top_scope().last_child
        if last is None:
            self.require_before(requisite)
        else:
            last.require_after(requisite)

    def require_after_or_before(self, requisite: Requisite) -> None:
        if self._top_scope().last_child is not None:
            self.require_after(requisite)
        else:
            self.require_before(requisite)

    def flush(self, fragment: Fragment) -> None:
        """Attach all pending requisites to ``fragment`` as before-requisites."""
        for requisite in self.pending:
            fragment.require_before(requisite)
        self.pending.clear()

    def finish(self, root: ScopeFragment) -> None:
        """Attach requisites still pending at the end of a pass to the last fragment."""
        if not self.pending:
            return
        anchor: Optional[Fragment] = None
        for fragment in root.walk():
            if fragment is not root:
                anchor = fragment
        if anchor is None:
            logger.warning("Dropping %d requisite(s) with no fragment to anchor to", len(self.pending))
            self.pending.clear()
            return
        for requisite in self.pending:
            anchor.require_after(requisite)
        self.pending.clear()
