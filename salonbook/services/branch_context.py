"""Selected-branch context shared by every dashboard screen.

Initialization order: company, then its branches, then the saved selection
for the session, validated against the fetched branches, else the first one.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from salonbook.schemas.context import BranchContextResponse
from salonbook.services.directory import DirectoryService
from salonbook.services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class SelectionStore:
    """Last selected branch per session."""

    def __init__(self) -> None:
        self._selected: Dict[str, int] = {}

    def get(self, session: str) -> Optional[int]:
        return self._selected.get(session)

    def set(self, session: str, branch_id: int) -> None:
        self._selected[session] = branch_id

    def clear(self, session: str) -> None:
        self._selected.pop(session, None)


class BranchContext:
    def __init__(self, directory: DirectoryService, store: SelectionStore) -> None:
        self._directory = directory
        self._store = store

    async def load(self, session: str = "default") -> BranchContextResponse:
        company = await self._directory.get_company()
        branches = await self._directory.list_branches(company.id) if company else []
        branch_ids = [branch.id for branch in branches]

        saved = self._store.get(session)
        if saved in branch_ids:
            selected = saved
        elif branch_ids:
            if saved is not None:
                logger.info(
                    "Saved branch %s no longer exists for session %s; defaulting to %s",
                    saved,
                    session,
                    branch_ids[0],
                )
            selected = branch_ids[0]
            self._store.set(session, selected)
        else:
            selected = None
            self._store.clear(session)

        return BranchContextResponse(
            session=session,
            company=company,
            branches=branches,
            selected_branch_id=selected,
        )

    async def select(self, session: str, branch_id: int) -> BranchContextResponse:
        context = await self.load(session)
        if branch_id not in {branch.id for branch in context.branches}:
            raise NotFoundError(f"Branch '{branch_id}' not found")
        self._store.set(session, branch_id)
        return context.model_copy(update={"selected_branch_id": branch_id})

    async def branch_id(self, session: str = "default", requested: Optional[int] = None) -> int:
        """Explicit ``requested`` branch, else the session's selection."""

        if requested is not None:
            return requested
        context = await self.load(session)
        if context.selected_branch_id is None:
            raise NotFoundError("No branch available for this company")
        return context.selected_branch_id
