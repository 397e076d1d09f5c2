"""Per-dashboard edit counter"""

from typing import Optional

from django.db.models import F

from biplatform.core.entity_store import Collection, EntityStore
from biplatform.core.exceptions import EntityNotFoundError
from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform.edit_counter")

EDIT_COUNT_FIELD = "edit_count"


class EditCounter:
    """Bumps `Dashboard.edit_count` with single atomic updates"""

    def __init__(self, store: EntityStore):
        self.store = store

    @staticmethod
    def with_increment(fields: dict) -> dict:
        """`fields` plus an increment of the edit count, to be applied in the same write"""
        return {**fields, EDIT_COUNT_FIELD: F(EDIT_COUNT_FIELD) + 1}

    def increment(self, dashboard_id: str, owner_id: Optional[str] = None) -> None:
        """
        Add one to the dashboard's edit count and refresh updated_at.
        Raises EntityNotFoundError when no (owned) dashboard matched.
        """
        filters = {"id": dashboard_id}
        if owner_id is not None:
            filters["created_by"] = owner_id
        matched = self.store.increment(Collection.DASHBOARDS, filters, EDIT_COUNT_FIELD)
        if matched == 0:
            raise EntityNotFoundError(Collection.DASHBOARDS.value, dashboard_id)
        logger.debug(f"edit count incremented for dashboard {dashboard_id}")
