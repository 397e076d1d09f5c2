"""Dashboard models for the BI platform"""

from django.db import models
from django.utils import timezone
from biplatform.utils.object_id import generate_object_id

INITIAL_EDIT_COUNT = 1


class Dashboard(models.Model):
    """A named arrangement of charts

    `layout` is a list of placements {chart_id, x, y, width, height}. Entries may
    transiently point at deleted charts; readers skip those.
    """

    id = models.CharField(
        primary_key=True, max_length=24, default=generate_object_id, editable=False
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    layout = models.JSONField(default=list, help_text="Grid placements of charts")
    edit_count = models.PositiveIntegerField(default=INITIAL_EDIT_COUNT)

    created_by = models.CharField(max_length=24, db_index=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return self.name

    @property
    def chart_ids(self) -> list:
        """ids referenced by the layout, in layout order"""
        return [item.get("chart_id") for item in self.layout or [] if isinstance(item, dict) and item.get("chart_id")]

    def to_json(self):
        """Return JSON representation"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "layout": self.layout,
            "edit_count": self.edit_count,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    class Meta:
        db_table = "dashboards"
        ordering = ["-created_at"]
