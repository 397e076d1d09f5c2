"""Chart models for the BI platform"""

from django.db import models
from django.utils import timezone
from biplatform.utils.object_id import generate_object_id

CHART_TYPE_CHOICES = [
    ("bar", "Bar Chart"),
    ("line", "Line Chart"),
    ("pie", "Pie Chart"),
    ("scatter", "Scatter Chart"),
    ("area", "Area Chart"),
    ("radar", "Radar Chart"),
    ("funnel", "Funnel Chart"),
    ("heatmap", "Heatmap"),
    ("gauge", "Gauge"),
    ("table", "Table"),
]


class Chart(models.Model):
    """Chart configuration model

    `data_source_id` is a plain reference, checked once when the chart is
    created; nothing in the database keeps it valid afterwards.
    """

    id = models.CharField(
        primary_key=True, max_length=24, default=generate_object_id, editable=False
    )
    name = models.CharField(max_length=255)
    chart_type = models.CharField(max_length=20, choices=CHART_TYPE_CHOICES)
    data_source_id = models.CharField(max_length=24, db_index=True)

    config = models.JSONField(
        default=dict, help_text="dimensions, metrics, settings, visual_map and dual_axis"
    )

    created_by = models.CharField(max_length=24, db_index=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.name} ({self.chart_type})"

    def to_json(self):
        """Return JSON representation"""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.chart_type,
            "data_source_id": self.data_source_id,
            "config": self.config,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    class Meta:
        db_table = "charts"
        ordering = ["-created_at"]
