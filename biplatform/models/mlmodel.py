"""Machine learning model definitions

The platform only stores these; training happens in an external trainer which
posts its result payload back.
"""

from django.db import models
from django.utils import timezone
from biplatform.utils.object_id import generate_object_id

ML_MODEL_TYPE_CHOICES = [
    ("linear_regression", "Linear Regression"),
    ("decision_tree", "Decision Tree"),
    ("correlation", "Correlation"),
    ("kmeans", "K-Means"),
]


class MLModel(models.Model):
    """A descriptive model trained over a data source"""

    id = models.CharField(
        primary_key=True, max_length=24, default=generate_object_id, editable=False
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    model_type = models.CharField(max_length=32, choices=ML_MODEL_TYPE_CHOICES)
    data_source_id = models.CharField(max_length=24, db_index=True)
    features = models.JSONField(default=list)
    target = models.CharField(max_length=255, blank=True, default="")
    parameters = models.JSONField(default=dict)
    preprocessing = models.JSONField(default=list)
    training_result = models.JSONField(null=True, blank=True, default=None)

    created_by = models.CharField(max_length=24, db_index=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    updated_at = models.DateTimeField(default=timezone.now)

    def __str__(self):
        return f"{self.name} ({self.model_type})"

    @property
    def is_trained(self) -> bool:
        return self.training_result is not None

    def to_json(self):
        """Return JSON representation"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.model_type,
            "data_source_id": self.data_source_id,
            "features": self.features,
            "target": self.target,
            "parameters": self.parameters,
            "preprocessing": self.preprocessing,
            "training_result": self.training_result,
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    class Meta:
        db_table = "ml_models"
        ordering = ["-created_at"]
