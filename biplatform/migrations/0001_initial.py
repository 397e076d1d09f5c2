import biplatform.utils.object_id
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Chart",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=biplatform.utils.object_id.generate_object_id,
                        editable=False,
                        max_length=24,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "chart_type",
                    models.CharField(
                        choices=[
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
                        ],
                        max_length=20,
                    ),
                ),
                ("data_source_id", models.CharField(db_index=True, max_length=24)),
                (
                    "config",
                    models.JSONField(
                        default=dict,
                        help_text="dimensions, metrics, settings, visual_map and dual_axis",
                    ),
                ),
                ("created_by", models.CharField(db_index=True, max_length=24)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "charts",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Dashboard",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=biplatform.utils.object_id.generate_object_id,
                        editable=False,
                        max_length=24,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("layout", models.JSONField(default=list, help_text="Grid placements of charts")),
                ("edit_count", models.PositiveIntegerField(default=1)),
                ("created_by", models.CharField(db_index=True, max_length=24)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "dashboards",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="DataSource",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=biplatform.utils.object_id.generate_object_id,
                        editable=False,
                        max_length=24,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "source_type",
                    models.CharField(
                        choices=[("csv", "CSV"), ("excel", "EXCEL"), ("json", "JSON")],
                        max_length=10,
                    ),
                ),
                ("headers", models.JSONField(default=list)),
                (
                    "content",
                    models.JSONField(
                        default=list, help_text="Rows of cell strings, parallel to headers"
                    ),
                ),
                ("file_url", models.CharField(blank=True, default="", max_length=1024)),
                (
                    "preprocessing",
                    models.JSONField(
                        default=list,
                        help_text="Rules of the form {field, type, format, aggregator}",
                    ),
                ),
                ("linked_charts", models.JSONField(default=list)),
                ("created_by", models.CharField(db_index=True, max_length=24)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "data_sources",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="MLModel",
            fields=[
                (
                    "id",
                    models.CharField(
                        default=biplatform.utils.object_id.generate_object_id,
                        editable=False,
                        max_length=24,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "model_type",
                    models.CharField(
                        choices=[
                            ("linear_regression", "Linear Regression"),
                            ("decision_tree", "Decision Tree"),
                            ("correlation", "Correlation"),
                            ("kmeans", "K-Means"),
                        ],
                        max_length=32,
                    ),
                ),
                ("data_source_id", models.CharField(db_index=True, max_length=24)),
                ("features", models.JSONField(default=list)),
                ("target", models.CharField(blank=True, default="", max_length=255)),
                ("parameters", models.JSONField(default=dict)),
                ("preprocessing", models.JSONField(default=list)),
                ("training_result", models.JSONField(blank=True, default=None, null=True)),
                ("created_by", models.CharField(db_index=True, max_length=24)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                ("updated_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "ml_models",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="RequestLog",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "user_id",
                    models.CharField(blank=True, db_index=True, default="", max_length=24),
                ),
                ("method", models.CharField(max_length=10)),
                ("path", models.CharField(max_length=1024)),
                ("status", models.PositiveSmallIntegerField()),
                ("latency_ms", models.FloatField()),
                ("ip", models.CharField(blank=True, default="", max_length=64)),
                ("user_agent", models.CharField(blank=True, default="", max_length=512)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                "db_table": "request_logs",
            },
        ),
    ]
