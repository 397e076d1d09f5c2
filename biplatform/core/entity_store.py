"""Generic document-style access to the BI collections

Every service receives one EntityStore handle. It is created when the Django
app is ready (see biplatform.apps) and closed on shutdown; nothing else holds
database state. The store knows nothing about owners: callers pass the owner
filter explicitly on every call.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections, transaction
from django.db.models import Count, F, Model, QuerySet
from django.utils import timezone

from biplatform.core.exceptions import EntityNotFoundError, StoreUnavailableError
from biplatform.models import Chart, Dashboard, DataSource, MLModel
from biplatform.utils.custom_logger import CustomLogger

logger = CustomLogger("biplatform.entity_store")


class Collection(str, Enum):
    """Collections reachable through the store"""

    DATA_SOURCES = "data_sources"
    CHARTS = "charts"
    DASHBOARDS = "dashboards"
    ML_MODELS = "ml_models"


COLLECTION_MODELS = {
    Collection.DATA_SOURCES: DataSource,
    Collection.CHARTS: Chart,
    Collection.DASHBOARDS: Dashboard,
    Collection.ML_MODELS: MLModel,
}

DEFAULT_ORDERING = ("-created_at",)


class EntityStore:
    """Owner-agnostic CRUD over the four collections"""

    def __init__(self, using: str = DEFAULT_DB_ALIAS):
        self.using = using
        self.closed = False

    def close(self):
        """release the connection held by this store"""
        self.closed = True
        connections[self.using].close()

    def queryset(self, collection: Collection) -> QuerySet:
        if self.closed:
            raise StoreUnavailableError("entity store is closed")
        return COLLECTION_MODELS[Collection(collection)].objects.using(self.using)

    @contextmanager
    def _guard(self, operation: str, collection: Collection):
        try:
            yield
        except DatabaseError as err:
            logger.error(f"{operation} on {Collection(collection).value} failed: {err}")
            raise StoreUnavailableError(
                f"{operation} on {Collection(collection).value} failed"
            ) from err

    # reads

    def find(self, collection: Collection, **filters) -> Model:
        """return the single document matching `filters`"""
        with self._guard("find", collection):
            document = self.queryset(collection).filter(**filters).first()
        if document is None:
            raise EntityNotFoundError(Collection(collection).value, filters.get("id"))
        return document

    def find_many(
        self,
        collection: Collection,
        order_by: Iterable[str] = DEFAULT_ORDERING,
        limit: Optional[int] = None,
        **filters,
    ) -> List[Model]:
        """return documents matching `filters`, sorted and optionally truncated"""
        with self._guard("find_many", collection):
            query = self.queryset(collection).filter(**filters).order_by(*order_by)
            if limit is not None:
                query = query[:limit]
            return list(query)

    def count(self, collection: Collection, **filters) -> int:
        with self._guard("count", collection):
            return self.queryset(collection).filter(**filters).count()

    def count_by(self, collection: Collection, field: str, **filters) -> Dict[Any, int]:
        """grouped count of matching documents keyed by the value of `field`"""
        with self._guard("count_by", collection):
            rows = (
                self.queryset(collection)
                .filter(**filters)
                .order_by()
                .values(field)
                .annotate(total=Count("pk"))
            )
            return {row[field]: row["total"] for row in rows}

    def project(
        self,
        collection: Collection,
        fields: Dict[str, str],
        literals: Optional[Dict[str, Any]] = None,
        order_by: Iterable[str] = DEFAULT_ORDERING,
        limit: Optional[int] = None,
        **filters,
    ) -> List[Dict[str, Any]]:
        """
        Return plain dicts for matching documents.
        `fields` maps output keys to model fields, `literals` adds constant keys.
        """
        with self._guard("project", collection):
            query = (
                self.queryset(collection)
                .filter(**filters)
                .order_by(*order_by)
                .values(*fields.values())
            )
            if limit is not None:
                query = query[:limit]
            rows = list(query)
        projected = []
        for row in rows:
            item = {key: row[model_field] for key, model_field in fields.items()}
            item.update(literals or {})
            projected.append(item)
        return projected

    # writes

    def insert(self, collection: Collection, document: Model) -> str:
        """persist a new document and return its id"""
        with self._guard("insert", collection):
            document.save(using=self.using, force_insert=True)
        return document.pk

    def update_fields(
        self, collection: Collection, filters: Dict[str, Any], fields: Dict[str, Any]
    ) -> int:
        """set `fields` on every matching document; returns the matched count"""
        values = dict(fields)
        values.setdefault("updated_at", timezone.now())
        with self._guard("update_fields", collection):
            return self.queryset(collection).filter(**filters).update(**values)

    def increment(
        self, collection: Collection, filters: Dict[str, Any], field: str, amount: int = 1
    ) -> int:
        """atomically add `amount` to `field`; returns the matched count"""
        return self.update_fields(collection, filters, {field: F(field) + amount})

    def delete_one(self, collection: Collection, filters: Dict[str, Any]) -> int:
        with self._guard("delete_one", collection):
            pk = self.queryset(collection).filter(**filters).values_list("pk", flat=True).first()
            if pk is None:
                return 0
            deleted, _ = self.queryset(collection).filter(pk=pk).delete()
            return deleted

    def delete_many(self, collection: Collection, filters: Dict[str, Any]) -> int:
        with self._guard("delete_many", collection):
            deleted, _ = self.queryset(collection).filter(**filters).delete()
            return deleted

    # array fields

    def add_to_set(
        self, collection: Collection, filters: Dict[str, Any], field: str, value: Any
    ) -> int:
        """
        Append `value` to the list in `field` unless already present.
        Each document is rewritten under a row lock; returns the matched count.
        """

        def add(items: list) -> list:
            return items if value in items else items + [value]

        return self._rewrite_array(collection, filters, field, add)[0]

    def pull(
        self,
        collection: Collection,
        filters: Dict[str, Any],
        field: str,
        predicate: Callable[[Any], bool],
    ) -> int:
        """remove every element of `field` for which `predicate` holds; returns the modified count"""

        def remove(items: list) -> list:
            return [item for item in items if not predicate(item)]

        return self._rewrite_array(collection, filters, field, remove)[1]

    def _rewrite_array(self, collection, filters, field, rewrite):
        matched = modified = 0
        with self._guard(f"rewrite {field}", collection):
            with transaction.atomic(using=self.using):
                for document in self.queryset(collection).select_for_update().filter(**filters):
                    matched += 1
                    current = list(getattr(document, field) or [])
                    updated = rewrite(current)
                    if updated != current:
                        setattr(document, field, updated)
                        document.updated_at = timezone.now()
                        document.save(using=self.using, update_fields=[field, "updated_at"])
                        modified += 1
        return matched, modified
