from abc import ABC
from typing import Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Query, Session

T = TypeVar("T")
SchemaType = TypeVar("SchemaType", bound=BaseModel)


class BaseRepository(Generic[T, SchemaType], ABC):
    """Base repository. Reads return pydantic schemas, never ORM rows.

    Every write accepts ``commit``. Services that compose several writes into
    one unit pass ``commit=False`` and call ``db.commit()`` once at the end.
    """

    def __init__(
        self, model_class: Type[T], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, model_instance: Any) -> Optional[SchemaType]:
        if model_instance is None:
            return None
        return self.schema_class.model_validate(model_instance)

    def _to_schemas(self, model_instances: List[Any]) -> List[SchemaType]:
        return [self._to_schema(instance) for instance in model_instances]

    def _ensure_clean_session(self) -> None:
        """Roll back a transaction left in a failed state by an earlier error."""
        if not self.db.is_active:
            self.db.rollback()

    def _finish(self, commit: bool) -> None:
        try:
            self.db.flush()
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def _get_model(self, id: Any) -> Optional[T]:
        return self.db.get(self.model_class, id)

    def _apply_filters(self, query: Query, filters: Optional[Dict[str, Any]]) -> Query:
        if filters:
            for key, value in filters.items():
                if hasattr(self.model_class, key):
                    query = query.filter(getattr(self.model_class, key) == value)
        return query

    def get_by_id(self, id: Any) -> Optional[SchemaType]:
        self._ensure_clean_session()
        return self._to_schema(self._get_model(id))

    def get_by_field(self, field_name: str, value: Any) -> Optional[SchemaType]:
        self._ensure_clean_session()
        model_instance = (
            self.db.query(self.model_class)
            .filter(getattr(self.model_class, field_name) == value)
            .first()
        )
        return self._to_schema(model_instance)

    def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SchemaType]:
        self._ensure_clean_session()
        query = self._apply_filters(self.db.query(self.model_class), filters)

        if order_by:
            descending = order_by.startswith("-")
            column = getattr(self.model_class, order_by.lstrip("-"), None)
            if column is not None:
                query = query.order_by(column.desc() if descending else column)

        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        return self._to_schemas(query.all())

    def paginate(
        self, query: Query, page: int, limit: int
    ) -> Tuple[List[SchemaType], int]:
        """Run ``query`` for one page. Returns (items, total)."""
        total = query.order_by(None).count()
        rows = query.offset((page - 1) * limit).limit(limit).all()
        return self._to_schemas(rows), total

    def create(self, commit: bool = True, **kwargs) -> SchemaType:
        self._ensure_clean_session()
        instance = self.model_class(**kwargs)
        self.db.add(instance)
        self._finish(commit)
        self.db.refresh(instance)
        return self._to_schema(instance)

    def update(
        self, instance_id: Any, commit: bool = True, **kwargs
    ) -> Optional[SchemaType]:
        self._ensure_clean_session()
        instance = self._get_model(instance_id)
        if not instance:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        self._finish(commit)
        self.db.refresh(instance)
        return self._to_schema(instance)

    def delete(self, instance_id: Any, commit: bool = True) -> bool:
        self._ensure_clean_session()
        instance = self._get_model(instance_id)
        if not instance:
            return False

        self.db.delete(instance)
        self._finish(commit)
        return True

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        self._ensure_clean_session()
        return self._apply_filters(self.db.query(self.model_class), filters).count()

    def exists(self, filters: Dict[str, Any]) -> bool:
        self._ensure_clean_session()
        query = self._apply_filters(self.db.query(self.model_class), filters)
        return query.first() is not None
