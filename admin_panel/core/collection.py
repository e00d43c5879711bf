"""
Generic CRUD scaffold shared by every collection screen.

Each screen service subclasses CollectionService and names its Supabase table
and response schema. Writes never patch local state: routes redirect back to
the list after every mutation, so the next render re-reads the collection.
"""

from supabase import Client
from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Type
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class CollectionService:
    table: str = ""
    response_model: Type[BaseModel] = BaseModel
    order_column: str = "created_at"
    label: str = "Record"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _to_row(self, payload: BaseModel) -> Dict[str, Any]:
        """Row dict for an insert. Subclasses add fixed columns here."""
        return payload.model_dump()

    def _to_update(self, payload: BaseModel) -> Dict[str, Any]:
        """Column changes for an update: only the fields set on the payload."""
        return payload.model_dump(exclude_unset=True)

    def _backend_error(self, action: str, e: Exception) -> HTTPException:
        logger.error(f"Failed to {action} {self.table}: {e}")
        return HTTPException(status_code=500, detail=str(e))

    def list_all(self) -> List[BaseModel]:
        """All rows, newest first"""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .order(self.order_column, desc=True)\
                .execute()
            return [self.response_model(**row) for row in (result.data or [])]
        except Exception as e:
            raise self._backend_error("list", e)

    def get_by_id(self, record_id: Any) -> BaseModel:
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("id", record_id)\
                .maybe_single()\
                .execute()
            if result is None or not result.data:
                raise HTTPException(status_code=404, detail=f"{self.label} not found")
            return self.response_model(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise self._backend_error("read", e)

    def create(self, payload: BaseModel) -> BaseModel:
        try:
            result = self.supabase.table(self.table).insert(self._to_row(payload)).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail=f"Failed to create {self.label.lower()}")
            logger.info(f"Created {self.table} row {result.data[0].get('id')}")
            return self.response_model(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise self._backend_error("create", e)

    def bulk_create(self, payloads: List[BaseModel]) -> List[BaseModel]:
        """Insert all payloads in a single call; either every row lands or none does."""
        if not payloads:
            return []
        try:
            rows = [self._to_row(p) for p in payloads]
            result = self.supabase.table(self.table).insert(rows).execute()
            logger.info(f"Inserted {len(result.data or [])} {self.table} rows")
            return [self.response_model(**row) for row in (result.data or [])]
        except Exception as e:
            raise self._backend_error("bulk insert", e)

    def update(self, record_id: Any, payload: BaseModel) -> BaseModel:
        """Update only the fields set on the payload; every other column is left alone."""
        try:
            update_data = self._to_update(payload)
            if not update_data:
                return self.get_by_id(record_id)
            result = self.supabase.table(self.table)\
                .update(update_data)\
                .eq("id", record_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail=f"{self.label} not found")
            return self.response_model(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise self._backend_error("update", e)

    def set_active(self, record_id: Any, is_active: bool) -> BaseModel:
        try:
            result = self.supabase.table(self.table)\
                .update({"is_active": is_active})\
                .eq("id", record_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail=f"{self.label} not found")
            return self.response_model(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise self._backend_error("update", e)

    def toggle_active(self, record_id: Any) -> BaseModel:
        current = self.get_by_id(record_id)
        return self.set_active(record_id, not current.is_active)

    def delete(self, record_id: Any) -> bool:
        """Delete by id. A missing id is not an error; returns whether a row was removed."""
        try:
            result = self.supabase.table(self.table)\
                .delete()\
                .eq("id", record_id)\
                .execute()
            return len(result.data or []) > 0
        except Exception as e:
            raise self._backend_error("delete", e)

    def count(self) -> int:
        try:
            result = self.supabase.table(self.table)\
                .select("*", count="exact", head=True)\
                .execute()
            return result.count or 0
        except Exception as e:
            raise self._backend_error("count", e)

    def find_one(self, column: str, value: Any) -> Optional[BaseModel]:
        """First row where column == value, or None"""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq(column, value)\
                .limit(1)\
                .execute()
            if not result.data:
                return None
            return self.response_model(**result.data[0])
        except Exception as e:
            raise self._backend_error("read", e)
