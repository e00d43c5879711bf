from admin_panel.core.collection import CollectionService
from admin_panel.modules.users.aggregation import aggregate_steps
from admin_panel.modules.users.schemas import UserResponse, StepRecord, UserWithSteps
from typing import List
from fastapi import HTTPException


class UserService(CollectionService):
    table = "users"
    response_model = UserResponse
    label = "User"

    def list_steps(self) -> List[StepRecord]:
        """Every step_count row; aggregation happens in memory"""
        try:
            result = self.supabase.table("step_count").select("*").execute()
            return [StepRecord(**row) for row in (result.data or [])]
        except Exception as e:
            raise self._backend_error("list", e)

    def list_users_with_steps(self) -> List[UserWithSteps]:
        return aggregate_steps(self.list_all(), self.list_steps())

    def list_recent(self, limit: int = 5) -> List[UserResponse]:
        try:
            result = self.supabase.table(self.table)\
                .select("id, name, email, created_at")\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
            return [UserResponse(**user) for user in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_targets(self) -> List[UserResponse]:
        """Minimal user rows for the notification target picker"""
        try:
            result = self.supabase.table(self.table).select("id, name, email").execute()
            return [UserResponse(**user) for user in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def total_steps(self) -> int:
        try:
            result = self.supabase.table("step_count").select("steps").execute()
            return sum((row.get("steps") or 0) for row in (result.data or []))
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
