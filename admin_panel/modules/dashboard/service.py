from supabase import Client
from admin_panel.modules.admins.service import AdminService
from admin_panel.modules.ads.service import AdService
from admin_panel.modules.dashboard.schemas import DashboardStats
from admin_panel.modules.notifications.service import NotificationService
from admin_panel.modules.tips.service import TipService
from admin_panel.modules.users.schemas import UserResponse
from admin_panel.modules.users.service import UserService
from typing import List


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)

    def get_stats(self) -> DashboardStats:
        """Row counts for the five collections plus total steps across all users"""
        return DashboardStats(
            total_users=self.users.count(),
            total_tips=TipService(self.supabase).count(),
            total_ads=AdService(self.supabase).count(),
            total_notifications=NotificationService(self.supabase).count(),
            total_admins=AdminService(self.supabase).count(),
            total_steps=self.users.total_steps(),
        )

    def recent_users(self, limit: int = 5) -> List[UserResponse]:
        return self.users.list_recent(limit)
