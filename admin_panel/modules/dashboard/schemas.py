from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_users: int = 0
    total_tips: int = 0
    total_ads: int = 0
    total_notifications: int = 0
    total_admins: int = 0
    total_steps: int = 0
