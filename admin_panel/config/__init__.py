from admin_panel.config.settings import settings

__all__ = ["settings"]
