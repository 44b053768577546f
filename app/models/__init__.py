from app.models.account import Account

__all__ = ["Account"]
