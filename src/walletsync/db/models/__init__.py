from walletsync.db.models.token import TokenRecord

__all__ = [
    "TokenRecord",
]
