from walletsync.db.repos.token_repo import TokenRepo, TokenStore

__all__ = [
    "TokenRepo",
    "TokenStore",
]
