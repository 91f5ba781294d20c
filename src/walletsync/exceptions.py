"""Exception hierarchy for the wallet sync pipeline."""


class WalletSyncError(Exception):
    """Base class for all walletsync errors."""


class ExternalServiceError(WalletSyncError):
    """An upstream API (token registry, Blockfrost) failed or returned garbage."""


class RateLimitError(ExternalServiceError):
    """Upstream answered 429; safe to retry after backing off."""
