"""
mp_listing – Faceted account listing with detached notification dispatch.

Import path convention::

    from mp_listing.application.listing import ListAccounts, ListAccountsHandler
    from mp_listing.application.notifications import NotificationDispatcher
    from mp_listing.kernel.errors import SearchTransientError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
