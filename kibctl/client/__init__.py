"""
Client package for kibctl.

This package provides the HTTP gateway to the Kibana API and the
saved-object title search built on top of it.
"""
from kibctl.client.http_client import KibanaHTTPClient
from kibctl.client.saved_objects import PER_PAGE, SavedObjectSearch, quote_phrase

__all__ = [
    "KibanaHTTPClient",
    "SavedObjectSearch",
    "PER_PAGE",
    "quote_phrase",
]
