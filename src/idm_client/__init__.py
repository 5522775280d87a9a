"""Identity management API client package.

This package provides a client for the identity management REST API. It
includes a fluent request builder, a client factory that shares
configuration between requests, and a lazy paginator over list endpoints.

:var __version__: Current package version
:type __version__: str
"""

__version__ = "0.1.0"
