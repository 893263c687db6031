"""Book Hub catalog service.

This package contains the REST API for browsing, searching and reviewing
books, together with the persistence, configuration and logging plumbing it
runs on.
"""

__version__ = "1.0.0"
