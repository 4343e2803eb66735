"""Exceptions raised by the search subsystem."""


class SearchError(Exception):
    """Base class for search errors."""


class StorageQueryError(SearchError):
    """The entry store rejected or could not execute a query."""


class SessionRequiredError(SearchError):
    """No signed-in user is available to scope the query to."""
