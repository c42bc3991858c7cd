"""
domainscope.core.types - Large Object Marker Types
===================================================

Annotate an entity attribute with one of these to map it as a large object.
The model builder turns them into the type names "blob", "clob" and "nclob",
which the cache-strategy pass treats as uncacheable.

Usage:
    >>> class Document:
    ...     title: str
    ...     body: Clob
"""


class Blob(bytes):
    """Binary large object."""


class Clob(str):
    """Character large object."""


class NClob(str):
    """National character large object."""
