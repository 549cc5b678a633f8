# Copyright 2025 Softwell S.r.l.
# Licensed under the Apache License, Version 2.0

"""
Data structures wrapping raw ASGI values.

Mapping from ASGI to stoa-asgi classes::

    scope["headers"] = [(b"...", b"...")]  ->  Headers (case-insensitive)
    scope["query_string"] = b"a=1&b=2"     ->  QueryParams (parsed)
"""

from .headers import Headers, headers_from_scope
from .query_params import QueryParams, query_params_from_scope

__all__ = [
    "Headers",
    "QueryParams",
    "headers_from_scope",
    "query_params_from_scope",
]
