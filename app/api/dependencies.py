"""
Shared API dependencies.

The engine never reads the clock; the HTTP layer resolves "now" once per
request and hands it down explicitly.
"""

import datetime
from typing import Optional

from fastapi import Query


def get_as_of(
    as_of: Optional[datetime.datetime] = Query(
        None, description="Reference datetime (defaults to now)"
    ),
) -> datetime.datetime:
    return as_of or datetime.datetime.now()
