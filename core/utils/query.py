"""
Query-string building for list endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from core.domain.constants import FILTER_ANY


def is_active_filter(value: Any) -> bool:
    """A filter value worth sending: not empty, not 'all', not False"""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value.strip() not in ("", FILTER_ANY)
    return True


def build_query(
    filters: Optional[BaseModel] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """
    Query params from the non-default filter values (server field names),
    then page/limit, then any explicit extras.
    """
    params: Dict[str, Any] = {}
    if filters is not None:
        for key, value in filters.model_dump(by_alias=True).items():
            if is_active_filter(value):
                params[key] = value
    if page is not None:
        params["page"] = page
    if limit is not None:
        params["limit"] = limit
    for key, value in extra.items():
        if is_active_filter(value):
            params[key] = value
    return params
