"""Utility functions for the Unisocial client"""

import logging
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def convert_dicts_to_models(raw_items: List[Dict[str, Any]], model: Type[ModelT]) -> List[ModelT]:
    """Convert raw API dicts to model objects, skipping the ones that fail validation

    The backend returns plain JSON lists. One malformed entry should not hide
    the rest of a comment thread or a chat transcript, so invalid entries are
    logged and dropped.

    Args:
        raw_items: List of raw dictionaries from the API
        model: Pydantic model class to validate each entry against

    Returns:
        List of model instances, in input order

    Example:
        >>> raw = client.get_json("/api/posts/7/comments")
        >>> records = convert_dicts_to_models(raw, CommentRecord)
    """
    converted = []
    for item in raw_items:
        try:
            converted.append(model.model_validate(item))
        except ValidationError as e:
            item_id = _describe(item)
            logger.warning(f"Skipping malformed {model.__name__} {item_id}: {e.error_count()} validation error(s)")
            continue

    return converted


def _describe(item: Any) -> str:
    if not isinstance(item, dict):
        return repr(item)[:40]
    for key, value in item.items():
        if key.endswith("Id") or key == "id":
            return f"{key}={value}"
    return "(no id)"
