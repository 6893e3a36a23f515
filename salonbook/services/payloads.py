"""Boundary validation of booking API responses."""

from __future__ import annotations

import logging
from typing import Any, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from salonbook.services.exceptions import DownstreamServiceError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_one(model: Type[ModelT], data: Any, what: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.exception("Booking API returned a malformed %s", what)
        raise DownstreamServiceError(
            f"Booking API returned a malformed {what}", cause=exc
        ) from exc


def parse_list(model: Type[ModelT], data: Any, what: str) -> List[ModelT]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise DownstreamServiceError(f"Booking API returned a malformed {what} list")
    return [parse_one(model, item, what) for item in data]
