from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.errors import ValidationFailed

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_payload(schema: type[SchemaT], payload: Any) -> SchemaT:
    if not isinstance(payload, dict):
        raise ValidationFailed()
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        # Violations stay in the log; clients only get the generic message.
        logger.info("payload rejected schema=%s errors=%s", schema.__name__, [err.get("loc") for err in exc.errors()])
        raise ValidationFailed() from exc
