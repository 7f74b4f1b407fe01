"""
Request body validation pipe.

`ValidationPipe(Schema)` is used as a dependency in place of a plain body
parameter. It rejects every malformed payload with the same 400
"Validation failed" response; field-level errors are only logged.
"""

from __future__ import annotations

import json
from typing import Generic, Type, TypeVar

import structlog
from fastapi import HTTPException, Request
from pydantic import BaseModel, ValidationError

log = structlog.get_logger()

SchemaT = TypeVar("SchemaT", bound=BaseModel)

VALIDATION_FAILED = "Validation failed"


class ValidationPipe(Generic[SchemaT]):
    def __init__(self, schema: Type[SchemaT]):
        self.schema = schema

    def transform(self, value: object) -> SchemaT:
        try:
            return self.schema.model_validate(value)
        except ValidationError as exc:
            log.debug(
                "validation.failed",
                schema=self.schema.__name__,
                errors=exc.errors(include_url=False),
            )
            raise HTTPException(status_code=400, detail=VALIDATION_FAILED)

    async def __call__(self, request: Request) -> SchemaT:
        try:
            value = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            log.debug("validation.bad_json", schema=self.schema.__name__)
            raise HTTPException(status_code=400, detail=VALIDATION_FAILED)
        return self.transform(value)
