"""
Mini Notes Backend — Request Body Parsing
===========================================

What:  Reads a JSON object body into a pydantic model.
Why:   Handlers run under the custom router, not FastAPI's dependency
       system, so bodies are validated here instead of by FastAPI.
How:   Malformed JSON, a non-object body and type mismatches all become
       ValidationError (400). Missing fields are left as None for the
       service to reject with its own message.
"""

import json
from typing import Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from mininotes.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


async def read_json_body(request: Request, model: Type[ModelT]) -> ModelT:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError(message="Request body must be valid JSON")

    if not isinstance(payload, dict):
        raise ValidationError(message="Request body must be a JSON object")

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ValidationError(
            message=f"Invalid value for: {', '.join(fields)}",
            context={"fields": fields},
        )
