"""
JSON body parsing for endpoints that authenticate first.

FastAPI decodes a typed body parameter before it resolves dependencies, so
a malformed body would be reported ahead of a missing session or a missing
role. Endpoints guarded by the session dependencies take the raw
``Request`` and call ``parse_json_body`` once those checks have passed.
"""

import json
from typing import Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

from complaintdesk.core.error_handlers import describe_validation_errors
from complaintdesk.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


async def parse_json_body(request: Request, model: Type[ModelT]) -> ModelT:
    """Decode the request body as JSON and validate it against ``model``"""
    raw = await request.body()
    if not raw.strip():
        raise ValidationError("Request body is required")

    try:
        payload = json.loads(raw)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError both land here
        raise ValidationError("Request body must be valid JSON") from e

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_errors(e.errors())) from e
