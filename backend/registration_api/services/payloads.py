from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from registration_api.core.errors import ValidationError

M = TypeVar("M", bound=BaseModel)


def parse_payload(model: type[M], data: M | dict) -> M:
    """Accept an already-validated model or validate a raw mapping into one."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        fields = [
            {"field": ".".join(str(p) for p in err["loc"]) or None, "message": err["msg"]}
            for err in e.errors()
        ]
        summary = "; ".join(f"{f['field']}: {f['message']}" if f["field"] else f["message"] for f in fields)
        raise ValidationError(summary, fields=fields) from e
