"""Field types shared by the tool input models."""

import math
from typing import Annotated, Any, List

from pydantic import BeforeValidator


def _id_to_text(value: Any) -> Any:
    # automation clients send ids as numbers as often as strings
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValueError("identifier must be a whole number")
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _csv_to_list(value: Any) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


VKId = Annotated[str, BeforeValidator(_id_to_text)]
StringList = Annotated[List[str], BeforeValidator(_csv_to_list)]
IntList = Annotated[List[int], BeforeValidator(_csv_to_list)]

OWNER_ID_DESCRIPTION = "Owner ID (negative for a community, positive for a user)."
COUNT_DESCRIPTION = "Number of items to return."
OFFSET_DESCRIPTION = "Offset from the beginning of the list."
