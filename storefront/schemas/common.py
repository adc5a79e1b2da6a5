# storefront/schemas/common.py
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


# Base configuration for ORM compatibility and camelCase JSON keys
class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


# Fixed-point amount, rendered as a plain JSON number
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class SuccessResponse(BaseModel):
    success: bool = True
