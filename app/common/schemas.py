"""
Base schemas shared by the API modules.

The public JSON contract is camelCase (``clientId``, ``emailSentCount``...),
while Python code keeps snake_case attributes.
"""
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer, StringConstraints
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Montos fijos (Decimal) que se serializan como número en JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Quantity = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
