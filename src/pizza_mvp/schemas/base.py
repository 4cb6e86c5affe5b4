from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Базовая схема API: snake_case в Python, camelCase в JSON.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
