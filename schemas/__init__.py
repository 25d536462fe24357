"""
Request payload schemas

Every write endpoint validates its JSON body through one of these models.
Keys may be sent in camelCase (as the web client does) or snake_case.
"""
from flask import request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
        str_strip_whitespace=True,
    )


def parse_body(schema):
    """Validate the current request's JSON body; pydantic errors become 400s"""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    return schema.model_validate(data)
