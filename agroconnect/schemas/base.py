from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from datetime import datetime


class BaseSchema(BaseModel):
    # camelCase on the wire, snake_case accepted on input
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class TimestampSchema(BaseSchema):
    created_at: datetime
    updated_at: datetime
