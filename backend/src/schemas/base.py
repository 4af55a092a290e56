"""Base model for request and response bodies."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    JSON bodies use camelCase keys (`authorId`, `readTime`, `firstName`).

    Python code keeps snake_case attribute names. Incoming bodies may use either
    spelling; responses are serialized with the camelCase aliases.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
