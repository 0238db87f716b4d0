from enum import Enum
from pydantic import BaseModel


class ResponseType(str, Enum):
    ERROR = "ERROR"
    INFO = "INFO"


class Info(BaseModel):
    """
    Standard envelope for error and informational replies.
    The HTTP status of the reply always equals `code`.
    """
    code: int
    message: str
    type: ResponseType

    def as_dict(self) -> dict:
        return self.model_dump(mode="json")
