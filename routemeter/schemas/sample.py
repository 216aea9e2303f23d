"""Request/response bodies for the JSON sample endpoint."""
from pydantic import BaseModel, ConfigDict


class SampleRequest(BaseModel):
    model_config = ConfigDict(strict=True)

    # Missing fields decode as empty strings
    name: str = ""
    message: str = ""


class SampleResponse(BaseModel):
    id: int
    status: str
    echo: str
