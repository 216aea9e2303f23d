"""JSON sample endpoint: POST /api/sample2 echoes a greeting built from the request body."""
from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from routemeter.schemas import SampleRequest, SampleResponse

router = APIRouter(prefix="/api", tags=["sample"])

SAMPLE_ID = 123


@router.post("/sample2", response_model=SampleResponse)
async def sample_post(request: Request):
    """
    Body: {"name": ..., "message": ...}. Anything that is not a JSON object with
    string fields gets 400 "Invalid JSON"; other methods get 405 from the router.
    """
    try:
        body = SampleRequest.model_validate(await request.json())
    except ValueError:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        return PlainTextResponse("Invalid JSON", status_code=400)
    return SampleResponse(
        id=SAMPLE_ID,
        status="success",
        echo=f"Hello {body.name}: {body.message}",
    )
