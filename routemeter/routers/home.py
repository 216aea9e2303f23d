"""Fixed demo routes: / and /post."""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
def home():
    return "Hello, World!"


@router.post("/post", response_class=PlainTextResponse)
def post():
    """Only POST is routed here; other methods get 405 from the router."""
    return "POST request received!"
