from .sample import SampleRequest, SampleResponse

__all__ = [
    "SampleRequest",
    "SampleResponse",
]
