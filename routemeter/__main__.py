"""Entrypoint for running the server via `python -m routemeter`."""
import uvicorn

from .settings import settings


def main() -> None:
    uvicorn.run(
        "routemeter.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":  # pragma: no cover
    main()
