"""Run the API with `python -m kgms`."""
import uvicorn

from kgms.core.config import settings


def main() -> None:
    uvicorn.run(
        "kgms.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
