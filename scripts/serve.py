import uvicorn

from app.core.app_factory import create_application
from app.core.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        create_application(settings),
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
