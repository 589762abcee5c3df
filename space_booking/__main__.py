import uvicorn

from space_booking.core.config import settings


def main() -> None:
    uvicorn.run(
        "space_booking.main:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.debug,
        log_config=None,
    )


if __name__ == "__main__":
    main()
