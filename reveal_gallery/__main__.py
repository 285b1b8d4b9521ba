"""
Run the gallery server: `python -m reveal_gallery`.
"""
import uvicorn

from reveal_gallery.config import get_settings
from reveal_gallery.main import configure_logging, create_app


def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        proxy_headers=settings.TRUST_PROXY,
        log_config=None,  # keep the root logging configuration
    )


if __name__ == "__main__":
    main()
