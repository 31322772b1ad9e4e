"""Entry point: python -m lending_admin"""

import uvicorn
from .config import settings


def main():
    uvicorn.run(
        "lending_admin.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
