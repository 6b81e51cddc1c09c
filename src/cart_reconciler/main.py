import uvicorn

from cart_reconciler.infrastructure.configuration import AppSettings
from cart_reconciler.infrastructure.entrypoints.api.app_factory import create_app


def dev():
    """Run the development server."""
    settings = AppSettings()
    uvicorn.run(
        "cart_reconciler.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )


# Instantiate global app for ASGI
settings = AppSettings()
app = create_app(settings)
