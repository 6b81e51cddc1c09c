from importlib.metadata import PackageNotFoundError, version

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health_check():
    try:
        app_version = version("cart-reconciler")
    except PackageNotFoundError:
        app_version = "0.0.0"

    return {
        "status": "ok",
        "service": "cart-reconciler",
        "version": app_version,
    }
