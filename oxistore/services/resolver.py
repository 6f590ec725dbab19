from fastapi import HTTPException
from starlette.requests import Request

from oxistore.store import OxiStorage
from .container import ServiceContainer


def get_container(request: Request) -> ServiceContainer:
    """FastAPI dependency returning the app's service container.

    Raises HTTP 500 when the app was built without one.
    """
    container = getattr(request.app.state, 'container', None)
    if container is None:
        raise HTTPException(status_code=500, detail="Service container not configured")
    return container


def get_storage(request: Request) -> OxiStorage:
    return get_container(request).storage
