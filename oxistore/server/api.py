"""
REST API endpoints over an OxiStorage.

Paths in URLs use the dotted form ("settings.theme"); the root is
addressed by the bare `/values` endpoint.
"""
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from oxistore.errors import DeserializationError, SerializationError
from oxistore.services import ServiceContainer, get_container, get_storage
from oxistore.store import OxiStorage
from oxistore.tree import ROOT, is_descriptor, resolve_path
from .health import get_health

import logging
router = APIRouter()
logger = logging.getLogger(__name__)


class ValuePayload(BaseModel):
    value: Any = None


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, DeserializationError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


def _read(store: OxiStorage, path: str, shallow: bool) -> dict:
    try:
        resolved = resolve_path(path)
        if shallow:
            record = store.record(resolved)
            return {'path': resolved, 'value': record, 'container': is_descriptor(record)}
        return {'path': resolved, 'value': store.materialize(resolved)}
    except (DeserializationError, SerializationError) as e:
        raise _http_error(e)


@router.get('/health')
async def api_health(store: OxiStorage = Depends(get_storage)):
    return get_health(store)


@router.get('/info')
async def api_info(container: ServiceContainer = Depends(get_container)):
    return container.describe()


@router.get('/values')
async def api_root_get(shallow: bool = False, store: OxiStorage = Depends(get_storage)):
    return _read(store, ROOT, shallow)


@router.get('/values/{path}')
async def api_value_get(path: str, shallow: bool = False, store: OxiStorage = Depends(get_storage)):
    """
    Read the value stored at `path`.

    Query params:
        shallow: return the raw record (a container descriptor for
            objects and arrays) instead of the materialized subtree
    """
    return _read(store, path, shallow)


@router.put('/values/{path}')
async def api_value_put(path: str, payload: ValuePayload, store: OxiStorage = Depends(get_storage)):
    try:
        store.set(path, payload.value)
    except (DeserializationError, SerializationError) as e:
        raise _http_error(e)
    logger.debug("Stored value at %s", path)
    return {'ok': True, 'path': resolve_path(path)}


@router.delete('/values/{path}')
async def api_value_delete(path: str, store: OxiStorage = Depends(get_storage)):
    try:
        store.delete(path)
    except (DeserializationError, SerializationError) as e:
        raise _http_error(e)
    logger.debug("Deleted value at %s", path)
    return {'ok': True, 'path': resolve_path(path)}


@router.get('/records')
async def api_records(store: OxiStorage = Depends(get_storage)):
    """Dump every raw backend record, keyed by record path."""
    try:
        keys = list(store.backend.keys())
    except NotImplementedError as e:
        raise HTTPException(status_code=501, detail=str(e))
    return {key: store.backend.get(key) for key in sorted(keys)}
