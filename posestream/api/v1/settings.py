"""Configuration surface for the host UI."""

from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from posestream.models.config import ConfigurationStore

from .deps import get_config_store
from .schemas import ConfigUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/config", tags=["config"])


@router.get("", summary="Current configuration")
def read_config(config_store: ConfigurationStore = Depends(get_config_store)) -> Dict[str, Any]:
    return config_store.current().to_dict()


@router.put("", summary="Update configuration")
def update_config(
    update: ConfigUpdate,
    config_store: ConfigurationStore = Depends(get_config_store),
) -> Dict[str, Any]:
    """
    Partially update the configuration. Changes apply from the next
    capture or frame cycle; running pipelines are not restarted.
    """
    changes = update.model_dump(exclude_none=True)
    if not changes:
        return config_store.current().to_dict()

    try:
        config = config_store.update(**changes)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )
    return config.to_dict()
