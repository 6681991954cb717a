"""
Alert headers attached to entity responses.

Clients read ``X-<app>-alert`` / ``X-<app>-error`` together with
``X-<app>-params`` to show a translated notification after a call.
"""

import logging
from typing import Dict

from .config import settings

logger = logging.getLogger(__name__)


def _prefix() -> str:
    return f"X-{settings.application_name}"


def create_alert(message: str, param: str) -> Dict[str, str]:
    return {f"{_prefix()}-alert": message, f"{_prefix()}-params": param}


def create_entity_creation_alert(entity_name: str, param: str) -> Dict[str, str]:
    return create_alert(f"{settings.application_name}.{entity_name}.created", param)


def create_entity_update_alert(entity_name: str, param: str) -> Dict[str, str]:
    return create_alert(f"{settings.application_name}.{entity_name}.updated", param)


def create_entity_deletion_alert(entity_name: str, param: str) -> Dict[str, str]:
    return create_alert(f"{settings.application_name}.{entity_name}.deleted", param)


def create_failure_alert(entity_name: str, error_key: str, default_message: str) -> Dict[str, str]:
    logger.error("Entity processing failed, %s", default_message)
    return {f"{_prefix()}-error": f"error.{error_key}", f"{_prefix()}-params": entity_name}
