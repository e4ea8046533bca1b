"""
Acciones masivas sobre posts y páginas
Cada ID se procesa por separado; no hay rollback si algo falla a mitad
"""

import logging
from typing import Iterable

from .models import BulkResult, RequestResult
from .services import PostService

logger = logging.getLogger(__name__)

BULK_ACTIONS = ('trash', 'delete', 'publish', 'draft')


def _apply(service: PostService, action: str, item_id: int) -> RequestResult:
    if action == 'trash':
        return service.delete(item_id, False)
    if action == 'delete':
        return service.delete(item_id, True)
    return service.update(item_id, {'status': action})


def run_bulk_action(service: PostService, action: str, item_ids: Iterable[int]) -> BulkResult:
    """
    Aplica una acción a varios elementos y acumula el recuento

    Un fallo en un elemento no detiene el resto; los IDs no positivos se ignoran.
    """
    if action not in BULK_ACTIONS:
        raise ValueError(f"Acción masiva desconocida: {action}")

    result = BulkResult(action=action)
    for raw_id in item_ids:
        item_id = int(raw_id)
        if item_id <= 0:
            continue

        outcome = _apply(service, action, item_id)
        if outcome.ok:
            result.success_count += 1
        else:
            result.fail_count += 1
            result.failed_ids.append(item_id)

    logger.info(f"Acción masiva '{action}': {result.success_count} correctas, {result.fail_count} fallidas")
    return result
