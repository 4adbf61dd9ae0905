from __future__ import annotations

import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler
from rest_framework.views import set_rollback

from fiscalflow.core.exceptions import FiscalFlowError

logger = logging.getLogger(__name__)


def fiscalflow_exception_handler(exc, context):
    """Render domain errors as ``{"kind", "message", "details"}`` payloads.

    Anything that is not a :class:`FiscalFlowError` falls through to DRF's
    default handler.
    """
    if isinstance(exc, FiscalFlowError):
        view = context.get("view")
        logger.info(
            "%s rejected by %s: %s",
            exc.kind,
            type(view).__name__ if view is not None else "-",
            exc.message,
        )
        set_rollback()
        return Response(exc.to_dict(), status=exc.status_code)
    return exception_handler(exc, context)
