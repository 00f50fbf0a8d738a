import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    Known API exceptions go through DRF's default handling. Anything else is
    logged with its traceback and reported as a generic 500.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    view = context.get('view')
    logger.error(
        "Unhandled exception in %s",
        view.__class__.__name__ if view is not None else 'unknown view',
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return Response(
        {'error': 'Internal server error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
