from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler
import structlog

from ..domain.errors import SchedulingError

logger = structlog.get_logger()

STATUS_BY_KIND = {
    "invalid_rating": status.HTTP_400_BAD_REQUEST,
    "records_not_found": status.HTTP_404_NOT_FOUND,
    "session_not_found": status.HTTP_404_NOT_FOUND,
    "concurrent_update": status.HTTP_409_CONFLICT,
    "corrupt_state": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "store_unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def scheduling_exception_handler(exc, context):
    if isinstance(exc, SchedulingError):
        status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.warning("scheduling_error", kind=exc.kind, status=status_code, message=exc.message)
        return Response(exc.as_dict(), status=status_code)
    return exception_handler(exc, context)
