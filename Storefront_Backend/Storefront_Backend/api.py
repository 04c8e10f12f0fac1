import logging
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull a single human readable message out of a DRF error detail"""
    if isinstance(detail, dict):
        if "detail" in detail:
            return _first_message(detail["detail"])
        for value in detail.values():
            return _first_message(value)
    if isinstance(detail, (list, tuple)):
        if detail:
            return _first_message(detail[0])
        return "Invalid request"
    return str(detail)


def custom_exception_handler(exc, context):
    """
    Render DRF errors in the same envelope as successful responses:
    {"status": "error", "status_code": ..., "message": ..., "errors": ...}
    """
    response = exception_handler(exc, context)

    if response is None:
        return response

    detail = response.data
    data = {
        "status": "error",
        "status_code": response.status_code,
        "message": _first_message(detail),
    }
    if isinstance(detail, dict) and set(detail.keys()) != {"detail"}:
        data["errors"] = detail
    elif isinstance(detail, list):
        data["errors"] = detail

    view = context.get("view")
    logger.info(
        f"{view.__class__.__name__ if view else 'request'} failed "
        f"with {response.status_code}: {data['message']}"
    )
    response.data = data
    return response
