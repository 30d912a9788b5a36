"""DRF exception handler that renders every error in the ``{"error": ...}`` envelope"""
import logging

from rest_framework.views import exception_handler

from .responses import first_error_message

logger = logging.getLogger('jewelcrm.core')


def envelope_exception_handler(exc, context):
    response = exception_handler(exc, context)
    if response is None:
        # Unhandled exceptions propagate and become Django 500s
        return None

    errors = response.data
    body = {'error': first_error_message(errors)}
    if isinstance(errors, dict) and set(errors.keys()) - {'detail'}:
        body['details'] = errors
    elif isinstance(errors, list):
        body['details'] = errors

    view = context.get('view')
    logger.info(f"{response.status_code} from {view.__class__.__name__ if view else 'unknown view'}: {body['error']}")

    response.data = body
    return response
