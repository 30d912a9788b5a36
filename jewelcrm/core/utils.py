"""Utility functions for activity logging"""
import logging

from .models import AuditLog

logger = logging.getLogger('jewelcrm.core')


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, object_reference=None):
    """
    Create an activity log entry

    Args:
        request: Django/DRF request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, audit_complete, etc.)
        model_name: Name of the model or resource being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object
        object_reference: Reference identifier such as a SKU

    Returns the created AuditLog, or None when logging was skipped or failed.
    """
    audit_user = user
    if audit_user is None and request is not None:
        audit_user = getattr(request, 'user', None)

    if not action or not model_name or object_id in (None, ''):
        logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
        return None

    try:
        return AuditLog.objects.create(
            user=audit_user if audit_user is not None and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            object_reference=object_reference,
            changes=changes or {},
            ip_address=get_client_ip(request) if request else None,
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}", exc_info=True)
        return None
