import logging
import random
from functools import wraps

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from jewelcrm.core.exports import select_columns, csv_response, UnknownColumnError
from jewelcrm.core.responses import success, failure, validation_failure
from jewelcrm.core.utils import create_audit_log
from . import reports
from .exceptions import AuditError, AuditPermissionDenied
from .serializers import (
    AuditDataPatchSerializer, CountSerializer, ResolveSerializer, StepSerializer,
    DiscrepancyQuerySerializer, ItemsQuerySerializer
)
from .services import candidate_items
from .store import session_store
from .wizard import AuditWizard

logger = logging.getLogger('jewelcrm.audits')

AUDIT_MODEL_NAME = 'InventoryAudit'


def audit_errors(view):
    """Render wizard/store errors in the error envelope"""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except AuditError as e:
            logger.info(f"Audit request rejected ({e.__class__.__name__}): {e}")
            return failure(str(e), e.status_code)
    return wrapper


def display_name(user):
    return user.get_full_name() or user.username


def can_access(user, wizard):
    """Creator, staff, or a user named in ``assignedUsers`` (by username or display name)"""
    if wizard.created_by == user.id or user.is_staff:
        return True
    assigned = wizard.audit_data.get('assignedUsers') or []
    return user.username in assigned or display_name(user) in assigned


def load_wizard(request, session_id):
    wizard = session_store.load(session_id)
    if not can_access(request.user, wizard):
        raise AuditPermissionDenied('Permission denied')
    return wizard


def log_audit_action(request, wizard, action, changes=None):
    create_audit_log(
        request, action, AUDIT_MODEL_NAME, wizard.session_id,
        changes=changes, object_name=wizard.audit_data.get('name') or None,
    )


def apply_patch(wizard, data):
    """Validate and merge an auditData patch; reselecting locations refreshes the expected items"""
    if not isinstance(data, dict):
        return {'auditData': ['Expected an object of auditData fields.']}
    serializer = AuditDataPatchSerializer(data=data)
    if not serializer.is_valid():
        return serializer.errors
    unknown = set(data.keys()) - set(serializer.fields.keys())
    wizard.update({**serializer.validated_data, **{key: data[key] for key in unknown}})
    if 'locations' in serializer.validated_data:
        wizard.set_candidates(candidate_items(wizard.audit_data['locations']))
    return None


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_list_create(request):
    """List the caller's open audit sessions or start a new one"""
    if request.method == 'GET':
        sessions = session_store.list_for_user(request.user.id)
        return success([wizard.snapshot() for wizard in sessions])

    wizard = AuditWizard(created_by=request.user.id)
    patch = request.data.get('auditData') if isinstance(request.data, dict) else None
    if patch:
        errors = apply_patch(wizard, patch)
        if errors:
            return validation_failure(errors)
    session_store.save(wizard)

    log_audit_action(request, wizard, 'audit_start')
    logger.info(f"Audit session {wizard.session_id} started by {request.user.username}")
    return success(wizard.snapshot(), status.HTTP_201_CREATED)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_detail(request, session_id):
    """Get the session, shallow-merge auditData fields, or discard the session"""
    wizard = load_wizard(request, session_id)

    if request.method == 'GET':
        return success(wizard.snapshot())

    if request.method == 'DELETE':
        session_store.delete(session_id)
        log_audit_action(request, wizard, 'audit_discard')
        logger.info(f"Audit session {session_id} discarded by {request.user.username}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    errors = apply_patch(wizard, request.data)
    if errors:
        return validation_failure(errors)
    session_store.save(wizard)
    return success(wizard.snapshot())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_next(request, session_id):
    wizard = load_wizard(request, session_id)
    wizard.next_step()
    session_store.save(wizard)
    return success(wizard.snapshot())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_previous(request, session_id):
    wizard = load_wizard(request, session_id)
    wizard.previous_step()
    session_store.save(wizard)
    return success(wizard.snapshot())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_step(request, session_id):
    """Jump straight to a step (1-5)"""
    wizard = load_wizard(request, session_id)
    serializer = StepSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failure(serializer.errors)
    wizard.go_to(serializer.validated_data['step'])
    session_store.save(wizard)
    return success(wizard.snapshot())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_items(request, session_id):
    """Items to count, filtered by all/pending/scanned/discrepancy"""
    wizard = load_wizard(request, session_id)
    query = ItemsQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return validation_failure(query.errors)
    items = wizard.counting_items(query.validated_data['filter'])
    return success(items, progress=wizard.progress())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_find(request, session_id):
    """Look an item up by SKU or id"""
    wizard = load_wizard(request, session_id)
    return success(wizard.find_item(request.query_params.get('q', '')))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_scan(request, session_id):
    """Simulated barcode scan: returns a random item from the selected locations"""
    wizard = load_wizard(request, session_id)
    return success(wizard.simulate_scan(random))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_count(request, session_id):
    """Record the physical count for an item"""
    wizard = load_wizard(request, session_id)
    serializer = CountSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failure(serializer.errors)

    data = serializer.validated_data
    record = wizard.record_count(
        data['itemId'], data['actualQuantity'],
        scanned_by=display_name(request.user),
        found_location=data.get('foundLocation') or None,
    )
    session_store.save(wizard)

    log_audit_action(request, wizard, 'audit_count', changes={
        'sku': record['sku'], 'actualQuantity': record['actualQuantity'], 'status': record['status'],
    })
    return success(wizard.counting_view(record), progress=wizard.progress())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_discrepancies(request, session_id):
    """Discrepancy list with search, type/location/status filters and sorting"""
    wizard = load_wizard(request, session_id)
    wizard.ensure_review_allowed()
    query = DiscrepancyQuerySerializer(data=request.query_params)
    if not query.is_valid():
        return validation_failure(query.errors)

    params = query.validated_data
    results = wizard.filter_discrepancies(
        search=params['search'],
        discrepancy_type=params['type'],
        location=params['location'] or None,
        status=params['status'],
        sort_field=params['sort'],
        sort_order=params['order'],
    )
    return success(results, summary=wizard.review_summary())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_resolve(request, session_id, item_id):
    """Mark a discrepancy resolved (defaults to adjusting inventory to the count)"""
    wizard = load_wizard(request, session_id)
    wizard.ensure_review_allowed()
    serializer = ResolveSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_failure(serializer.errors)

    entry = wizard.resolve(
        item_id,
        resolution=serializer.validated_data.get('resolution'),
        notes=serializer.validated_data.get('notes'),
        resolved_by=display_name(request.user),
    )
    session_store.save(wizard)

    log_audit_action(request, wizard, 'audit_resolve', changes={
        'sku': entry['sku'], 'resolution': entry['resolution'], 'notes': entry['notes'],
    })
    return success(entry, summary=wizard.review_summary())


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_review_summary(request, session_id):
    wizard = load_wizard(request, session_id)
    wizard.ensure_review_allowed()
    return success(wizard.review_summary())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_save_draft(request, session_id):
    """Log the current state; nothing is persisted beyond the session"""
    wizard = load_wizard(request, session_id)
    logger.info(f"Audit draft {session_id} (step {wizard.current_step}): {wizard.audit_data}")
    log_audit_action(request, wizard, 'audit_draft', changes={
        'step': wizard.current_step, 'progress': wizard.progress(),
    })
    return success(wizard.snapshot())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_complete(request, session_id):
    """Finish the audit on the last step: returns the summary and reports"""
    wizard = load_wizard(request, session_id)
    wizard.ensure_final_step()

    summary = reports.completion_summary(wizard)
    log_audit_action(request, wizard, 'audit_complete', changes=summary)
    logger.info(f"Audit session {session_id} completed by {request.user.username}: "
                f"{summary['scannedItems']}/{summary['totalItems']} counted, "
                f"{summary['totalDiscrepancies']} discrepancies")
    return success({'summary': summary, 'reports': reports.completion_reports(wizard)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_summary(request, session_id):
    """Completion summary and variance reports for the current state"""
    wizard = load_wizard(request, session_id)
    wizard.ensure_review_allowed()
    return success({
        'summary': reports.completion_summary(wizard),
        'reports': reports.completion_reports(wizard),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@audit_errors
def audit_export(request, session_id):
    """Discrepancies as CSV; ``columns`` picks and orders the columns"""
    wizard = load_wizard(request, session_id)
    wizard.ensure_review_allowed()
    requested = [c.strip() for c in request.query_params.get('columns', '').split(',') if c.strip()]
    try:
        columns = select_columns(reports.DISCREPANCY_COLUMNS, requested)
    except UnknownColumnError as e:
        return failure(str(e), details={'available': [key for key, _ in reports.DISCREPANCY_COLUMNS]})

    log_audit_action(request, wizard, 'export', changes={'columns': [key for key, _ in columns]})
    return csv_response(f"audit-{wizard.session_id}-discrepancies.csv", columns, wizard.audit_data['discrepancies'])
