from django.urls import path
from .views import (
    audit_list_create, audit_detail, audit_next, audit_previous, audit_step,
    audit_items, audit_find, audit_scan, audit_count,
    audit_discrepancies, audit_resolve, audit_review_summary,
    audit_save_draft, audit_complete, audit_summary, audit_export
)

urlpatterns = [
    path('audits/', audit_list_create, name='audit-list-create'),
    path('audits/<str:session_id>/', audit_detail, name='audit-detail'),

    # Step navigation
    path('audits/<str:session_id>/next/', audit_next, name='audit-next'),
    path('audits/<str:session_id>/previous/', audit_previous, name='audit-previous'),
    path('audits/<str:session_id>/step/', audit_step, name='audit-step'),

    # Scanning
    path('audits/<str:session_id>/items/', audit_items, name='audit-items'),
    path('audits/<str:session_id>/find/', audit_find, name='audit-find'),
    path('audits/<str:session_id>/scan/', audit_scan, name='audit-scan'),
    path('audits/<str:session_id>/count/', audit_count, name='audit-count'),

    # Discrepancy review
    path('audits/<str:session_id>/discrepancies/', audit_discrepancies, name='audit-discrepancies'),
    path('audits/<str:session_id>/discrepancies/<str:item_id>/resolve/', audit_resolve, name='audit-resolve'),
    path('audits/<str:session_id>/review-summary/', audit_review_summary, name='audit-review-summary'),

    # Completion
    path('audits/<str:session_id>/save-draft/', audit_save_draft, name='audit-save-draft'),
    path('audits/<str:session_id>/complete/', audit_complete, name='audit-complete'),
    path('audits/<str:session_id>/summary/', audit_summary, name='audit-summary'),
    path('audits/<str:session_id>/export/', audit_export, name='audit-export'),
]
