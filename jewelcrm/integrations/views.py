import logging
import re

from django.db.models import Q
from django.urls import get_resolver, URLPattern, URLResolver
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from jewelcrm.core.responses import success, validation_failure, paginate
from jewelcrm.core.utils import create_audit_log
from .codegen import generate_code
from .models import MarketplaceIntegration, CustomIntegration, default_configuration
from .serializers import MarketplaceIntegrationSerializer, CustomIntegrationSerializer

logger = logging.getLogger('jewelcrm.integrations')

MARKETPLACE_SORT_FIELDS = {
    'rating': 'rating',
    'downloadCount': 'download_count',
    'download_count': 'download_count',
    'reviewCount': 'review_count',
    'review_count': 'review_count',
    'name': 'name',
    'createdAt': 'created_at',
    'created_at': 'created_at',
}


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def marketplace_list_create(request):
    """
    GET: published marketplace integrations, filtered by search (name,
    description, tags), category and pricing, sorted by ``sort``/``order``.
    POST: submit a listing; it stays unpublished until staff publish it.
    """
    if request.method == 'GET':
        params = request.query_params
        queryset = MarketplaceIntegration.objects.all()
        if not (request.user.is_staff and params.get('include_unpublished', '').lower() == 'true'):
            queryset = queryset.filter(is_published=True)

        category = params.get('category')
        if category and category != 'all':
            queryset = queryset.filter(category=category)

        pricing = params.get('pricing')
        if pricing and pricing != 'all':
            queryset = queryset.filter(pricing_model=pricing)

        sort_field = MARKETPLACE_SORT_FIELDS.get(params.get('sort'), 'rating')
        order = params.get('order', 'desc')
        prefix = '' if order == 'asc' else '-'
        queryset = queryset.order_by(f"{prefix}{sort_field}", 'id')

        integrations = list(queryset)
        search = (params.get('search') or '').strip().lower()
        if search:
            # Tags live in a JSON list, so the search runs in Python
            integrations = [
                integration for integration in integrations
                if search in integration.name.lower()
                or search in integration.description.lower()
                or any(search in tag.lower() for tag in integration.tags)
            ]

        serializer = MarketplaceIntegrationSerializer(integrations, many=True)
        return success(serializer.data, count=len(integrations))

    serializer = MarketplaceIntegrationSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Marketplace submission validation failed: {serializer.errors}")
        return validation_failure(serializer.errors)

    publish = request.user.is_staff and serializer.validated_data.get('is_published', False)
    integration = serializer.save(is_published=publish)
    create_audit_log(request, 'create', 'MarketplaceIntegration', integration.id, object_name=integration.name)
    logger.info(f"Marketplace integration '{integration.name}' submitted by {request.user.username}")
    return success(MarketplaceIntegrationSerializer(integration).data, status.HTTP_201_CREATED)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def integration_builder(request):
    """
    POST: validate a builder payload, generate its handler source and save it.
    GET: the current user's saved builder integrations.
    """
    if request.method == 'GET':
        queryset = CustomIntegration.objects.filter(created_by=request.user)
        search = request.query_params.get('search')
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(description__icontains=search))
        template = request.query_params.get('template')
        if template:
            queryset = queryset.filter(template=template)
        return paginate(request, queryset, CustomIntegrationSerializer)

    serializer = CustomIntegrationSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Integration builder validation failed: {serializer.errors}")
        return validation_failure(serializer.errors)

    data = serializer.validated_data
    code = generate_code({
        'name': data['name'],
        'description': data.get('description', ''),
        'template': data['template'],
        'configuration': data.get('configuration') or default_configuration(),
        'schedule': data.get('schedule'),
        'permissions': data.get('permissions', []),
        'metadata': data.get('metadata'),
    })
    integration = serializer.save(generated_code=code, created_by=request.user)

    create_audit_log(request, 'create', 'CustomIntegration', integration.id, object_name=integration.name,
                     changes={'template': integration.template})
    logger.info(f"Custom integration '{integration.name}' ({integration.template}) saved by {request.user.username}")
    return success(CustomIntegrationSerializer(integration).data, status.HTTP_201_CREATED)


def _route_text(pattern):
    """Readable route for path() and re_path() patterns"""
    text = str(pattern.pattern)
    text = re.sub(r'\(\?P<(\w+)>[^)]*\)', r'<\1>', text)
    text = text.lstrip('^').rstrip('$')
    return text.replace('/?', '/')


def _walk(patterns, prefix=''):
    for entry in patterns:
        if isinstance(entry, URLResolver):
            yield from _walk(entry.url_patterns, prefix + _route_text(entry))
        elif isinstance(entry, URLPattern):
            yield prefix + _route_text(entry), entry


def _describe(url, entry):
    view_class = getattr(entry.callback, 'cls', None)
    methods = []
    description = ''
    if view_class is not None:
        methods = sorted(m.upper() for m in view_class.http_method_names if m != 'options')
        description = (view_class.__doc__ or '').strip().split('\n')[0].strip()
    return {
        'path': '/' + url,
        'name': entry.name,
        'methods': methods,
        'description': description,
    }


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def endpoint_list(request):
    """API endpoints exposed by this service (developer portal browser)"""
    endpoints = [
        _describe(url, entry)
        for url, entry in _walk(get_resolver().url_patterns)
        if url.startswith('api/')
    ]
    endpoints.sort(key=lambda endpoint: endpoint['path'])
    search = request.query_params.get('search')
    if search:
        search = search.lower()
        endpoints = [e for e in endpoints if search in e['path'].lower() or search in (e['name'] or '').lower()]
    return success(endpoints, count=len(endpoints))
