import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.shortcuts import get_object_or_404
from django.db import IntegrityError
from django.db.models import ProtectedError
from django.core.cache import cache

from jewelcrm.core.cache_utils import make_versioned_key
from jewelcrm.core.responses import success, failure, validation_failure
from jewelcrm.core.utils import create_audit_log
from .hierarchy import build_tree
from .models import Location
from .serializers import LocationSerializer

logger = logging.getLogger('jewelcrm.locations')

LOCATION_TREE_CACHE_TTL = 600


def is_admin(user):
    return user.is_superuser or user.is_staff or user.groups.filter(name='Admin').exists()


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def location_list_create(request):
    """List locations (optionally by type/parent) or create a location (admin only)"""
    if request.method == 'GET':
        locations = Location.objects.select_related('parent')

        location_type = request.query_params.get('type')
        if location_type:
            locations = locations.filter(location_type=location_type)

        parent = request.query_params.get('parent')
        if parent == 'root':
            locations = locations.filter(parent__isnull=True)
        elif parent:
            locations = locations.filter(parent__code=parent)

        if request.query_params.get('include_inactive', 'false').lower() != 'true':
            locations = locations.filter(is_active=True)

        return success(LocationSerializer(locations, many=True).data)

    if not is_admin(request.user):
        logger.warning(f"User {request.user.username} attempted to create location without admin privileges")
        return failure('Only administrators can create locations', status.HTTP_403_FORBIDDEN)

    logger.info(f"User {request.user.username} creating location with data: {request.data}")
    serializer = LocationSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Location creation validation failed: {serializer.errors}")
        return validation_failure(serializer.errors)

    try:
        location = serializer.save()
    except IntegrityError as e:
        logger.error(f"IntegrityError creating location: {str(e)}", exc_info=True)
        return failure('A location with this code already exists')

    create_audit_log(request, 'create', 'Location', location.id, object_name=location.name, object_reference=location.code)
    logger.info(f"Location '{location.code}' created successfully by {request.user.username}")
    return success(LocationSerializer(location).data, status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def location_detail(request, pk):
    """Retrieve, update or delete a location (update/delete requires admin)"""
    location = get_object_or_404(Location.objects.select_related('parent'), pk=pk)

    if request.method == 'GET':
        return success(LocationSerializer(location).data)

    if not is_admin(request.user):
        logger.warning(f"User {request.user.username} attempted to modify location {pk} without admin privileges")
        return failure('Only administrators can modify locations', status.HTTP_403_FORBIDDEN)

    if request.method == 'DELETE':
        logger.info(f"User {request.user.username} deleting location {pk} ({location.code})")
        try:
            location.delete()
        except ProtectedError:
            return failure('Location has child locations; move or delete them first', status.HTTP_409_CONFLICT)
        create_audit_log(request, 'delete', 'Location', pk, object_name=location.name, object_reference=location.code)
        return Response(status=status.HTTP_204_NO_CONTENT)

    partial = request.method == 'PATCH'
    serializer = LocationSerializer(location, data=request.data, partial=partial)
    if not serializer.is_valid():
        logger.warning(f"Location update validation failed: {serializer.errors}")
        return validation_failure(serializer.errors)
    serializer.save()
    create_audit_log(request, 'update', 'Location', pk, changes=dict(request.data), object_name=location.name, object_reference=location.code)
    logger.info(f"Location {pk} updated successfully")
    return success(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def location_tree(request):
    """Nested hierarchy used for audit location selection"""
    cache_key = make_versioned_key('locations_tree')
    tree = cache.get(cache_key)
    if tree is not None:
        logger.debug("Cache hit for location tree")
        return success(tree)

    tree = build_tree()
    cache.set(cache_key, tree, LOCATION_TREE_CACHE_TTL)
    return success(tree)
