from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from django.db.models import Q

from .models import AuditLog
from .responses import success, failure, validation_failure, paginate
from .serializers import UserSerializer, AuditLogSerializer, DateRangeSerializer

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['groups'] = list(user.groups.values_list('name', flat=True))
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh that reports deleted users as an invalid token"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with groups"""
    user_data = UserSerializer(request.user).data
    user_data['groups'] = list(request.user.groups.values_list('name', flat=True))
    return success(user_data)


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List activity logs with filtering"""
    queryset = AuditLog.objects.select_related('user')

    # Non-staff users only see their own activity
    if not request.user.is_staff:
        queryset = queryset.filter(user=request.user)

    action_filter = request.query_params.get('action', None)
    if action_filter:
        queryset = queryset.filter(action=action_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    reference = request.query_params.get('reference', None)
    if reference:
        queryset = queryset.filter(object_reference=reference)

    dates = DateRangeSerializer(data=request.query_params)
    if not dates.is_valid():
        return validation_failure(dates.errors)
    if dates.validated_data['date_from']:
        queryset = queryset.filter(created_at__date__gte=dates.validated_data['date_from'])
    if dates.validated_data['date_to']:
        queryset = queryset.filter(created_at__date__lte=dates.validated_data['date_to'])

    return paginate(request, queryset.order_by('-created_at', '-id'), AuditLogSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an activity log entry"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not request.user.is_staff and audit_log.user != request.user:
        return failure('Permission denied', status.HTTP_403_FORBIDDEN)

    return success(AuditLogSerializer(audit_log).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def global_search(request):
    """Search inventory, suppliers, work orders and locations at once"""
    from jewelcrm.inventory.models import InventoryItem
    from jewelcrm.inventory.serializers import InventoryItemSerializer
    from jewelcrm.suppliers.models import Supplier
    from jewelcrm.suppliers.serializers import SupplierSerializer
    from jewelcrm.production.models import WorkOrder
    from jewelcrm.production.serializers import WorkOrderListSerializer
    from jewelcrm.locations.models import Location
    from jewelcrm.locations.serializers import LocationSerializer

    query = request.query_params.get('q', '').strip()
    if not query:
        return success({'inventory': [], 'suppliers': [], 'work_orders': [], 'locations': []})

    inventory = InventoryItem.objects.select_related('vendor', 'location').filter(
        Q(sku__icontains=query) | Q(name__icontains=query) | Q(category__icontains=query)
    )[:20]
    suppliers = Supplier.objects.filter(
        Q(name__icontains=query) | Q(code__icontains=query) | Q(email__icontains=query)
    )[:20]
    work_orders = WorkOrder.objects.filter(
        Q(number__icontains=query) | Q(customer_name__icontains=query) | Q(item_name__icontains=query)
    )[:20]
    locations = Location.objects.filter(Q(name__icontains=query) | Q(code__icontains=query))[:20]

    return success({
        'inventory': InventoryItemSerializer(inventory, many=True).data,
        'suppliers': SupplierSerializer(suppliers, many=True).data,
        'work_orders': WorkOrderListSerializer(work_orders, many=True).data,
        'locations': LocationSerializer(locations, many=True).data,
    })
