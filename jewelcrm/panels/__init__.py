from .client import CrmApiClient, ApiError
from .base import CrudPanel, PanelError, Notification
from .inventory import InventoryPanel
from .suppliers import SupplierPanel
from .production import WorkOrderPanel
from .marketplace import MarketplacePanel

__all__ = [
    'CrmApiClient', 'ApiError', 'CrudPanel', 'PanelError', 'Notification',
    'InventoryPanel', 'SupplierPanel', 'WorkOrderPanel', 'MarketplacePanel',
]
