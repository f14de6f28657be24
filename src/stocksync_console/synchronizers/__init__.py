from .alerts import AlertsSynchronizer, filter_alerts
from .analytics import AnalyticsSynchronizer
from .base import CrudSynchronizer, EditableSynchronizer, ListSynchronizer
from .items import ItemsSynchronizer
from .stock import StockSynchronizer
from .suppliers import SuppliersSynchronizer

__all__ = [
    "AlertsSynchronizer",
    "AnalyticsSynchronizer",
    "CrudSynchronizer",
    "EditableSynchronizer",
    "ItemsSynchronizer",
    "ListSynchronizer",
    "StockSynchronizer",
    "SuppliersSynchronizer",
    "filter_alerts",
]
