from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .catalog_service import CatalogService, ArtistInfo, EventInfo
from .payment_gateway import (
    PaymentGateway,
    PaymentRequest,
    PaymentAuthorization,
    PaymentGatewayError,
)

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "CatalogService",
    "ArtistInfo",
    "EventInfo",
    "PaymentGateway",
    "PaymentRequest",
    "PaymentAuthorization",
    "PaymentGatewayError",
]
