from .unit_of_work import SqlAlchemyUnitOfWork
from .catalog_service import SqlAlchemyCatalogService
from .payment_gateway import (
    SimulatedPaymentGateway,
    HttpPaymentGateway,
    create_payment_gateway,
)
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .use_case_factory import UseCaseFactory

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyCatalogService",
    "SimulatedPaymentGateway",
    "HttpPaymentGateway",
    "create_payment_gateway",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "UseCaseFactory",
]
