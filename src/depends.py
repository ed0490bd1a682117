from decimal import Decimal
from functools import lru_cache
from typing import Optional
from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from libs.result import Error
from src.adapter.services.notification_service import create_notification_service
from src.adapter.services.payment_gateway import create_payment_gateway
from src.adapter.services.use_case_factory import UseCaseFactory
from src.api.error import ClientError
from src.app.services.notification_service import NotificationService
from src.app.services.payment_gateway import PaymentGateway
from src.app.use_cases.monetization.dtos import ActorDTO, ActorRole

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    return create_payment_gateway(
        kind=ApplicationConfig.PAYMENT_GATEWAY,
        url=ApplicationConfig.PAYMENT_GATEWAY_URL,
        success_rate=ApplicationConfig.PAYMENT_SUCCESS_RATE,
        timeout=ApplicationConfig.PAYMENT_TIMEOUT_SECONDS,
    )


@lru_cache
def get_notification_service() -> NotificationService:
    return create_notification_service(ApplicationConfig.REWARD_WEBHOOK_URL)


def get_use_cases(
    session: AsyncSession = Depends(get_session),
    payment_gateway: PaymentGateway = Depends(get_payment_gateway),
    notification_service: NotificationService = Depends(get_notification_service),
) -> UseCaseFactory:
    return UseCaseFactory(
        session,
        payment_gateway=payment_gateway,
        notification_service=notification_service,
        reward_rate=Decimal(ApplicationConfig.REWARD_RATE),
        gateway_timeout=ApplicationConfig.PAYMENT_TIMEOUT_SECONDS,
    )


def get_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> ActorDTO:
    """
    Caller identity set by the identity layer in front of this service

    Headers:
        X-User-Id: Caller's user id
        X-User-Role: USER (default), ARTIST or ADMIN
    """
    if not x_user_id:
        if ApplicationConfig.AUTH_DISABLED:
            return ActorDTO(user_id="local", role=ActorRole.ADMIN)
        raise ClientError(Error(code="UNAUTHORIZED", message="Missing X-User-Id header"))

    try:
        role = ActorRole((x_user_role or ActorRole.USER.value).upper())
    except ValueError:
        raise ClientError(
            Error(code="VALIDATION_ERROR", message=f"Unknown role: {x_user_role}")
        )

    return ActorDTO(user_id=x_user_id, role=role)
