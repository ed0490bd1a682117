"""Payment Repository Interface"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.payment import Payment


class PaymentRepository(ABC):

    @abstractmethod
    async def create(self, payment: Payment) -> Payment:
        """
        Create a payment record

        Raises:
            IntegrityError: If the transaction already has a payment
        """
        pass

    @abstractmethod
    async def get_by_transaction_id(self, transaction_id: int) -> Optional[Payment]:
        pass
