"""Wallet repository - balance checks and the debit/credit ledger"""

import logging
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy.orm import Session

from laundry_backend.core import config
from laundry_backend.core.errors import InsufficientFundsError, NotFoundError
from laundry_backend.models.enums import PaymentStatus
from laundry_backend.models.payment import Payment
from laundry_backend.models.user import User

logger = logging.getLogger(__name__)


class AffordabilityCheck(NamedTuple):
    can_book: bool
    current_balance: Decimal
    shortfall: Decimal


class WalletRepository:
    """Reads and moves a user's wallet balance, recording every movement as a Payment row."""

    def __init__(self, db: Session):
        self.db = db

    def _get_user(self, user_id: int, for_update: bool = False) -> User:
        query = self.db.query(User).filter(User.id == user_id)
        if for_update:
            query = query.with_for_update()
        user = query.first()
        if user is None:
            raise NotFoundError(f'User with ID {user_id} not found')
        return user

    def get_balance(self, user_id: int) -> Decimal:
        user = self._get_user(user_id)
        return Decimal(user.wallet_balance or 0)

    def validate_affordability(self, user_id: int, amount: Decimal) -> AffordabilityCheck:
        balance = self.get_balance(user_id)
        can_book = balance >= amount
        shortfall = Decimal('0') if can_book else amount - balance
        return AffordabilityCheck(can_book=can_book, current_balance=balance, shortfall=shortfall)

    def debit(self, user_id: int, amount: Decimal, reference: str) -> Decimal:
        user = self._get_user(user_id, for_update=True)
        balance = Decimal(user.wallet_balance or 0)
        if balance < amount:
            self.db.rollback()
            raise InsufficientFundsError(current_balance=balance, required=amount)

        new_balance = balance - amount
        user.wallet_balance = new_balance
        self.db.add(
            Payment(
                user_id=user_id,
                amount=-amount,
                currency=config.CURRENCY,
                status=PaymentStatus.SUCCEEDED,
                reference=reference,
            )
        )
        self.db.commit()
        logger.info('Debited %s from user %s (%s); balance now %s', amount, user_id, reference, new_balance)
        return new_balance

    def credit(self, user_id: int, amount: Decimal, reference: str) -> Decimal:
        user = self._get_user(user_id, for_update=True)
        new_balance = Decimal(user.wallet_balance or 0) + amount
        user.wallet_balance = new_balance
        self.db.add(
            Payment(
                user_id=user_id,
                amount=amount,
                currency=config.CURRENCY,
                status=PaymentStatus.SUCCEEDED,
                reference=reference,
            )
        )
        self.db.commit()
        logger.info('Credited %s to user %s (%s); balance now %s', amount, user_id, reference, new_balance)
        return new_balance
