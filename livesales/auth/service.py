import logging
from typing import Any, Dict

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError

from .model import Merchant
from .schemas import LoginRequest, RegisterRequest
from .security import create_token, hash_password, verify_password
from ..common.config import Settings
from ..common.database import Database
from ..common.errors import Conflict, NotFound, ValidationError

_logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Database, settings: Settings):
        self.db = db
        self.settings = settings

    def _token_for(self, merchant: Merchant) -> str:
        return create_token(merchant.id, merchant.email, self.settings.JWT_SECRET, self.settings.JWT_EXPIRES_SECONDS)

    async def register(self, payload: RegisterRequest) -> Dict[str, Any]:
        merchant = Merchant(
            first_name=payload.firstName,
            last_name=payload.lastName,
            email=str(payload.email),
            password=hash_password(payload.password),
            company_name=payload.companyName,
        )
        async with self.db.session() as session:
            session.add(merchant)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                raise Conflict("Email already exists")
        _logger.info("Merchant registered | merchant_id=%s", merchant.id)
        return {"message": "User registered successfully", "token": self._token_for(merchant)}

    async def login(self, payload: LoginRequest) -> Dict[str, Any]:
        async with self.db.session() as session:
            res = await session.execute(sa.select(Merchant).where(Merchant.email == str(payload.email)))
            merchant = res.scalar_one_or_none()
        if merchant is None:
            raise ValidationError("User not found")
        if not verify_password(payload.password, merchant.password):
            _logger.info("Failed login | merchant_id=%s", merchant.id)
            raise ValidationError("Invalid password")
        return {"token": self._token_for(merchant), "user": merchant.to_dict()}

    async def profile(self, merchant_id: int) -> Dict[str, Any]:
        async with self.db.session() as session:
            merchant = await session.get(Merchant, merchant_id)
        if merchant is None:
            raise NotFound("User not found")
        return merchant.to_dict()
