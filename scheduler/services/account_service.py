import logging
from typing import Optional, Union

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from scheduler.exceptions import AlreadyLoggedIn, InvalidCredentials, UsernameTaken, WeakPassword
from scheduler.models.account import Caregiver, Patient
from scheduler.passwords import generate_hash, generate_salt, verify_password
from scheduler.services.credential_policy import is_strong_password
from scheduler.session import Identity, Role, Session

logger = logging.getLogger(__name__)

Account = Union[Patient, Caregiver]

ACCOUNT_MODELS = {
    Role.PATIENT: Patient,
    Role.CAREGIVER: Caregiver,
}

# Digest target for unknown usernames so a miss costs the same as a bad password
_DUMMY_SALT = generate_salt()


class AccountService:
    async def get_account(self, db: AsyncSession, role: Role, username: str) -> Optional[Account]:
        model = ACCOUNT_MODELS[role]
        result = await db.execute(select(model).where(model.username == username))
        return result.scalar_one_or_none()

    async def username_exists(self, db: AsyncSession, role: Role, username: str) -> bool:
        return await self.get_account(db, role, username) is not None

    async def create_account(self, db: AsyncSession, role: Role, username: str, password: str) -> Account:
        """Create a patient or caregiver. Does not log the new account in."""
        if not is_strong_password(password):
            raise WeakPassword()
        if await self.username_exists(db, role, username):
            raise UsernameTaken()

        salt = generate_salt()
        account = ACCOUNT_MODELS[role](username=username, salt=salt, hash=generate_hash(password, salt))
        db.add(account)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent create for the same username
            await db.rollback()
            raise UsernameTaken()
        logger.info("Created %s account %s", role.value, username)
        return account

    async def authenticate(self, db: AsyncSession, role: Role, username: str, password: str) -> Optional[Account]:
        account = await self.get_account(db, role, username)
        if account is None:
            verify_password(password, _DUMMY_SALT, b"")
            return None
        if not verify_password(password, account.salt, account.hash):
            return None
        return account

    async def login(
        self, db: AsyncSession, session: Session, role: Role, username: str, password: str
    ) -> Identity:
        if session.is_authenticated:
            raise AlreadyLoggedIn()

        account = await self.authenticate(db, role, username, password)
        if account is None:
            logger.info("Failed %s login for %s", role.value, username)
            raise InvalidCredentials()

        identity = Identity(role=role, username=account.username)
        session.login(identity)
        logger.info("%s %s logged in", role.value.capitalize(), username)
        return identity


account_service = AccountService()
