"""
Line-oriented command console.

Reads one command per line, runs it against the store in its own database
session, and prints a result line or the error's short message. The console
owns exactly one Session for its lifetime.

Run with: vaccine-scheduler [--database-url URL]
"""

import argparse
import asyncio
import logging
import sys
from datetime import date, datetime
from typing import Callable, NamedTuple, Optional, TextIO

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from scheduler.config import configure_logging, get_settings
from scheduler.database import MAX_INTEGER, build_engine, build_session_factory, create_tables
from scheduler.exceptions import InvalidDate, SchedulerError, StoreError, ValidationError
from scheduler.services.account_service import account_service
from scheduler.services.availability_service import availability_service
from scheduler.services.inventory_service import inventory_service
from scheduler.services.query_service import query_service
from scheduler.services.reservation_service import reservation_service
from scheduler.session import Role, Session

logger = logging.getLogger(__name__)

COMMANDS_HELP = """*** Please enter one of the following commands ***
> create_patient <username> <password>
> create_caregiver <username> <password>
> login_patient <username> <password>
> login_caregiver <username> <password>
> search_caregiver_schedule <date>
> reserve <date> <vaccine>
> upload_availability <date>
> cancel <appointment_id>
> add_doses <vaccine> <number>
> show_appointments
> logout
> help
> quit
"""


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD; single-digit months and days are accepted."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidDate()


def parse_int(value: str, what: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f"Please enter a valid {what}")
    if abs(number) > MAX_INTEGER:
        raise ValidationError(f"Please enter a valid {what}")
    return number


class Command(NamedTuple):
    arity: int
    handler: Callable
    login: bool = False
    role: Optional[Role] = None


class SchedulerConsole:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession], out: TextIO = None):
        self.session_factory = session_factory
        self.out = out or sys.stdout
        self.session = Session()
        self._commands: dict[str, Command] = {
            "create_patient": Command(3, self.create_patient),
            "create_caregiver": Command(3, self.create_caregiver),
            "login_patient": Command(3, self.login_patient),
            "login_caregiver": Command(3, self.login_caregiver),
            "search_caregiver_schedule": Command(2, self.search_caregiver_schedule, login=True),
            "reserve": Command(3, self.reserve, login=True, role=Role.PATIENT),
            "upload_availability": Command(2, self.upload_availability, login=True, role=Role.CAREGIVER),
            "cancel": Command(2, self.cancel, login=True),
            "add_doses": Command(3, self.add_doses, login=True, role=Role.CAREGIVER),
            "show_appointments": Command(1, self.show_appointments, login=True),
            "logout": Command(1, self.logout, login=True),
        }

    def print(self, line: str = "") -> None:
        self.out.write(line + "\n")

    async def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the console should stop."""
        tokens = line.split()
        if not tokens:
            self.print("Please try again!")
            return True

        operation = tokens[0]
        if operation == "quit":
            self.print("Bye!")
            return False
        if operation == "help":
            self.print(COMMANDS_HELP)
            return True
        command = self._commands.get(operation)
        if command is None:
            self.print("Invalid operation name!")
            return True

        # Login state is checked before the argument count.
        if command.login:
            try:
                self.session.require(command.role)
            except SchedulerError as e:
                self.print(e.message)
                return True
        if len(tokens) != command.arity:
            self.print("Please try again!")
            return True

        async with self.session_factory() as db:
            try:
                await command.handler(db, *tokens[1:])
                await db.commit()
            except SchedulerError as e:
                await db.rollback()
                if isinstance(e, StoreError):
                    logger.error("Store error during %s: %s", operation, e.__cause__)
                self.print(e.message)
            except SQLAlchemyError:
                await db.rollback()
                logger.exception("Store error during %s", operation)
                self.print(StoreError().message)
        return True

    async def create_patient(self, db: AsyncSession, username: str, password: str) -> None:
        await account_service.create_account(db, Role.PATIENT, username, password)
        self.print(f"Created user {username}")

    async def create_caregiver(self, db: AsyncSession, username: str, password: str) -> None:
        await account_service.create_account(db, Role.CAREGIVER, username, password)
        self.print(f"Created user {username}")

    async def login_patient(self, db: AsyncSession, username: str, password: str) -> None:
        await account_service.login(db, self.session, Role.PATIENT, username, password)
        self.print(f"Logged in as: {username}")

    async def login_caregiver(self, db: AsyncSession, username: str, password: str) -> None:
        await account_service.login(db, self.session, Role.CAREGIVER, username, password)
        self.print(f"Logged in as: {username}")

    async def search_caregiver_schedule(self, db: AsyncSession, day: str) -> None:
        view = await query_service.schedule_on(db, self.session, parse_date(day))
        if not view.caregivers and not view.vaccines:
            self.print(f"No availability on {view.date.isoformat()}")
            return
        for caregiver in view.caregivers:
            self.print(caregiver)
        for name, doses in view.vaccines:
            self.print(f"{name} {doses}")

    async def reserve(self, db: AsyncSession, day: str, vaccine: str) -> None:
        result = await reservation_service.reserve(db, self.session, parse_date(day), vaccine)
        self.print(f"Appointment ID {result.id}, Caregiver username {result.caregiver}")

    async def upload_availability(self, db: AsyncSession, day: str) -> None:
        await availability_service.upload_availability(db, self.session, parse_date(day))
        self.print("Availability uploaded!")

    async def cancel(self, db: AsyncSession, appointment_id: str) -> None:
        await reservation_service.cancel(db, self.session, parse_int(appointment_id, "appointment ID"))
        self.print("Appointment successfully cancelled")

    async def add_doses(self, db: AsyncSession, vaccine: str, number: str) -> None:
        await inventory_service.add_doses(db, self.session, vaccine, parse_int(number, "number of doses"))
        self.print("Doses updated!")

    async def show_appointments(self, db: AsyncSession) -> None:
        appointments = await query_service.my_reservations(db, self.session)
        if not appointments:
            self.print("No appointments scheduled")
            return
        for a in appointments:
            self.print(f"{a.id} {a.vaccine} {a.date.isoformat()} {a.counterparty}")

    async def logout(self, db: AsyncSession) -> None:
        self.session.logout()
        self.print("Successfully logged out")

    async def run(self, lines: TextIO) -> None:
        self.print()
        self.print("Welcome to the COVID-19 Vaccine Reservation Scheduling Application!")
        self.print(COMMANDS_HELP)
        while True:
            self.out.write("> ")
            self.out.flush()
            line = await asyncio.to_thread(lines.readline)
            if not line:
                self.print("Bye!")
                return
            if not await self.execute(line):
                return


async def _main(database_url: str) -> None:
    engine = build_engine(database_url)
    try:
        await create_tables(engine)
        console = SchedulerConsole(build_session_factory(engine))
        await console.run(sys.stdin)
    finally:
        await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Vaccine reservation scheduler console")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy async database URL (defaults to DATABASE_URL)",
    )
    args = parser.parse_args()

    configure_logging()
    asyncio.run(_main(args.database_url or get_settings().database_url))


if __name__ == "__main__":
    main()
