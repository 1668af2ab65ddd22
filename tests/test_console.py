"""
Tests for the line-oriented command console.
"""

import io
import pytest
from scheduler.console import SchedulerConsole, parse_date
from scheduler.exceptions import InvalidDate
from scheduler.session import Role


@pytest.fixture
def console(session_factory):
    return SchedulerConsole(session_factory, out=io.StringIO())


async def run(console: SchedulerConsole, *lines: str) -> list[str]:
    """Execute lines and return only the output they produced."""
    console.out.seek(0)
    console.out.truncate()
    for line in lines:
        await console.execute(line)
    return console.out.getvalue().splitlines()


class TestParseDate:
    def test_iso_date(self):
        assert parse_date("2024-06-01").isoformat() == "2024-06-01"

    def test_single_digit_month_and_day(self):
        assert parse_date("2024-6-1").isoformat() == "2024-06-01"

    @pytest.mark.parametrize("value", ["06/01/2024", "2024-13-01", "tomorrow"])
    def test_invalid(self, value):
        with pytest.raises(InvalidDate):
            parse_date(value)


class TestAccountCommands:
    @pytest.mark.asyncio
    async def test_create_and_login(self, console):
        assert await run(console, "create_patient alice Abcd123!") == ["Created user alice"]
        assert await run(console, "login_patient alice Abcd123!") == ["Logged in as: alice"]
        assert console.session.identity.role == Role.PATIENT

    @pytest.mark.asyncio
    async def test_weak_password(self, console):
        assert await run(console, "create_caregiver carol Abc123!") == ["Please use a strong password"]

    @pytest.mark.asyncio
    async def test_username_taken_per_role(self, console):
        output = await run(
            console,
            "create_patient alice Abcd123!",
            "create_caregiver alice Abcd123!",
            "create_patient alice Abcd123!",
        )
        assert output == ["Created user alice", "Created user alice", "Username taken, try again!"]

    @pytest.mark.asyncio
    async def test_second_login_rejected(self, console):
        await run(console, "create_patient alice Abcd123!", "create_caregiver carol Abcd123!")
        output = await run(console, "login_patient alice Abcd123!", "login_caregiver carol Abcd123!")
        assert output == ["Logged in as: alice", "User already logged in."]

    @pytest.mark.asyncio
    async def test_bad_credentials(self, console):
        await run(console, "create_patient alice Abcd123!")
        assert await run(console, "login_patient alice Wrong123!") == ["Login failed."]
        assert console.session.identity is None

    @pytest.mark.asyncio
    async def test_logout(self, console):
        await run(console, "create_patient alice Abcd123!", "login_patient alice Abcd123!")
        assert await run(console, "logout") == ["Successfully logged out"]
        assert await run(console, "logout") == ["Please login first"]


class TestSchedulingCommands:
    @pytest.mark.asyncio
    async def test_full_booking_flow(self, console):
        await run(
            console,
            "create_caregiver carol Abcd123!",
            "create_caregiver bea Abcd123!",
            "create_patient alice Abcd123!",
        )

        caregiver_output = await run(
            console,
            "login_caregiver carol Abcd123!",
            "upload_availability 2024-06-01",
            "add_doses flu 2",
            "logout",
            "login_caregiver bea Abcd123!",
            "upload_availability 2024-06-01",
            "logout",
        )
        assert caregiver_output == [
            "Logged in as: carol",
            "Availability uploaded!",
            "Doses updated!",
            "Successfully logged out",
            "Logged in as: bea",
            "Availability uploaded!",
            "Successfully logged out",
        ]

        patient_output = await run(
            console,
            "login_patient alice Abcd123!",
            "search_caregiver_schedule 2024-06-01",
            "reserve 2024-06-01 flu",
            "show_appointments",
            "search_caregiver_schedule 2024-06-01",
        )
        assert patient_output == [
            "Logged in as: alice",
            "bea",
            "carol",
            "flu 2",
            "Appointment ID 1, Caregiver username bea",
            "1 flu 2024-06-01 bea",
            "carol",
            "flu 1",
        ]

        cancel_output = await run(console, "cancel 1", "show_appointments", "search_caregiver_schedule 2024-6-1")
        assert cancel_output == [
            "Appointment successfully cancelled",
            "No appointments scheduled",
            "bea",
            "carol",
            "flu 2",
        ]

    @pytest.mark.asyncio
    async def test_reserve_errors(self, console):
        await run(
            console,
            "create_caregiver carol Abcd123!",
            "create_patient alice Abcd123!",
            "login_caregiver carol Abcd123!",
            "upload_availability 2024-06-01",
            "add_doses flu 0",
        )
        assert await run(console, "reserve 2024-06-01 flu") == ["Please login as a patient"]

        await run(console, "logout", "login_patient alice Abcd123!")
        output = await run(
            console,
            "reserve 2024-06-02 flu",
            "reserve 2024-06-01 flu",
            "reserve 2024-06-01 measles",
            "reserve June-1 flu",
        )
        assert output == [
            "No caregiver is available",
            "Not enough available doses",
            "No such vaccine",
            "Please enter a valid date!",
        ]

    @pytest.mark.asyncio
    async def test_cancel_someone_elses_appointment(self, console, session_factory):
        await run(
            console,
            "create_caregiver carol Abcd123!",
            "create_patient alice Abcd123!",
            "create_patient bob Abcd123!",
            "login_caregiver carol Abcd123!",
            "upload_availability 2024-06-01",
            "add_doses flu 1",
            "logout",
            "login_patient alice Abcd123!",
            "reserve 2024-06-01 flu",
            "logout",
            "login_patient bob Abcd123!",
        )
        output = await run(console, "cancel 1", "cancel 7", "cancel one")
        assert output == [
            "You can only cancel your appointments",
            "No appointments found",
            "Please enter a valid appointment ID",
        ]

    @pytest.mark.asyncio
    async def test_patient_cannot_manage_inventory(self, console):
        await run(console, "create_patient alice Abcd123!", "login_patient alice Abcd123!")
        output = await run(console, "add_doses flu 3", "upload_availability 2024-06-01")
        assert output == ["Please login as a caregiver", "Please login as a caregiver"]

    @pytest.mark.asyncio
    async def test_bad_dose_count(self, console):
        await run(console, "create_caregiver carol Abcd123!", "login_caregiver carol Abcd123!")
        output = await run(console, "add_doses flu many", "add_doses flu -2")
        assert output == [
            "Please enter a valid number of doses",
            "Number of doses must be a non-negative integer",
        ]

    @pytest.mark.asyncio
    async def test_oversized_numbers_rejected(self, console):
        await run(
            console,
            "create_caregiver carol Abcd123!",
            "create_patient alice Abcd123!",
            "login_caregiver carol Abcd123!",
        )
        output = await run(console, "add_doses flu 99999999999999999999", "add_doses flu 2147483648")
        assert output == ["Please enter a valid number of doses"] * 2

        await run(console, "logout", "login_patient alice Abcd123!")
        assert await run(console, "cancel 99999999999999999999") == ["Please enter a valid appointment ID"]
        assert await run(console, "show_appointments") == ["No appointments scheduled"]

    @pytest.mark.asyncio
    async def test_stock_total_capped(self, console):
        await run(console, "create_caregiver carol Abcd123!", "login_caregiver carol Abcd123!")
        output = await run(console, "add_doses flu 2147483647", "add_doses flu 1")
        assert output == ["Doses updated!", "Number of doses is too large"]

    @pytest.mark.asyncio
    async def test_login_required(self, console):
        output = await run(
            console,
            "search_caregiver_schedule 2024-06-01",
            "show_appointments",
            "cancel 1",
        )
        assert output == ["Please login first"] * 3


class TestDispatch:
    @pytest.mark.asyncio
    async def test_unknown_command(self, console):
        assert await run(console, "book 2024-06-01") == ["Invalid operation name!"]

    @pytest.mark.asyncio
    async def test_wrong_arity(self, console):
        assert await run(console, "create_patient alice") == ["Please try again!"]

    @pytest.mark.asyncio
    async def test_login_checked_before_arity(self, console):
        output = await run(
            console,
            "search_caregiver_schedule",
            "reserve 2024-06-01",
            "cancel",
            "show_appointments now",
            "logout now",
        )
        assert output == ["Please login first"] * 5

    @pytest.mark.asyncio
    async def test_role_checked_before_arity(self, console):
        await run(console, "create_patient alice Abcd123!", "login_patient alice Abcd123!")
        output = await run(console, "add_doses flu", "upload_availability", "reserve 2024-06-01")
        assert output == ["Please login as a caregiver", "Please login as a caregiver", "Please try again!"]

    @pytest.mark.asyncio
    async def test_blank_line(self, console):
        assert await run(console, "   ") == ["Please try again!"]

    @pytest.mark.asyncio
    async def test_quit_stops(self, console):
        assert await console.execute("quit") is False
        assert console.out.getvalue().splitlines()[-1] == "Bye!"

    @pytest.mark.asyncio
    async def test_run_until_end_of_input(self, console):
        await console.run(io.StringIO("create_patient alice Abcd123!\n"))
        output = console.out.getvalue()
        assert "Welcome to the COVID-19 Vaccine Reservation Scheduling Application!" in output
        assert "Created user alice" in output
        assert output.rstrip().endswith("Bye!")
