from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from scheduler.auth import create_token, get_session, revoke_token
from scheduler.database import get_db
from scheduler.schemas.account import AccountCreate, AccountResponse, LoginRequest, TokenResponse
from scheduler.services.account_service import account_service
from scheduler.session import Role, Session

router = APIRouter()


@router.post("/patients", response_model=AccountResponse, status_code=201)
async def create_patient(data: AccountCreate, db: AsyncSession = Depends(get_db)):
    account = await account_service.create_account(db, Role.PATIENT, data.username, data.password)
    return AccountResponse(username=account.username, role=Role.PATIENT.value)


@router.post("/caregivers", response_model=AccountResponse, status_code=201)
async def create_caregiver(data: AccountCreate, db: AsyncSession = Depends(get_db)):
    account = await account_service.create_account(db, Role.CAREGIVER, data.username, data.password)
    return AccountResponse(username=account.username, role=Role.CAREGIVER.value)


@router.post("/login/{role}", response_model=TokenResponse)
async def login(
    role: Role,
    body: LoginRequest,
    db: AsyncSession = Depends(get_db),
    session: Session = Depends(get_session),
):
    """
    Exchange patient or caregiver credentials for a bearer token.
    A request that already carries a valid token is rejected with 409.
    """
    identity = await account_service.login(db, session, role, body.username, body.password)
    return TokenResponse(
        access_token=create_token(identity),
        username=identity.username,
        role=identity.role.value,
    )


@router.post("/logout")
async def logout(db: AsyncSession = Depends(get_db), session: Session = Depends(get_session)):
    await revoke_token(db, session)
    identity = session.logout()
    return {"logged_out": True, "username": identity.username}
