import json

import httpx
import pytest
from sqlmodel import Session

from ..core.errors import AccountNotFoundError, InvalidFormatError, InvalidInputError
from ..models import AccountCreate, AccountUpdate, Currency, TransactionCreate, TransactionType
from ..services import LedgerRepository, LedgerService, RemoteMirror
from .helpers import at


@pytest.fixture
def pushes():
    return []


@pytest.fixture
def mirror(pushes):
    def handler(request: httpx.Request) -> httpx.Response:
        pushes.append(json.loads(request.content))
        return httpx.Response(200)

    remote = RemoteMirror(client=httpx.Client(transport=httpx.MockTransport(handler)), max_workers=1)
    yield remote
    remote.close()


def make_service(session: Session, mirror=None) -> LedgerService:
    return LedgerService(session, LedgerRepository(session, seed=False), mirror)


def deposit(account_id: str, amount: float, **extra) -> TransactionCreate:
    return TransactionCreate(
        account_id=account_id,
        type=TransactionType.DEPOSIT,
        amount=amount,
        date=at(2024, 1),
        **extra,
    )


def test_mutations_are_persisted(engine, session: Session) -> None:
    service = make_service(session)
    account = service.create_account(AccountCreate(name="Alice"))
    service.record_transaction(deposit(account.id, 100))
    service.record_transaction(deposit(account.id, 10, currency=Currency.USD, exchange_rate=3.5))

    with Session(engine) as fresh:
        reloaded = make_service(fresh)
        assert reloaded.get_account(account.id).balance == 135
        assert len(reloaded.transactions) == 2

def test_invalid_transaction_is_not_persisted(engine, session: Session) -> None:
    service = make_service(session)
    account = service.create_account(AccountCreate(name="Bob"))

    with pytest.raises(InvalidInputError):
        service.record_transaction(deposit(account.id, -5))

    with Session(engine) as fresh:
        assert make_service(fresh).transactions == []

def test_update_missing_account_raises(session: Session) -> None:
    service = make_service(session)
    with pytest.raises(AccountNotFoundError):
        service.update_account("missing", AccountUpdate(name="Nobody"))

def test_failed_import_keeps_existing_state(engine, session: Session) -> None:
    service = make_service(session)
    service.create_account(AccountCreate(name="Carol"))

    with pytest.raises(InvalidFormatError):
        service.import_snapshot(b'{"accounts": []}')

    with Session(engine) as fresh:
        assert [a.name for a in make_service(fresh).accounts] == ["Carol"]

def test_import_replaces_state(session: Session) -> None:
    service = make_service(session)
    service.create_account(AccountCreate(name="Old"))
    other = make_service(session)
    other.engine.add_account("New")
    raw = other.export_snapshot()

    summary = service.import_snapshot(raw)

    assert (summary.accounts, summary.transactions) == (2, 0)
    assert [a.name for a in service.accounts] == ["Old", "New"]

def test_no_mirror_without_endpoint(session: Session, mirror, pushes) -> None:
    service = make_service(session, mirror)
    service.create_account(AccountCreate(name="Dave"))
    mirror.close()
    assert pushes == []

def test_every_mutation_pushes_full_snapshot(session: Session, mirror, pushes) -> None:
    service = make_service(session, mirror)
    service.set_sync_endpoint("https://mirror.example.com/hook")

    account = service.create_account(AccountCreate(name="Eve"))
    service.update_account(account.id, AccountUpdate(name="Evelyn", phone_number="0521112222"))
    service.record_transaction(deposit(account.id, 40))
    backup = service.export_snapshot()
    service.delete_account(account.id)
    service.delete_account(account.id)
    service.import_snapshot(backup)
    mirror.close()

    assert len(pushes) == 5
    assert pushes[0]["accounts"][0]["name"] == "Eve"
    assert pushes[1]["accounts"][0]["name"] == "Evelyn"
    assert pushes[1]["accounts"][0]["phoneNumber"] == "0521112222"
    assert pushes[2]["accounts"][0]["balance"] == 40
    assert pushes[3] == {"accounts": [], "transactions": pushes[2]["transactions"]}
    assert pushes[4] == pushes[2]

def test_mirror_failure_does_not_block_mutation(engine, session: Session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    failing = RemoteMirror(client=httpx.Client(transport=httpx.MockTransport(handler)), max_workers=1)
    service = make_service(session, failing)
    service.set_sync_endpoint("https://mirror.example.com/hook")

    account = service.create_account(AccountCreate(name="Frank"))
    failing.close()

    with Session(engine) as fresh:
        assert make_service(fresh).get_account(account.id).name == "Frank"
