import datetime
import importlib.util
from pathlib import Path

import contracting
import pytest
from contracting.client import ContractingClient
from contracting.stdlib.bridge.time import Datetime

PROJECT_ROOT = Path(__file__).resolve().parents[1]
HELPER_PATH = PROJECT_ROOT / "client_helper.py"
DEPLOY_PATH = PROJECT_ROOT / "deploy_staking.py"
SUBMISSION_PATH = (
    Path(contracting.__file__).resolve().parent / "contracts" / "submission.s.py"
)

BASE_TIME = datetime.datetime(2024, 1, 1)
BASE_TS = 1704067200
ONE = 1_000_000
STAKING_NAME = "con_confidential_staking"

NO_MINT_REGISTRY = """
balances = Hash(default_value=0)

@export
def balance_of(address: str):
    return balances[address]

@export
def transfer(amount: int, to: str):
    assert balances[ctx.caller] >= amount, 'Insufficient balance'
    balances[ctx.caller] = balances[ctx.caller] - amount
    balances[to] = balances[to] + amount
"""


def environment_at(seconds=0):
    """Environment for a call made `seconds` after BASE_TIME."""
    moment = BASE_TIME + datetime.timedelta(seconds=seconds)
    return {
        "now": Datetime(
            moment.year, moment.month, moment.day,
            moment.hour, moment.minute, moment.second,
        )
    }


def load_module(name, path):
    spec = importlib.util.spec_from_file_location(name, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="session")
def helper_module():
    return load_module("client_helper_tests", HELPER_PATH)


@pytest.fixture(scope="session")
def deploy_module():
    return load_module("deploy_staking_tests", DEPLOY_PATH)


@pytest.fixture
def client():
    client = ContractingClient(signer="operator", metering=False)
    client.flush()
    client.set_submission_contract(str(SUBMISSION_PATH))
    return client


@pytest.fixture
def suite(client, deploy_module):
    return deploy_module.deploy(client)


@pytest.fixture
def ceth(suite):
    return suite["cETH"]


@pytest.fixture
def cusdt(suite):
    return suite["cUSDT"]


@pytest.fixture
def staking(suite):
    return suite["staking"]


@pytest.fixture
def at():
    return environment_at


@pytest.fixture
def fund():
    def fund_account(token, account, units, *, seconds=0, approve_for=30 * 86400):
        """Mints `units` whole tokens to `account` and makes the ledger its operator."""
        token.mint(to=account, amount=units * ONE, environment=environment_at(seconds))
        token.set_operator(
            operator=STAKING_NAME,
            until=BASE_TS + seconds + approve_for,
            signer=account,
            environment=environment_at(seconds),
        )
    return fund_account


@pytest.fixture
def no_mint_registry(client):
    """A registry exposing balances and transfers but no `mint`."""
    client.submit(NO_MINT_REGISTRY, name="con_no_mint", owner=None)
    return "con_no_mint"
