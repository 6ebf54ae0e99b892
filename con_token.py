"""
SIX-DECIMAL STAKING TOKEN

Fungible token deployed twice by the staking suite:
  - cETH  : the staked asset, moved by the staking ledger through operators
  - cUSDT : the reward asset, minted by the staking ledger on claim

Balances are integers in base units (1 token == 10**6 base units).
Operators are time-bounded: an operator may move a holder's balance until
the unix timestamp recorded for the (holder, operator) pair.
"""

# -----------------------------------------------------------------------------
# Parameters & Helpers
# -----------------------------------------------------------------------------

DECIMALS = 6
SECONDS_PER_DAY = 86400
EPOCH = datetime.datetime(year=1970, month=1, day=1)

def unix_time():
    # whole days plus the intra-day remainder
    delta = now - EPOCH
    return int(delta.days) * SECONDS_PER_DAY + int(delta.seconds) % SECONDS_PER_DAY

# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

# address -> int (base units)
balances = Hash(default_value=0)

# (holder, operator) -> int (unix seconds, inclusive)
operators = Hash(default_value=0)

# address -> bool
minters = Hash(default_value=False)

# token metadata / config
metadata = Hash()

# Events
TransferEvent = LogEvent('Transfer', {
    'from': {'type': str, 'idx': True},
    'to': {'type': str, 'idx': True},
    'amount': {'type': int}
})

MintEvent = LogEvent('Mint', {
    'to': {'type': str, 'idx': True},
    'amount': {'type': int}
})

OperatorSetEvent = LogEvent('OperatorSet', {
    'holder': {'type': str, 'idx': True},
    'operator': {'type': str, 'idx': True},
    'until': {'type': int}
})

# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@construct
def seed(name: str = "Confidential Token", symbol: str = "cTOKEN"):
    metadata['name'] = name
    metadata['symbol'] = symbol
    metadata['decimals'] = DECIMALS
    metadata['operator'] = ctx.caller
    metadata['total_supply'] = 0

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

@export
def get_metadata():
    return {
        'name': metadata['name'],
        'symbol': metadata['symbol'],
        'decimals': metadata['decimals'],
        'operator': metadata['operator'],
        'total_supply': metadata['total_supply']
    }

@export
def change_metadata(key: str, value: Any):
    assert ctx.caller == metadata['operator'], 'Only operator can set metadata'
    assert key != 'decimals', 'Decimals are fixed'
    metadata[key] = value

@export
def balance_of(address: str):
    return balances[address]

@export
def is_minter(address: str):
    return bool(minters[address])

@export
def is_operator(holder: str, spender: str):
    if holder == spender:
        return True
    return operators[holder, spender] >= unix_time()

# -----------------------------------------------------------------------------
# Core
# -----------------------------------------------------------------------------

def move(amount: int, sender: str, to: str):
    assert amount > 0, 'Amount must be positive'
    assert balances[sender] >= amount, 'Insufficient balance'

    balances[sender] = balances[sender] - amount
    balances[to] = balances[to] + amount

    TransferEvent({
        'from': sender,
        'to': to,
        'amount': amount
    })

@export
def transfer(amount: int, to: str):
    move(amount, ctx.caller, to)

@export
def set_operator(operator: str, until: int):
    assert operator != ctx.caller, 'Holder is always its own operator'
    assert until >= 0, 'Bad expiry'

    operators[ctx.caller, operator] = until

    OperatorSetEvent({
        'holder': ctx.caller,
        'operator': operator,
        'until': until
    })

@export
def transfer_from(amount: int, to: str, main_account: str):
    assert is_operator(main_account, ctx.caller), 'Operator not authorized'
    move(amount, main_account, to)

# -----------------------------------------------------------------------------
# Supply
# -----------------------------------------------------------------------------

@export
def set_minter(address: str, allowed: bool):
    assert ctx.caller == metadata['operator'], 'Only operator can set minters'
    minters[address] = allowed

@export
def mint(to: str, amount: int):
    assert ctx.caller == metadata['operator'] or minters[ctx.caller], 'Only operator or minter can mint'
    assert amount > 0, 'Amount must be positive'

    balances[to] = balances[to] + amount
    metadata['total_supply'] = (metadata['total_supply'] or 0) + amount

    MintEvent({
        'to': to,
        'amount': amount
    })
