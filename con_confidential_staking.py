"""
CONFIDENTIAL STAKING LEDGER

Accounts lock whole units of the staked asset (cETH) and accrue the reward
asset (cUSDT) linearly in time:

    reward per second = rate_per_day * staked / (seconds_per_day * one_unit)

Positions are settled lazily: every mutating call first brings the caller's
accrued reward up to `now`, then applies its own effect. Sub-unit remainders
of a settlement are dropped.

Views project accrual up to the caller's `now` without writing state.
"""

# -----------------------------------------------------------------------------
# Parameters & Helpers
# -----------------------------------------------------------------------------

ONE_TOKEN = 1000000          # 6 decimals
RATE_PER_DAY = 10000000      # 10 cUSDT per staked cETH per day
SECONDS_PER_DAY = 86400
MAX_UINT64 = 2**64 - 1
EPOCH = datetime.datetime(year=1970, month=1, day=1)

staked_token_interface = [
    importlib.Func('transfer', args=('amount', 'to')),
    importlib.Func('transfer_from', args=('amount', 'to', 'main_account')),
    importlib.Func('balance_of', args=('address',))
]

reward_token_interface = [
    importlib.Func('mint', args=('to', 'amount'))
]

def unix_time():
    # whole days plus the intra-day remainder
    delta = now - EPOCH
    return int(delta.days) * SECONDS_PER_DAY + int(delta.seconds) % SECONDS_PER_DAY

def empty_position():
    return {
        'staked': 0,
        'accrued': 0,
        'last_update': 0
    }

def load(account: str):
    data = positions[account]
    if data is None:
        return empty_position()
    return data

def accrue(staked: int, elapsed: int):
    # single floor division over the full product
    return (config['rate_per_day'] * elapsed * staked) // (config['seconds_per_day'] * config['one_unit'])

def pending(position: dict, at: int):
    elapsed = at - position['last_update']
    if position['staked'] == 0 or elapsed <= 0:
        return 0
    return accrue(position['staked'], elapsed)

def settle(position: dict, at: int):
    assert at >= position['last_update'], 'Clock moved backwards'

    accrued = position['accrued'] + pending(position, at)
    assert accrued <= config['max_amount'], 'Accrual overflow'

    return {
        'staked': position['staked'],
        'accrued': accrued,
        'last_update': at
    }

# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

# address -> {'staked': int, 'accrued': int, 'last_update': int}
positions = Hash()

# immutable after seed
config = Hash()

# sum of all positions' staked
total_staked = Variable()

# Events
StakedEvent = LogEvent('Staked', {
    'user': {'type': str, 'idx': True},
    'units': {'type': int}
})

WithdrawnEvent = LogEvent('Withdrawn', {
    'user': {'type': str, 'idx': True},
    'units': {'type': int}
})

ClaimedEvent = LogEvent('Claimed', {
    'user': {'type': str, 'idx': True},
    'amount': {'type': int}
})

# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@construct
def seed(staked_token: str,
         reward_token: str,
         one_unit: int = ONE_TOKEN,
         rate_per_day: int = RATE_PER_DAY,
         seconds_per_day: int = SECONDS_PER_DAY,
         max_amount: int = MAX_UINT64,
         strict_claim: bool = True):
    assert staked_token != reward_token, 'Staked and reward tokens must differ'
    assert importlib.enforce_interface(importlib.import_module(staked_token), staked_token_interface), 'Staked token does not match interface'
    assert importlib.enforce_interface(importlib.import_module(reward_token), reward_token_interface), 'Reward token does not match interface'
    assert one_unit > 0, 'Unit must be positive'
    assert rate_per_day >= 0, 'Rate must not be negative'
    assert seconds_per_day > 0, 'Day length must be positive'
    assert max_amount >= one_unit, 'Max amount below one unit'

    config['staked_token'] = staked_token
    config['reward_token'] = reward_token
    config['one_unit'] = one_unit
    config['rate_per_day'] = rate_per_day
    config['seconds_per_day'] = seconds_per_day
    config['max_amount'] = max_amount
    config['strict_claim'] = strict_claim
    config['operator'] = ctx.caller

    total_staked.set(0)

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

@export
def get_config():
    return {
        'staked_token': config['staked_token'],
        'reward_token': config['reward_token'],
        'one_unit': config['one_unit'],
        'rate_per_day': config['rate_per_day'],
        'seconds_per_day': config['seconds_per_day'],
        'max_amount': config['max_amount'],
        'strict_claim': config['strict_claim'],
        'operator': config['operator']
    }

@export
def interest_rate_per_day():
    return config['rate_per_day']

@export
def get_staked(account: str):
    return load(account)['staked']

@export
def get_accrued(account: str):
    position = load(account)
    projected = position['accrued'] + pending(position, unix_time())
    return min(projected, config['max_amount'])

@export
def get_settled_accrued(account: str):
    return load(account)['accrued']

@export
def get_last_update(account: str):
    return load(account)['last_update']

@export
def get_position(account: str):
    data = positions[account]
    position = load(account)
    return {
        'exists': data is not None,
        'staked': position['staked'],
        'accrued': position['accrued'],
        'pending': pending(position, unix_time()),
        'last_update': position['last_update']
    }

@export
def get_total_staked():
    return total_staked.get()

# -----------------------------------------------------------------------------
# Core: stake / withdraw / claim
# -----------------------------------------------------------------------------

@export
def stake_one():
    unit = config['one_unit']
    position = settle(load(ctx.caller), unix_time())
    assert position['staked'] + unit <= config['max_amount'], 'Stake overflow'

    # debit the staker; fails on missing operator approval or balance
    staked_token = importlib.import_module(config['staked_token'])
    staked_token.transfer_from(amount=unit, to=ctx.this, main_account=ctx.caller)

    position['staked'] = position['staked'] + unit
    positions[ctx.caller] = position
    total_staked.set(total_staked.get() + unit)

    StakedEvent({
        'user': ctx.caller,
        'units': unit
    })

@export
def withdraw_one():
    unit = config['one_unit']
    position = load(ctx.caller)
    assert position['staked'] >= unit, 'Insufficient staked'

    position = settle(position, unix_time())
    position['staked'] = position['staked'] - unit

    staked_token = importlib.import_module(config['staked_token'])
    staked_token.transfer(amount=unit, to=ctx.caller)

    positions[ctx.caller] = position
    total_staked.set(total_staked.get() - unit)

    WithdrawnEvent({
        'user': ctx.caller,
        'units': unit
    })

@export
def claim():
    position = settle(load(ctx.caller), unix_time())
    amount = position['accrued']

    if amount == 0:
        assert not config['strict_claim'], 'Nothing to claim'
        # never-touched accounts stay absent
        if positions[ctx.caller] is not None:
            positions[ctx.caller] = position
        return 0

    reward_token = importlib.import_module(config['reward_token'])
    reward_token.mint(to=ctx.caller, amount=amount)

    position['accrued'] = 0
    positions[ctx.caller] = position

    ClaimedEvent({
        'user': ctx.caller,
        'amount': amount
    })
    return amount

# -----------------------------------------------------------------------------
# Invariants / Utilities
# -----------------------------------------------------------------------------

@export
def verify_stake_invariant():
    # Sum of positions == running total == tokens held by this ledger
    total = 0
    count = 0
    items = positions.all()
    for v in items:
        if v and isinstance(v, dict):
            total += int(v.get('staked', 0))
            count += 1
    staked_token = importlib.import_module(config['staked_token'])
    held = staked_token.balance_of(address=ctx.this)
    return {
        'ok': total == total_staked.get() and total == held,
        'positions_total': total,
        'expected': total_staked.get(),
        'held': held,
        'accounts': count
    }
