import datetime
from decimal import Decimal, InvalidOperation

# ---- Chain-constant parameters & helpers (mirror contract) ----

DECIMALS = 6
ONE_TOKEN = 10 ** DECIMALS
RATE_PER_DAY = 10 * ONE_TOKEN
SECONDS_PER_DAY = 86400
MAX_UINT64 = 2**64 - 1

EPOCH = datetime.datetime(1970, 1, 1)

def to_timestamp(moment) -> int:
    """Unix seconds for a naive UTC datetime (or anything with the same fields)."""
    if isinstance(moment, int):
        return moment
    dt = datetime.datetime(moment.year, moment.month, moment.day,
                           getattr(moment, 'hour', 0), getattr(moment, 'minute', 0),
                           getattr(moment, 'second', 0))
    return int((dt - EPOCH).total_seconds())

def from_timestamp(ts: int) -> datetime.datetime:
    return EPOCH + datetime.timedelta(seconds=ts)

def accrue(staked: int, elapsed: int,
           rate_per_day: int = RATE_PER_DAY,
           seconds_per_day: int = SECONDS_PER_DAY,
           one_unit: int = ONE_TOKEN) -> int:
    # Mirrors on-chain accrue: one floor division over the full product
    if staked <= 0 or elapsed <= 0:
        return 0
    return (rate_per_day * elapsed * staked) // (seconds_per_day * one_unit)

def empty_position() -> dict:
    return {'staked': 0, 'accrued': 0, 'last_update': 0}

def project(position: dict, now: int,
            rate_per_day: int = RATE_PER_DAY,
            seconds_per_day: int = SECONDS_PER_DAY,
            one_unit: int = ONE_TOKEN,
            max_amount: int = MAX_UINT64) -> int:
    """Accrued reward as of `now`, without settling. Mirrors `get_accrued`."""
    elapsed = now - position['last_update']
    projected = position['accrued'] + accrue(position['staked'], elapsed,
                                             rate_per_day, seconds_per_day, one_unit)
    return min(projected, max_amount)

def settle(position: dict, now: int,
           rate_per_day: int = RATE_PER_DAY,
           seconds_per_day: int = SECONDS_PER_DAY,
           one_unit: int = ONE_TOKEN,
           max_amount: int = MAX_UINT64) -> dict:
    """
    Returns the settled copy of `position` as of `now`.
    Raises ValueError where the contract would assert.
    """
    if now < position['last_update']:
        raise ValueError("Clock moved backwards")

    accrued = position['accrued'] + accrue(position['staked'], now - position['last_update'],
                                           rate_per_day, seconds_per_day, one_unit)
    if accrued > max_amount:
        raise ValueError("Accrual overflow")

    return {
        'staked': position['staked'],
        'accrued': accrued,
        'last_update': now
    }

# ---- Display -----------------------------------------------------------------

def format_units6(value) -> str:
    """
    Renders base units as a fixed six-decimal string, e.g. 416666 -> '0.416666'.
    None renders as '-'.
    """
    if value is None:
        return '-'
    value = int(value)
    sign = '-' if value < 0 else ''
    whole, frac = divmod(abs(value), ONE_TOKEN)
    return "%s%d.%06d" % (sign, whole, frac)

def parse_units6(text: str) -> int:
    """Parses a decimal token amount into base units; rejects sub-unit precision."""
    try:
        amount = Decimal(str(text).strip())
    except InvalidOperation:
        raise ValueError("Not a number: %r" % (text,))
    if not amount.is_finite():
        raise ValueError("Not a number: %r" % (text,))

    scaled = amount * ONE_TOKEN
    if scaled != scaled.to_integral_value():
        raise ValueError("More than %d decimal places: %r" % (DECIMALS, text))
    if scaled < 0:
        raise ValueError("Amount must not be negative")
    return int(scaled)

# ---- Convenience: wallet-side position tracker (optional) -------------------

class PositionTracker:
    """
    Optional local mirror of one account's staking position.
    Applies the same settle-then-mutate rules as the ledger so a wallet can
    show projected numbers between chain reads.
    """
    def __init__(self, position: dict = None, rate_per_day: int = RATE_PER_DAY,
                 seconds_per_day: int = SECONDS_PER_DAY, one_unit: int = ONE_TOKEN,
                 max_amount: int = MAX_UINT64, strict_claim: bool = True):
        self.position = dict(position or empty_position())
        self.params = {
            'rate_per_day': rate_per_day,
            'seconds_per_day': seconds_per_day,
            'one_unit': one_unit,
            'max_amount': max_amount,
        }
        self.strict_claim = strict_claim

    @property
    def one_unit(self) -> int:
        return self.params['one_unit']

    def projected(self, now: int) -> int:
        return project(self.position, now, **self.params)

    def stake_one(self, now: int):
        position = settle(self.position, now, **self.params)
        if position['staked'] + self.one_unit > self.params['max_amount']:
            raise ValueError("Stake overflow")
        position['staked'] += self.one_unit
        self.position = position
        return self.position

    def withdraw_one(self, now: int):
        if self.position['staked'] < self.one_unit:
            raise ValueError("Insufficient staked")
        position = settle(self.position, now, **self.params)
        position['staked'] -= self.one_unit
        self.position = position
        return self.position

    def claim(self, now: int) -> int:
        position = settle(self.position, now, **self.params)
        amount = position['accrued']
        if amount == 0 and self.strict_claim:
            raise ValueError("Nothing to claim")
        position['accrued'] = 0
        self.position = position
        return amount
