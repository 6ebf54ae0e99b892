"""
Deploys the staking suite to a contracting client:

  1. cETH   (con_token.py)   - staked asset
  2. cUSDT  (con_token.py)   - reward asset
  3. ledger (con_confidential_staking.py), wired to both tokens

and grants the ledger minting rights on cUSDT so `claim` can pay out.
"""
import argparse
import logging
import sys
from pathlib import Path

import contracting
from contracting.client import ContractingClient

log = logging.getLogger("deploy_staking")

PROJECT_ROOT = Path(__file__).resolve().parent
TOKEN_FILE = "con_token.py"
STAKING_FILE = "con_confidential_staking.py"
# source checkout first, then the data-files location of an installed wheel
CONTRACT_DIRS = (
    PROJECT_ROOT,
    Path(sys.prefix) / "share" / "confidential-xian-staking",
)
SUBMISSION_PATH = (
    Path(contracting.__file__).resolve().parent / "contracts" / "submission.s.py"
)


def contract_source(filename, search=CONTRACT_DIRS):
    for directory in search:
        path = Path(directory) / filename
        if path.is_file():
            return path.read_text()
    raise FileNotFoundError(
        "Contract %s not found in %s" % (filename, ", ".join(str(d) for d in search))
    )


CETH_NAME = "con_ceth"
CUSDT_NAME = "con_cusdt"
STAKING_NAME = "con_confidential_staking"


def deploy(client, ceth_name=CETH_NAME, cusdt_name=CUSDT_NAME,
           staking_name=STAKING_NAME, **ledger_config):
    """Submits all three contracts; `ledger_config` is passed to the ledger's seed."""
    token_code = contract_source(TOKEN_FILE)

    client.submit(token_code, name=ceth_name, owner=None,
                  constructor_args={"name": "Confidential ETH", "symbol": "cETH"})
    client.submit(token_code, name=cusdt_name, owner=None,
                  constructor_args={"name": "Confidential USDT", "symbol": "cUSDT"})

    constructor_args = {"staked_token": ceth_name, "reward_token": cusdt_name}
    constructor_args.update(ledger_config)
    client.submit(contract_source(STAKING_FILE), name=staking_name, owner=None,
                  constructor_args=constructor_args)

    client.get_contract(cusdt_name).set_minter(address=staking_name, allowed=True)

    log.info("ConfidentialETH: %s", ceth_name)
    log.info("ConfidentialUSDT: %s", cusdt_name)
    log.info("ConfidentialStaking: %s", staking_name)

    return {
        "cETH": client.get_contract(ceth_name),
        "cUSDT": client.get_contract(cusdt_name),
        "staking": client.get_contract(staking_name),
    }


def build_parser():
    parser = argparse.ArgumentParser(description="Deploy the confidential staking contracts")
    parser.add_argument("--signer", default="sys", help="Deployer / token operator")
    parser.add_argument("--flush", action="store_true", help="Wipe existing contract state first")
    parser.add_argument("--rate-per-day", type=int, default=None,
                        help="Reward base units per staked unit per day")
    parser.add_argument("--lenient-claim", action="store_true",
                        help="Let claim() with nothing accrued succeed as a no-op")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    client = ContractingClient(signer=args.signer, metering=False)
    if args.flush:
        log.warning("Flushing contract state")
        client.flush()
    client.set_submission_contract(str(SUBMISSION_PATH))

    ledger_config = {}
    if args.rate_per_day is not None:
        ledger_config["rate_per_day"] = args.rate_per_day
    if args.lenient_claim:
        ledger_config["strict_claim"] = False

    deploy(client, **ledger_config)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
