"""
Deployment script for the DAOStake model.

Deploys the YAO token with its pre-minted supply, then the DAOStake engine,
and hands the token's minting right to the engine.
"""

import argparse
import logging
import sys
import os

# Add the core directory to the path
sys.path.append(os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "core"))
from chain_host import Chain
from dao_stake import DAOStake
from stake_config import YAO_INITIAL_SUPPLY
from yao_token import YAOToken


def deploy(chain, deployer, treasury_wallet, community_wallet):
    """
    Deploys the YAO token and the DAOStake engine.

    Returns:
        Tuple of (yao_token, dao_stake)
    """
    yao = YAOToken(chain, "yao_token", treasury_wallet, YAO_INITIAL_SUPPLY, owner=deployer)

    print("YAO token smart contract address:", yao.address)
    print("YAO token name:", yao.name)
    print("YAO token symbol:", yao.symbol)
    print("YAO token decimals:", yao.decimals)
    print("YAO token total supply:", yao.total_supply)
    print("YAO token amount of account:", yao.balance_of(treasury_wallet))

    dao = DAOStake(chain, "dao_stake", treasury_wallet, community_wallet, yao.address,
                   owner=deployer)
    yao.transfer_ownership(deployer, dao.address)

    print("DAO stake smart contract address:", dao.address)
    print("DAO stake emission window: blocks", dao.start_block, "to", dao.end_block)
    return yao, dao


def main():
    parser = argparse.ArgumentParser(description="Deploy the YAO token and the DAOStake engine")
    parser.add_argument("--treasury", default="treasury_wallet", help="Treasury wallet address")
    parser.add_argument("--community", default="community_wallet", help="Community wallet address")
    parser.add_argument("--start-block", type=int, default=0, help="Block the chain starts at")
    parser.add_argument("--verbose", action="store_true", help="Log contract activity")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    chain = Chain(block_number=args.start_block)
    deploy(chain, "deployer", args.treasury, args.community)


if __name__ == "__main__":
    main()
