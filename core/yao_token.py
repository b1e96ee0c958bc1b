"""
YAO Token Model for the DAOStake system.

This module simulates the YAOToken contract, the reward token the staking
engine emits. The deployer pre-mints the initial supply to the treasury and
then hands ownership, and with it the sole right to mint, to the engine.
"""

import logging

from erc20_token import ERC20Token
from chain_host import transactional
from stake_config import YAO_DECIMALS, YAO_NAME, YAO_SYMBOL
from stake_errors import AccessDeniedError, ConfigurationError

logger = logging.getLogger(__name__)


class YAOToken(ERC20Token):
    """
    Simulates the YAOToken contract: an ownable, mintable ERC20 token.
    """

    STATE_FIELDS = ERC20Token.STATE_FIELDS + ("owner",)

    def __init__(self, chain, address, initial_holder, initial_supply, owner=None):
        super().__init__(chain, address, YAO_NAME, YAO_SYMBOL, YAO_DECIMALS,
                         initial_holder=initial_holder, initial_supply=initial_supply)

        # Owner of the contract; the only account allowed to mint
        self.owner = owner if owner is not None else initial_holder

    @transactional
    def mint(self, caller, recipient, amount):
        """
        Mints new tokens to the recipient account.
        Only callable by the owner.

        Args:
            caller: Address requesting the mint
            recipient: Address receiving the minted tokens
            amount: Amount of tokens to mint

        Returns:
            True if successful
        """
        if caller != self.owner:
            raise AccessDeniedError(f"Ownable: {caller!r} is not the owner")

        self._mint(recipient, amount)
        return True

    @transactional
    def transfer_ownership(self, caller, new_owner):
        """
        Transfers ownership, and with it the minting right, to new_owner.
        Only callable by the current owner.
        """
        if caller != self.owner:
            raise AccessDeniedError(f"Ownable: {caller!r} is not the owner")
        if new_owner is None:
            raise ConfigurationError("Ownable: new owner is the zero address")

        previous_owner = self.owner
        self.owner = new_owner
        self.emit("OwnershipTransferred", previous_owner=previous_owner, new_owner=new_owner)
        logger.info("%s ownership transferred from %s to %s", self.symbol, previous_owner, new_owner)
        return True
