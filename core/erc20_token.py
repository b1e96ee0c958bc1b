"""
ERC20 Token Model for the DAOStake system.

This module simulates a standard ERC20 token contract. Each staking pool
tracks one such token (the LP token users deposit), and the YAO reward token
builds on it. Handles balances, allowances and transfers.
"""

import logging

import safe_math
from chain_host import Contract, transactional
from stake_errors import TokenTransferError

logger = logging.getLogger(__name__)


class ERC20Token(Contract):
    """
    Simulates an ERC20 token contract.
    """

    STATE_FIELDS = ("total_supply", "balances", "allowances")

    def __init__(self, chain, address, name, symbol, decimals=18,
                 initial_holder=None, initial_supply=0):
        super().__init__(chain, address)

        # Token metadata
        self.name = name
        self.symbol = symbol
        self.decimals = decimals

        # Total token supply
        self.total_supply = 0

        # Mapping of addresses to token balances
        self.balances = {}

        # Mapping of (owner, spender) to approved amounts
        self.allowances = {}

        if initial_supply:
            self._mint(initial_holder, initial_supply)

    def balance_of(self, account):
        """Returns the token balance of the given account."""
        return self.balances.get(account, 0)

    def allowance(self, owner, spender):
        """Returns the amount spender may still transfer on behalf of owner."""
        return self.allowances.get((owner, spender), 0)

    @transactional
    def approve(self, owner, spender, amount):
        """
        Sets the amount spender may transfer on behalf of owner.

        Args:
            owner: Address granting the allowance
            spender: Address allowed to spend
            amount: Allowance amount

        Returns:
            True if successful
        """
        _require_amount(amount)
        self.allowances[(owner, spender)] = amount
        self.emit("Approval", owner=owner, spender=spender, amount=amount)
        return True

    @transactional
    def transfer(self, sender, recipient, amount):
        """
        Transfers tokens from sender to recipient.

        Args:
            sender: Address sending the tokens
            recipient: Address receiving the tokens
            amount: Amount of tokens to transfer

        Returns:
            True if successful
        """
        self._transfer(sender, recipient, amount)
        return True

    @transactional
    def transfer_from(self, spender, sender, recipient, amount):
        """
        Transfers tokens from sender to recipient using spender's allowance.

        Args:
            spender: Address spending the allowance
            sender: Address the tokens are taken from
            recipient: Address receiving the tokens
            amount: Amount of tokens to transfer

        Returns:
            True if successful
        """
        _require_amount(amount)
        allowed = self.allowance(sender, spender)
        if allowed < amount:
            raise TokenTransferError(
                f"{self.symbol}: transfer amount {amount} exceeds allowance {allowed}")

        self._transfer(sender, recipient, amount)
        self.allowances[(sender, spender)] = allowed - amount
        return True

    def _transfer(self, sender, recipient, amount):
        _require_amount(amount)
        sender_balance = self.balances.get(sender, 0)

        if sender_balance < amount:
            raise TokenTransferError(
                f"{self.symbol}: transfer amount {amount} exceeds balance {sender_balance}")

        # Update balances
        self.balances[sender] = sender_balance - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

        self.emit("Transfer", sender=sender, recipient=recipient, amount=amount)

    def _mint(self, recipient, amount):
        _require_amount(amount)
        if recipient is None:
            raise TokenTransferError(f"{self.symbol}: mint to the zero address")

        self.balances[recipient] = self.balances.get(recipient, 0) + amount
        self.total_supply += amount

        self.emit("Transfer", sender=None, recipient=recipient, amount=amount)


def _require_amount(amount):
    safe_math.require_amount(amount, TokenTransferError)
