"""
Chain host for the DAOStake model.

This module simulates the environment the contracts run in: it holds the
current block number, the registry of deployed contract addresses, the event
log and the all-or-nothing transaction semantics. A failed call restores the
state of every registered contract, as a reverted transaction would.
"""

import copy
import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List

from stake_errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """A log record emitted by a contract during a transaction."""
    name: str
    block_number: int
    emitter: str
    fields: Dict = field(default_factory=dict)


class Chain:
    """
    Simulates the host chain: block production, address registry, events
    and transaction rollback.
    """

    def __init__(self, block_number=0):
        self.block_number = block_number

        # Mapping of contract addresses to contract objects
        self.contracts = {}

        # Log of every event emitted by a successful transaction
        self.events: List[Event] = []

        # Depth of nested transactions; only the outermost one snapshots
        self._depth = 0

    def mine(self, blocks=1):
        """Advances the chain by the given number of blocks."""
        if blocks < 0:
            raise ValueError("Cannot mine a negative number of blocks")
        self.block_number += blocks
        return self.block_number

    def advance_to(self, block_number):
        """Advances the chain to the given block number."""
        if block_number < self.block_number:
            raise ValueError(f"Block {block_number} is in the past (current {self.block_number})")
        self.block_number = block_number
        return self.block_number

    def register(self, contract):
        """Registers a deployed contract under its address."""
        if contract.address in self.contracts:
            raise ConfigurationError(f"Address {contract.address} is already in use")
        self.contracts[contract.address] = contract
        logger.debug("Deployed %s at %s", type(contract).__name__, contract.address)

    def is_contract(self, address):
        """Returns True if a contract is deployed at the address."""
        return address in self.contracts

    def contract_at(self, address):
        """Returns the contract deployed at the address."""
        try:
            return self.contracts[address]
        except KeyError:
            raise ConfigurationError(f"No contract deployed at {address!r}") from None

    def emit(self, emitter, name, **fields):
        """Appends an event to the log."""
        event = Event(name=name, block_number=self.block_number, emitter=emitter, fields=fields)
        self.events.append(event)
        return event

    def events_named(self, name):
        """Returns every logged event with the given name."""
        return [event for event in self.events if event.name == name]

    @contextmanager
    def transaction(self):
        """
        Runs the enclosed block atomically.

        The outermost transaction snapshots every registered contract and the
        event log; if an exception escapes, all of them are restored before
        the exception propagates. Nested transactions join the outer one.
        """
        outermost = self._depth == 0
        snapshot = self._snapshot() if outermost else None
        self._depth += 1
        try:
            yield self
        except Exception as exc:
            if outermost:
                self._restore(snapshot)
                logger.warning("Transaction reverted at block %d: %s", self.block_number, exc)
            raise
        finally:
            self._depth -= 1

    def _snapshot(self):
        states = {address: contract.snapshot() for address, contract in self.contracts.items()}
        return states, len(self.events)

    def _restore(self, snapshot):
        states, event_count = snapshot
        for address, state in states.items():
            self.contracts[address].restore(state)
        del self.events[event_count:]


class Contract:
    """
    Base class for contracts deployed on a Chain.

    Subclasses list their mutable storage in STATE_FIELDS; those attributes
    are what a reverted transaction restores.
    """

    STATE_FIELDS = ()

    def __init__(self, chain, address):
        self.chain = chain
        self.address = address
        chain.register(self)

    def snapshot(self):
        """Returns a deep copy of the contract storage."""
        return {name: copy.deepcopy(getattr(self, name)) for name in self.STATE_FIELDS}

    def restore(self, state):
        """Restores storage captured by snapshot()."""
        for name, value in state.items():
            setattr(self, name, value)

    def emit(self, name, **fields):
        return self.chain.emit(self.address, name, **fields)


def transactional(method):
    """Runs a contract method inside a chain transaction."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self.chain.transaction():
            return method(self, *args, **kwargs)

    return wrapper
