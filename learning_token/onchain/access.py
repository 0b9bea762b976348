"""
Access control of the contract.

Ownable keeps the single owner allowed to run privileged operations (creating quests and
distributing rewards). ReentrancyGuard rejects nested entry into guarded operations of the
same contract instance while one of them is still running.
"""
import logging
from contextlib import contextmanager

from learning_token.onchain.errors import (
    InvalidOwner,
    ReentrantCall,
    UnauthorizedAccount,
)
from learning_token.onchain.events import EventLog, OwnershipTransferred
from learning_token.onchain.util import NULL_ADDRESS, Address, StateContainer

_LOGGER = logging.getLogger(__name__)


class Ownable(StateContainer):
    STATE_FIELDS = ("_owner",)

    def __init__(self, initial_owner: Address, events: EventLog):
        self._events = events
        self._owner = NULL_ADDRESS
        if initial_owner == NULL_ADDRESS:
            raise InvalidOwner(initial_owner)
        self._set_owner(initial_owner)

    @property
    def owner(self) -> Address:
        return self._owner

    def check_owner(self, account: Address) -> None:
        if account != self._owner:
            raise UnauthorizedAccount(account)

    def transfer_ownership(self, caller: Address, new_owner: Address) -> None:
        self.check_owner(caller)
        if new_owner == NULL_ADDRESS:
            raise InvalidOwner(new_owner)
        self._set_owner(new_owner)

    def renounce_ownership(self, caller: Address) -> None:
        self.check_owner(caller)
        self._set_owner(NULL_ADDRESS)

    def _set_owner(self, new_owner: Address) -> None:
        previous_owner = self._owner
        self._owner = new_owner
        _LOGGER.info(f"Ownership transferred from {previous_owner} to {new_owner}")
        self._events.emit(OwnershipTransferred(previous_owner, new_owner))


class ReentrancyGuard:
    def __init__(self):
        self._entered = False

    @contextmanager
    def non_reentrant(self):
        if self._entered:
            raise ReentrantCall()
        self._entered = True
        try:
            yield
        finally:
            self._entered = False
