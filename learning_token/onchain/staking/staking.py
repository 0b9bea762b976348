"""
The stake registry.

Stakers lock LHT in the custody account of the contract to gain voting power on quests.
Each address holds at most one stake. Depositing again tops up the existing stake without
moving its start time, so voting weight keeps accruing from the first deposit.

A stake can only be withdrawn as a whole and only once the minimum staking duration has
passed since its start.
"""
import logging
from copy import copy
from typing import Dict

from learning_token.onchain.errors import (
    InsufficientBalance,
    InvalidAmount,
    MinimumDurationNotMet,
    NoStake,
)
from learning_token.onchain.events import EventLog, TokensStaked, TokensUnstaked
from learning_token.onchain.ledger import Ledger, check_amount
from learning_token.onchain.staking.staking_util import (
    Stake,
    unlock_time,
)
from learning_token.onchain.util import Address, POSIXTime, StateContainer

_LOGGER = logging.getLogger(__name__)


class StakeRegistry(StateContainer):
    STATE_FIELDS = ("_stakes",)

    def __init__(self, ledger: Ledger, custody: Address, events: EventLog):
        self._stakes: Dict[Address, Stake] = {}
        self._ledger = ledger
        self._custody = custody
        self._events = events

    def get_stake(self, staker: Address) -> Stake:
        return self._stakes.get(staker, Stake())

    def stake_tokens(self, staker: Address, amount: int, now: POSIXTime) -> Stake:
        check_amount(amount)
        if amount == 0:
            raise InvalidAmount(amount)
        balance = self._ledger.balance_of(staker)
        if balance < amount:
            raise InsufficientBalance(staker, balance, amount)

        self._ledger.transfer(staker, self._custody, amount)

        previous = self._stakes.get(staker)
        if previous is None or not previous.is_active:
            stake = Stake(amount=amount, start_time=now, last_update_time=now)
            _LOGGER.debug(f"{staker} opened a stake of {amount}")
        else:
            stake = copy(previous)
            stake.amount += amount
            stake.last_update_time = now
            _LOGGER.debug(f"{staker} topped up stake by {amount} to {stake.amount}")
        self._stakes[staker] = stake
        self._events.emit(TokensStaked(staker, amount))
        return stake

    def unstake_tokens(self, staker: Address, now: POSIXTime) -> int:
        stake = self.get_stake(staker)
        if not stake.is_active:
            raise NoStake(staker)
        if now < unlock_time(stake):
            raise MinimumDurationNotMet(staker, unlock_time(stake))

        amount = stake.amount
        del self._stakes[staker]
        self._ledger.transfer(self._custody, staker, amount)
        _LOGGER.debug(f"{staker} withdrew stake of {amount}")
        self._events.emit(TokensUnstaked(staker, amount))
        return amount
