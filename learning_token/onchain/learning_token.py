"""
The LearningToken contract.

Combines the LHT token ledger, the stake registry, the quest store, the voting engine and
the reward distributor behind a single operation surface.

Every state changing operation takes the TxContext of the caller as first argument and runs
as a transaction: if it fails, all state it touched (balances, stakes, quests, ownership and
emitted events) is put back and the error is raised to the caller. Operations that move
tokens in and out of custody on behalf of stakers or quests are additionally guarded against
reentrancy, and creating quests and distributing rewards is restricted to the owner.

Before it runs, an operation copies the state containers it modifies. The event log is
always one of them and is copied by its length only, while the ledger, the stake registry
and the quest store are deep copied, so the cost of an operation grows with the size of the
containers it touches. An operation entered from a transfer hook also adds its containers
to the copies of every enclosing transaction, which then undoes the nested changes too.

Read accessors return frozen copies of the contract records.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Tuple

from gelidum import freeze

from learning_token.onchain.access import Ownable, ReentrancyGuard
from learning_token.onchain.errors import InvalidTimestamp, InvalidVoterIndex
from learning_token.onchain.events import EventLog
from learning_token.onchain.ledger import Ledger, TransferHook
from learning_token.onchain.quests.quests import QuestStore
from learning_token.onchain.staking.staking import StakeRegistry
from learning_token.onchain.staking.staking_util import Stake
from learning_token.onchain.tally.tally import VotingEngine
from learning_token.onchain.treasury.treasurer import RewardDistributor
from learning_token.onchain.treasury.util import RewardPlan
from learning_token.onchain import util
from learning_token.onchain.util import (
    Address,
    POSIXTime,
    Quest,
    QuestId,
    Solution,
    SolutionId,
    StateContainer,
    TxContext,
)

_LOGGER = logging.getLogger(__name__)


class LearningToken:
    NAME = util.NAME
    SYMBOL = util.SYMBOL
    DECIMALS = util.DECIMALS
    INITIAL_SUPPLY = util.INITIAL_SUPPLY
    REWARD_POOL = util.REWARD_POOL
    MIN_STAKE_DURATION = util.MIN_STAKE_DURATION
    VOTER_REWARD_PERCENTAGE = util.VOTER_REWARD_PERCENTAGE

    def __init__(self, deployer: Address, address: Address, deployed_at: POSIXTime = 0):
        self.address = address
        self._latest_timestamp = deployed_at
        self._events = EventLog()
        self._ownable = Ownable(deployer, self._events)
        self._ledger = Ledger(self._events)
        self._stakes = StakeRegistry(self._ledger, address, self._events)
        self._quests = QuestStore(self._events)
        self._voting = VotingEngine(self._quests, self._stakes, self._events)
        self._treasurer = RewardDistributor(
            self._quests, self._ledger, address, self._events
        )
        self._reentrancy_guard = ReentrancyGuard()
        self._savepoints: List[Dict[StateContainer, Any]] = []

        self._ledger.mint(deployer, self.INITIAL_SUPPLY - self.REWARD_POOL)
        self._ledger.mint(address, self.REWARD_POOL)
        _LOGGER.info(f"Deployed {self.NAME} at {address} by {deployer}")

    @contextmanager
    def _transaction(self, ctx: TxContext, *touched: StateContainer):
        if ctx.timestamp < self._latest_timestamp:
            raise InvalidTimestamp(ctx.timestamp, self._latest_timestamp)
        self._latest_timestamp = ctx.timestamp
        containers = (self._events,) + touched
        # enclosing transactions must be able to undo what a nested one changes
        for outer in self._savepoints:
            for container in containers:
                if container not in outer:
                    outer[container] = container.snapshot()
        savepoint = {container: container.snapshot() for container in containers}
        self._savepoints.append(savepoint)
        try:
            yield
        except Exception as e:
            for container, snapshot in savepoint.items():
                container.restore(snapshot)
            _LOGGER.debug(f"Reverted transaction of {ctx.sender}: {e!r}")
            raise
        finally:
            self._savepoints.pop()

    @property
    def events(self) -> EventLog:
        return self._events

    def add_transfer_hook(self, hook: TransferHook) -> None:
        self._ledger.add_transfer_hook(hook)

    def remove_transfer_hook(self, hook: TransferHook) -> None:
        self._ledger.remove_transfer_hook(hook)

    ############################################################################
    #                                 Token                                    #
    ############################################################################

    def total_supply(self) -> int:
        return self._ledger.total_supply()

    def balance_of(self, account: Address) -> int:
        return self._ledger.balance_of(account)

    def allowance(self, owner: Address, spender: Address) -> int:
        return self._ledger.allowance(owner, spender)

    def transfer(self, ctx: TxContext, receiver: Address, amount: int) -> bool:
        with self._transaction(ctx, self._ledger):
            self._ledger.transfer(ctx.sender, receiver, amount)
        return True

    def approve(self, ctx: TxContext, spender: Address, amount: int) -> bool:
        with self._transaction(ctx, self._ledger):
            self._ledger.approve(ctx.sender, spender, amount)
        return True

    def transfer_from(
        self, ctx: TxContext, sender: Address, receiver: Address, amount: int
    ) -> bool:
        with self._transaction(ctx, self._ledger):
            self._ledger.transfer_from(ctx.sender, sender, receiver, amount)
        return True

    def burn(self, ctx: TxContext, amount: int) -> None:
        with self._transaction(ctx, self._ledger):
            self._ledger.burn(ctx.sender, amount)

    def burn_from(self, ctx: TxContext, account: Address, amount: int) -> None:
        with self._transaction(ctx, self._ledger):
            self._ledger.burn_from(ctx.sender, account, amount)

    ############################################################################
    #                               Ownership                                  #
    ############################################################################

    def owner(self) -> Address:
        return self._ownable.owner

    def transfer_ownership(self, ctx: TxContext, new_owner: Address) -> None:
        with self._transaction(ctx, self._ownable):
            self._ownable.transfer_ownership(ctx.sender, new_owner)

    def renounce_ownership(self, ctx: TxContext) -> None:
        with self._transaction(ctx, self._ownable):
            self._ownable.renounce_ownership(ctx.sender)

    ############################################################################
    #                                Staking                                   #
    ############################################################################

    def stake_tokens(self, ctx: TxContext, amount: int) -> None:
        with self._transaction(
            ctx, self._ledger, self._stakes
        ), self._reentrancy_guard.non_reentrant():
            self._stakes.stake_tokens(ctx.sender, amount, ctx.timestamp)

    def unstake_tokens(self, ctx: TxContext) -> int:
        with self._transaction(
            ctx, self._ledger, self._stakes
        ), self._reentrancy_guard.non_reentrant():
            return self._stakes.unstake_tokens(ctx.sender, ctx.timestamp)

    def get_stake(self, staker: Address) -> Stake:
        return freeze(self._stakes.get_stake(staker), on_freeze="copy")

    ############################################################################
    #                                 Quests                                   #
    ############################################################################

    def create_quest(
        self,
        ctx: TxContext,
        description: str,
        reward_pool: int,
        voting_duration: POSIXTime,
        top_participants: int,
    ) -> QuestId:
        with self._transaction(ctx, self._quests):
            self._ownable.check_owner(ctx.sender)
            quest = self._quests.create_quest(
                description,
                reward_pool,
                voting_duration,
                top_participants,
                available_rewards=self._ledger.balance_of(self.address),
                now=ctx.timestamp,
            )
        return quest.id

    def submit_solution(
        self, ctx: TxContext, quest_id: QuestId, github_link: str, website_link: str
    ) -> SolutionId:
        with self._transaction(ctx, self._quests):
            return self._quests.submit_solution(
                quest_id, ctx.sender, github_link, website_link, ctx.timestamp
            )

    def get_quest_id_counter(self) -> QuestId:
        return self._quests.quest_id_counter

    def get_quest(self, quest_id: QuestId) -> Quest:
        return freeze(self._quests.get_quest(quest_id), on_freeze="copy")

    def get_quest_solutions(self, quest_id: QuestId) -> Tuple[Solution, ...]:
        return freeze(self._quests.solutions(quest_id), on_freeze="copy")

    def get_quest_solution(self, quest_id: QuestId, solution_id: SolutionId) -> Solution:
        return freeze(
            self._quests.get_solution(quest_id, solution_id), on_freeze="copy"
        )

    def get_quest_voters(self, quest_id: QuestId) -> Tuple[Address, ...]:
        return tuple(self._quests.ballot(quest_id).voters)

    def get_quest_voter(self, quest_id: QuestId, index: int) -> Address:
        voters = self._quests.ballot(quest_id).voters
        if not isinstance(index, int) or not 0 <= index < len(voters):
            raise InvalidVoterIndex(quest_id, index)
        return voters[index]

    ############################################################################
    #                                 Voting                                   #
    ############################################################################

    def vote(self, ctx: TxContext, quest_id: QuestId, solution_id: SolutionId) -> int:
        with self._transaction(ctx, self._quests):
            return self._voting.vote(quest_id, ctx.sender, solution_id, ctx.timestamp)

    def get_user_voting_weight(self, quest_id: QuestId, voter: Address) -> int:
        return self._voting.user_voting_weight(quest_id, voter)

    def voting_power(self, voter: Address, at: Optional[POSIXTime] = None) -> int:
        """
        Weight a vote of the address would have at the given time,
        by default at the latest time seen by the contract
        """
        if at is None:
            at = self._latest_timestamp
        return self._voting.voting_power(voter, at)

    ############################################################################
    #                                Rewards                                   #
    ############################################################################

    def distribute_rewards(self, ctx: TxContext, quest_id: QuestId) -> RewardPlan:
        with self._transaction(
            ctx, self._quests, self._ledger
        ), self._reentrancy_guard.non_reentrant():
            self._ownable.check_owner(ctx.sender)
            return self._treasurer.distribute_rewards(quest_id, ctx.timestamp)

    def preview_rewards(self, quest_id: QuestId) -> RewardPlan:
        return self._treasurer.preview_rewards(quest_id)
