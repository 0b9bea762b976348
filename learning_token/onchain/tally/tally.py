"""
The voting engine.

Stakers vote once per quest for a single solution. The weight of a vote is derived from
the stake of the voter at the time of voting, see staking_util.voting_weight. It is added
to the votes of the solution and to the total voting weight of the quest and recorded on
the ballot of the quest, which later decides the voter payout.

A vote whose weight truncates to 0 still counts as the single vote of the caller.
"""
import logging

from learning_token.onchain.errors import (
    AlreadyVoted,
    InvalidSolutionId,
    NoStakedTokens,
    QuestClosed,
    VotingPeriodEnded,
)
from learning_token.onchain.events import EventLog, VoteCast
from learning_token.onchain.quests.quests import QuestStore
from learning_token.onchain.staking.staking import StakeRegistry
from learning_token.onchain.staking.staking_util import voting_weight
from learning_token.onchain.util import Address, POSIXTime, QuestId, SolutionId

_LOGGER = logging.getLogger(__name__)


class VotingEngine:
    def __init__(self, quests: QuestStore, stakes: StakeRegistry, events: EventLog):
        self._quests = quests
        self._stakes = stakes
        self._events = events

    def voting_power(self, voter: Address, now: POSIXTime) -> int:
        return voting_weight(self._stakes.get_stake(voter), now)

    def user_voting_weight(self, quest_id: QuestId, voter: Address) -> int:
        return self._quests.ballot(quest_id).weights.get(voter, 0)

    def vote(
        self,
        quest_id: QuestId,
        voter: Address,
        solution_id: SolutionId,
        now: POSIXTime,
    ) -> int:
        quest = self._quests.get_quest(quest_id)
        if quest.is_closed:
            raise QuestClosed(quest_id)
        if now > quest.end_time:
            raise VotingPeriodEnded(quest_id, quest.end_time)
        if self._quests.ballot(quest_id).has_voted(voter):
            raise AlreadyVoted(quest_id, voter)
        solution_count = len(self._quests.solutions(quest_id))
        if not isinstance(solution_id, int) or not 0 <= solution_id < solution_count:
            raise InvalidSolutionId(quest_id, solution_id)
        stake = self._stakes.get_stake(voter)
        if not stake.is_active:
            raise NoStakedTokens(voter)

        weight = voting_weight(stake, now)
        self._quests.record_vote(quest_id, voter, solution_id, weight)
        _LOGGER.debug(
            f"{voter} voted for solution {solution_id} of quest {quest_id} with weight {weight}"
        )
        self._events.emit(VoteCast(quest_id, voter, solution_id, weight))
        return weight
