"""
The reward distributor.

Closes a quest once its voting period has passed and pays out its reward pool from the
custody account of the contract:

- VOTER_REWARD_PERCENTAGE of the pool goes to the voters, proportional to their recorded
  voting weight
- the rest is split evenly between the top_participants best ranked solutions; ranked
  solutions without any votes receive nothing

Integer division remainders are not paid out and remain in custody. The ranking sorts the
stored solutions of the quest, so solution ids refer to ranks after distribution.
"""
import logging
from typing import List

from learning_token.onchain.errors import (
    AlreadyDistributed,
    NoSolutions,
    NoVotesCast,
    VotingPeriodNotEnded,
)
from learning_token.onchain.events import EventLog, RewardsDistributed
from learning_token.onchain.ledger import Ledger
from learning_token.onchain.quests.quests import QuestStore
from learning_token.onchain.treasury.util import (
    RewardPlan,
    rank_solutions,
    split_reward_pool,
)
from learning_token.onchain.util import (
    Address,
    POSIXTime,
    Quest,
    QuestBallot,
    QuestId,
    Solution,
)

_LOGGER = logging.getLogger(__name__)


def plan_rewards(
    quest: Quest, ranked_solutions: List[Solution], ballot: QuestBallot
) -> RewardPlan:
    """
    Compute the payouts of a quest from its ranked solutions and ballot
    """
    voter_reward_pool, participant_reward_pool = split_reward_pool(quest.reward_pool)
    plan = RewardPlan(
        quest_id=quest.id,
        voter_reward_pool=voter_reward_pool,
        participant_reward_pool=participant_reward_pool,
        reward_per_participant=participant_reward_pool // quest.top_participants,
    )
    for solution in ranked_solutions[: quest.top_participants]:
        if solution.votes > 0:
            plan.participant_payouts.append(
                (solution.participant, plan.reward_per_participant)
            )
    if quest.total_voting_weight > 0:
        for voter in ballot.voters:
            reward = (
                voter_reward_pool * ballot.weights[voter] // quest.total_voting_weight
            )
            if reward > 0:
                plan.voter_payouts.append((voter, reward))
    return plan


class RewardDistributor:
    def __init__(
        self,
        quests: QuestStore,
        ledger: Ledger,
        custody: Address,
        events: EventLog,
    ):
        self._quests = quests
        self._ledger = ledger
        self._custody = custody
        self._events = events

    def preview_rewards(self, quest_id: QuestId) -> RewardPlan:
        quest = self._quests.get_quest(quest_id)
        ranked = list(self._quests.solutions(quest_id))
        rank_solutions(ranked)
        return plan_rewards(quest, ranked, self._quests.ballot(quest_id))

    def distribute_rewards(self, quest_id: QuestId, now: POSIXTime) -> RewardPlan:
        quest = self._quests.get_quest(quest_id)
        if now <= quest.end_time:
            raise VotingPeriodNotEnded(quest_id, quest.end_time)
        if quest.is_closed:
            raise AlreadyDistributed(quest_id)
        if quest.total_voting_weight == 0:
            raise NoVotesCast(quest_id)
        solutions = self._quests.solutions(quest_id)
        if not solutions:
            raise NoSolutions(quest_id)

        rank_solutions(solutions)
        plan = plan_rewards(quest, solutions, self._quests.ballot(quest_id))
        for participant, amount in plan.participant_payouts:
            self._ledger.transfer(self._custody, participant, amount)
        for voter, amount in plan.voter_payouts:
            self._ledger.transfer(self._custody, voter, amount)
        self._quests.close(quest_id)

        _LOGGER.info(
            f"Distributed rewards of quest {quest_id}: {plan.total_participant_rewards} "
            f"to {len(plan.participant_payouts)} participants, "
            f"{plan.total_voter_rewards} to {len(plan.voter_payouts)} voters"
        )
        self._events.emit(
            RewardsDistributed(
                quest_id, plan.total_participant_rewards, plan.voter_reward_pool
            )
        )
        return plan
