from dataclasses import dataclass, field
from typing import List, Tuple

from learning_token.onchain.util import (
    VOTER_REWARD_PERCENTAGE,
    Address,
    QuestId,
    Solution,
)


def split_reward_pool(reward_pool: int) -> Tuple[int, int]:
    """
    Split a reward pool into the voter share and the participant share
    """
    voter_reward_pool = reward_pool * VOTER_REWARD_PERCENTAGE // 100
    return voter_reward_pool, reward_pool - voter_reward_pool


def partition(solutions: List[Solution], left: int, right: int) -> int:
    # rightmost element is the pivot, solutions with at least as many votes move left
    pivot_votes = solutions[right].votes
    i = left - 1
    for j in range(left, right):
        if solutions[j].votes >= pivot_votes:
            i += 1
            solutions[i], solutions[j] = solutions[j], solutions[i]
    solutions[i + 1], solutions[right] = solutions[right], solutions[i + 1]
    return i + 1


def rank_solutions(solutions: List[Solution]) -> None:
    """
    Sort solutions in place by votes, descending.

    Partition-exchange sort around the rightmost element. The order of solutions with
    equal votes follows from the exchanges and not from the submission order.
    """
    pending = [(0, len(solutions) - 1)]
    while pending:
        left, right = pending.pop()
        if left >= right:
            continue
        pivot_index = partition(solutions, left, right)
        pending.append((left, pivot_index - 1))
        pending.append((pivot_index + 1, right))


@dataclass
class RewardPlan:
    """
    Payouts of a quest as decided by its ranking and ballot
    """

    quest_id: QuestId
    voter_reward_pool: int
    participant_reward_pool: int
    reward_per_participant: int
    participant_payouts: List[Tuple[Address, int]] = field(default_factory=list)
    voter_payouts: List[Tuple[Address, int]] = field(default_factory=list)

    @property
    def total_participant_rewards(self) -> int:
        return sum(amount for _, amount in self.participant_payouts)

    @property
    def total_voter_rewards(self) -> int:
        return sum(amount for _, amount in self.voter_payouts)
