"""
The quest store.

Quests are kept in an append-only arena indexed by their id. Ids are handed out from a
counter starting at 0 and are never reused. Every quest has its own append-only list of
solutions, where the index of a solution is its id, and a ballot tracking who voted.

A quest accepts solutions and votes until its end time has passed or it was closed by the
reward distribution. Closing is terminal.
"""
import logging
from typing import List

from learning_token.onchain.errors import (
    DuplicateSubmission,
    EmptyDescription,
    EmptyLink,
    InvalidRewardPool,
    InvalidSolutionId,
    InvalidTopParticipants,
    QuestClosed,
    QuestNotFound,
    SubmissionPeriodEnded,
    VotingDurationTooShort,
)
from learning_token.onchain.events import EventLog, QuestCreated, SolutionSubmitted
from learning_token.onchain.ledger import check_amount
from learning_token.onchain.util import (
    INITIAL_QUEST_ID,
    MIN_VOTING_DURATION,
    Address,
    POSIXTime,
    Quest,
    QuestBallot,
    QuestId,
    Solution,
    SolutionId,
    StateContainer,
    increment_quest_id,
)

_LOGGER = logging.getLogger(__name__)


class QuestStore(StateContainer):
    STATE_FIELDS = ("_quests", "_solutions", "_ballots", "_quest_id_counter")

    def __init__(self, events: EventLog):
        self._quests: List[Quest] = []
        self._solutions: List[List[Solution]] = []
        self._ballots: List[QuestBallot] = []
        self._quest_id_counter: QuestId = INITIAL_QUEST_ID
        self._events = events

    @property
    def quest_id_counter(self) -> QuestId:
        return self._quest_id_counter

    def get_quest(self, quest_id: QuestId) -> Quest:
        if not isinstance(quest_id, int) or not 0 <= quest_id < len(self._quests):
            raise QuestNotFound(quest_id)
        return self._quests[quest_id]

    def solutions(self, quest_id: QuestId) -> List[Solution]:
        self.get_quest(quest_id)
        return self._solutions[quest_id]

    def get_solution(self, quest_id: QuestId, solution_id: SolutionId) -> Solution:
        solutions = self.solutions(quest_id)
        if not isinstance(solution_id, int) or not 0 <= solution_id < len(solutions):
            raise InvalidSolutionId(quest_id, solution_id)
        return solutions[solution_id]

    def ballot(self, quest_id: QuestId) -> QuestBallot:
        self.get_quest(quest_id)
        return self._ballots[quest_id]

    def create_quest(
        self,
        description: str,
        reward_pool: int,
        voting_duration: POSIXTime,
        top_participants: int,
        available_rewards: int,
        now: POSIXTime,
    ) -> Quest:
        if not description:
            raise EmptyDescription()
        check_amount(reward_pool)
        if reward_pool == 0 or reward_pool > available_rewards:
            raise InvalidRewardPool(reward_pool, available_rewards)
        if voting_duration < MIN_VOTING_DURATION:
            raise VotingDurationTooShort(voting_duration, MIN_VOTING_DURATION)
        if top_participants <= 0:
            raise InvalidTopParticipants(top_participants)

        quest_id = self._quest_id_counter
        quest = Quest(
            id=quest_id,
            description=description,
            reward_pool=reward_pool,
            voting_duration=voting_duration,
            end_time=now + voting_duration,
            top_participants=top_participants,
        )
        self._quests.append(quest)
        self._solutions.append([])
        self._ballots.append(QuestBallot())
        self._quest_id_counter = increment_quest_id(quest_id)

        _LOGGER.info(
            f"Created quest {quest_id} with reward pool {reward_pool}, open until {quest.end_time}"
        )
        self._events.emit(
            QuestCreated(
                quest_id, description, reward_pool, voting_duration, top_participants
            )
        )
        return quest

    def submit_solution(
        self,
        quest_id: QuestId,
        participant: Address,
        github_link: str,
        website_link: str,
        now: POSIXTime,
    ) -> SolutionId:
        if not github_link or not website_link:
            raise EmptyLink()
        quest = self.get_quest(quest_id)
        if quest.is_closed:
            raise QuestClosed(quest_id)
        if now > quest.end_time:
            raise SubmissionPeriodEnded(quest_id, quest.end_time)
        solutions = self._solutions[quest_id]
        for solution in solutions:
            if solution.participant == participant:
                raise DuplicateSubmission(quest_id, participant)

        solution_id = len(solutions)
        solutions.append(
            Solution(
                participant=participant,
                github_link=github_link,
                website_link=website_link,
                votes=0,
                submission_time=now,
            )
        )
        _LOGGER.debug(f"{participant} submitted solution {solution_id} to quest {quest_id}")
        self._events.emit(
            SolutionSubmitted(quest_id, solution_id, participant, github_link, website_link)
        )
        return solution_id

    def record_vote(
        self, quest_id: QuestId, voter: Address, solution_id: SolutionId, weight: int
    ) -> None:
        """
        Add the weight of a voter to a solution and to the quest total
        """
        quest = self.get_quest(quest_id)
        solution = self.get_solution(quest_id, solution_id)
        ballot = self._ballots[quest_id]
        solution.votes += weight
        quest.total_voting_weight += weight
        ballot.weights[voter] = weight
        ballot.voters.append(voter)

    def close(self, quest_id: QuestId) -> None:
        self.get_quest(quest_id).is_closed = True
