from dataclasses import dataclass
from typing import List, Type, TypeVar

from learning_token.onchain.util import (
    Address,
    POSIXTime,
    QuestId,
    SolutionId,
    StateContainer,
)


@dataclass(frozen=True)
class Event:
    """
    Base of all events emitted by the contract
    """

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class Transfer(Event):
    sender: Address
    receiver: Address
    value: int


@dataclass(frozen=True)
class Approval(Event):
    owner: Address
    spender: Address
    value: int


@dataclass(frozen=True)
class OwnershipTransferred(Event):
    previous_owner: Address
    new_owner: Address


@dataclass(frozen=True)
class TokensStaked(Event):
    staker: Address
    amount: int


@dataclass(frozen=True)
class TokensUnstaked(Event):
    staker: Address
    amount: int


@dataclass(frozen=True)
class QuestCreated(Event):
    quest_id: QuestId
    description: str
    reward_pool: int
    voting_duration: POSIXTime
    top_participants: int


@dataclass(frozen=True)
class SolutionSubmitted(Event):
    quest_id: QuestId
    solution_id: SolutionId
    participant: Address
    github_link: str
    website_link: str


@dataclass(frozen=True)
class VoteCast(Event):
    quest_id: QuestId
    voter: Address
    solution_id: SolutionId
    weight: int


@dataclass(frozen=True)
class RewardsDistributed(Event):
    quest_id: QuestId
    participant_rewards: int
    voter_rewards: int


E = TypeVar("E", bound=Event)


class EventLog(StateContainer):
    """
    Ordered record of emitted events.
    Events are append-only, so a snapshot is the length of the log.
    """

    def __init__(self):
        self._events: List[Event] = []

    def emit(self, event: Event) -> None:
        self._events.append(event)

    def snapshot(self) -> int:
        return len(self._events)

    def restore(self, snapshot: int) -> None:
        del self._events[snapshot:]

    def __len__(self) -> int:
        return len(self._events)

    def of_type(self, event_type: Type[E]) -> List[E]:
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self, event_type: Type[E]) -> E:
        matching = self.of_type(event_type)
        if not matching:
            raise LookupError(f"No {event_type.__name__} event emitted")
        return matching[-1]
