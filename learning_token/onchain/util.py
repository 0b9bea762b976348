from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

Address = str
QuestId = int
SolutionId = int
POSIXTime = int

NULL_ADDRESS: Address = "0x" + "00" * 20

ONE_DAY: POSIXTime = 24 * 60 * 60

NAME = "LearningToken"
SYMBOL = "LHT"
DECIMALS = 18

INITIAL_SUPPLY = 1_000_000 * 10**DECIMALS
# Half of the supply is kept by the contract to fund quest rewards
REWARD_POOL = INITIAL_SUPPLY // 2
MIN_STAKE_DURATION: POSIXTime = ONE_DAY
MIN_VOTING_DURATION: POSIXTime = ONE_DAY
VOTER_REWARD_PERCENTAGE = 10

MAX_UINT256 = 2**256 - 1

INITIAL_QUEST_ID: QuestId = 0


def increment_quest_id(id: QuestId) -> QuestId:
    return id + 1


@dataclass(frozen=True)
class TxContext:
    """
    Caller identity and block time of the transaction executing an operation
    """

    sender: Address
    timestamp: POSIXTime


@dataclass
class Quest:
    """
    A time-boxed competition with a reward pool
    """

    id: QuestId
    description: str
    reward_pool: int
    voting_duration: POSIXTime
    end_time: POSIXTime
    top_participants: int
    is_closed: bool = False
    total_voting_weight: int = 0


@dataclass
class Solution:
    """
    A solution submitted to a quest, accumulating voting weight
    """

    participant: Address
    github_link: str
    website_link: str
    votes: int = 0
    submission_time: POSIXTime = 0


@dataclass
class QuestBallot:
    """
    Tracks who voted on a quest and with which weight.
    The voter list preserves voting order and is used for the voter payout.
    """

    weights: Dict[Address, int] = field(default_factory=dict)
    voters: List[Address] = field(default_factory=list)

    def has_voted(self, voter: Address) -> bool:
        return voter in self.weights


class StateContainer:
    """
    Owner of a piece of contract state that can be captured before a transaction
    and put back when the transaction fails.
    """

    STATE_FIELDS: Tuple[str, ...] = ()

    def snapshot(self) -> Any:
        return {name: deepcopy(getattr(self, name)) for name in self.STATE_FIELDS}

    def restore(self, snapshot: Any) -> None:
        for name, value in snapshot.items():
            setattr(self, name, value)
