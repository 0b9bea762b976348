"""
Failure conditions of the LearningToken contract.

Every operation aborts with one of these errors and leaves the contract state untouched.
The arguments of an error are kept as attributes so that callers can inspect them.
"""
from learning_token.onchain.util import Address, POSIXTime, QuestId, SolutionId


class LearningTokenError(Exception):
    """Base class of all contract errors"""


class ValidationError(LearningTokenError):
    """Input is empty, zero or out of range"""


class StateError(LearningTokenError):
    """Operation is not allowed in the current state or at the current time"""


class AuthorizationError(LearningTokenError):
    """Caller is not allowed to perform the operation"""


class LedgerError(LearningTokenError):
    """Token balance or allowance movement is invalid"""


# Validation errors


class InvalidAmount(ValidationError):
    def __init__(self, amount: int):
        super().__init__(f"Invalid amount: {amount}")
        self.amount = amount


class EmptyDescription(ValidationError):
    def __init__(self):
        super().__init__("Quest description must not be empty")


class InvalidRewardPool(ValidationError):
    def __init__(self, reward_pool: int, available: int):
        super().__init__(
            f"Invalid reward pool {reward_pool}, available for rewards: {available}"
        )
        self.reward_pool = reward_pool
        self.available = available


class VotingDurationTooShort(ValidationError):
    def __init__(self, voting_duration: POSIXTime, minimum: POSIXTime):
        super().__init__(
            f"Voting duration {voting_duration}s is shorter than {minimum}s"
        )
        self.voting_duration = voting_duration
        self.minimum = minimum


class InvalidTopParticipants(ValidationError):
    def __init__(self, top_participants: int):
        super().__init__(f"Invalid number of top participants: {top_participants}")
        self.top_participants = top_participants


class InvalidSolutionId(ValidationError):
    def __init__(self, quest_id: QuestId, solution_id: SolutionId):
        super().__init__(f"Quest {quest_id} has no solution {solution_id}")
        self.quest_id = quest_id
        self.solution_id = solution_id


class InvalidVoterIndex(ValidationError):
    def __init__(self, quest_id: QuestId, index: int):
        super().__init__(f"Quest {quest_id} has no voter at index {index}")
        self.quest_id = quest_id
        self.index = index


class EmptyLink(ValidationError):
    def __init__(self):
        super().__init__("Solution links must not be empty")


class QuestNotFound(ValidationError):
    def __init__(self, quest_id: QuestId):
        super().__init__(f"Quest {quest_id} does not exist")
        self.quest_id = quest_id


class InvalidTimestamp(ValidationError):
    def __init__(self, timestamp: POSIXTime, latest: POSIXTime):
        super().__init__(
            f"Transaction time {timestamp} is earlier than the latest seen time {latest}"
        )
        self.timestamp = timestamp
        self.latest = latest


# State and timing errors


class QuestClosed(StateError):
    def __init__(self, quest_id: QuestId):
        super().__init__(f"Quest {quest_id} is closed")
        self.quest_id = quest_id


class SubmissionPeriodEnded(StateError):
    def __init__(self, quest_id: QuestId, end_time: POSIXTime):
        super().__init__(f"Submission period of quest {quest_id} ended at {end_time}")
        self.quest_id = quest_id
        self.end_time = end_time


class VotingPeriodEnded(StateError):
    def __init__(self, quest_id: QuestId, end_time: POSIXTime):
        super().__init__(f"Voting period of quest {quest_id} ended at {end_time}")
        self.quest_id = quest_id
        self.end_time = end_time


class VotingPeriodNotEnded(StateError):
    def __init__(self, quest_id: QuestId, end_time: POSIXTime):
        super().__init__(f"Voting period of quest {quest_id} ends at {end_time}")
        self.quest_id = quest_id
        self.end_time = end_time


class AlreadyDistributed(StateError):
    def __init__(self, quest_id: QuestId):
        super().__init__(f"Rewards of quest {quest_id} were already distributed")
        self.quest_id = quest_id


class MinimumDurationNotMet(StateError):
    def __init__(self, staker: Address, unlock_time: POSIXTime):
        super().__init__(
            f"Minimum staking period not met, stake of {staker} unlocks at {unlock_time}"
        )
        self.staker = staker
        self.unlock_time = unlock_time


class NoStake(StateError):
    def __init__(self, staker: Address):
        super().__init__(f"{staker} has no staked tokens to withdraw")
        self.staker = staker


class NoStakedTokens(StateError):
    def __init__(self, voter: Address):
        super().__init__(f"{voter} has no staked tokens and can not vote")
        self.voter = voter


class AlreadyVoted(StateError):
    def __init__(self, quest_id: QuestId, voter: Address):
        super().__init__(f"{voter} already voted on quest {quest_id}")
        self.quest_id = quest_id
        self.voter = voter


class DuplicateSubmission(StateError):
    def __init__(self, quest_id: QuestId, participant: Address):
        super().__init__(f"{participant} already submitted a solution to quest {quest_id}")
        self.quest_id = quest_id
        self.participant = participant


class NoVotesCast(StateError):
    def __init__(self, quest_id: QuestId):
        super().__init__(f"No votes were cast on quest {quest_id}")
        self.quest_id = quest_id


class NoSolutions(StateError):
    def __init__(self, quest_id: QuestId):
        super().__init__(f"No solutions were submitted to quest {quest_id}")
        self.quest_id = quest_id


class ReentrantCall(StateError):
    def __init__(self):
        super().__init__("Reentrant call")


# Authorization errors


class UnauthorizedAccount(AuthorizationError):
    def __init__(self, account: Address):
        super().__init__(f"{account} is not the owner")
        self.account = account


class InvalidOwner(AuthorizationError):
    def __init__(self, owner: Address):
        super().__init__(f"Invalid owner: {owner}")
        self.owner = owner


# Ledger errors


class InsufficientBalance(LedgerError):
    def __init__(self, sender: Address, balance: int, needed: int):
        super().__init__(f"{sender} has a balance of {balance}, needs {needed}")
        self.sender = sender
        self.balance = balance
        self.needed = needed


class InsufficientAllowance(LedgerError):
    def __init__(self, spender: Address, allowance: int, needed: int):
        super().__init__(f"{spender} has an allowance of {allowance}, needs {needed}")
        self.spender = spender
        self.allowance = allowance
        self.needed = needed


class InvalidReceiver(LedgerError):
    def __init__(self, receiver: Address):
        super().__init__(f"Invalid receiver: {receiver}")
        self.receiver = receiver


class InvalidSender(LedgerError):
    def __init__(self, sender: Address):
        super().__init__(f"Invalid sender: {sender}")
        self.sender = sender


class InvalidApprover(LedgerError):
    def __init__(self, approver: Address):
        super().__init__(f"Invalid approver: {approver}")
        self.approver = approver


class InvalidSpender(LedgerError):
    def __init__(self, spender: Address):
        super().__init__(f"Invalid spender: {spender}")
        self.spender = spender
