from dataclasses import dataclass

from learning_token.onchain.util import (
    MIN_STAKE_DURATION,
    ONE_DAY,
    POSIXTime,
)


@dataclass
class Stake:
    """
    Tokens locked by a staker.
    start_time is kept across top-ups, last_update_time tracks the latest deposit.
    """

    amount: int = 0
    start_time: POSIXTime = 0
    last_update_time: POSIXTime = 0

    @property
    def is_active(self) -> bool:
        return self.amount > 0


def unlock_time(stake: Stake) -> POSIXTime:
    return stake.start_time + MIN_STAKE_DURATION


def voting_weight(stake: Stake, now: POSIXTime) -> int:
    """
    Voting weight of a stake at the given time.
    Grows with the staked amount and with the number of days since the stake was opened,
    fractions of a token-day are truncated.
    """
    return stake.amount * (now - stake.start_time) // ONE_DAY
