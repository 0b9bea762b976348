"""
Simulate a complete quest lifecycle on a local chain.

The owner funds every user, creates a quest, the voters stake, the solvers submit
solutions, every voter votes (voter i for solution i modulo the number of solutions) and
once the voting period has passed the owner distributes the rewards.
"""
import logging
from typing import Dict, Sequence

import fire

from learning_token.offchain.util import format_token, parse_token
from learning_token.onchain.util import ONE_DAY
from learning_token.utils.chain import LocalChain

_LOGGER = logging.getLogger(__name__)


def main(
    description: str = "Build a Cross-chain DEX",
    reward: str = "50000",
    voting_duration_days: int = 7,
    top_participants: int = 3,
    distribution: str = "10000",
    stake: str = "5000",
    vote_after_days: int = 2,
    voters: Sequence[str] = ("alice", "bob", "carol"),
    solvers: Sequence[str] = ("david", "eva", "bob"),
    verbose: bool = False,
) -> Dict[str, str]:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    assert (
        0 <= vote_after_days <= voting_duration_days
    ), "Votes must happen while voting is open"
    chain = LocalChain()
    owner = chain.new_account("owner")
    learning_token = chain.deploy(owner)

    users = list(dict.fromkeys(list(voters) + list(solvers)))
    for name in users:
        learning_token.transfer(
            chain.tx(owner), chain.new_account(name), parse_token(distribution)
        )
        _LOGGER.info(f"Distributed {distribution} LHT to {name}")

    quest_id = learning_token.create_quest(
        chain.tx(owner),
        description,
        parse_token(reward),
        voting_duration_days * ONE_DAY,
        top_participants,
    )
    _LOGGER.info(f"Quest {quest_id} created: {description}, reward pool {reward} LHT")

    for name in voters:
        learning_token.stake_tokens(chain.tx(chain.new_account(name)), parse_token(stake))
        _LOGGER.info(f"{name} staked {stake} LHT")

    for name in solvers:
        learning_token.submit_solution(
            chain.tx(chain.new_account(name)),
            quest_id,
            f"github.com/{name}/solution",
            f"{name}-solution.com",
        )
        _LOGGER.info(f"{name} submitted a solution")

    chain.increase_time(vote_after_days * ONE_DAY)
    for i, name in enumerate(voters):
        solution_id = i % len(solvers)
        weight = learning_token.vote(
            chain.tx(chain.new_account(name)), quest_id, solution_id
        )
        _LOGGER.info(
            f"{name} voted for {solvers[solution_id]} with weight {format_token(weight)}"
        )

    # voting is open up to and including the end time
    chain.increase_time((voting_duration_days - vote_after_days) * ONE_DAY + 1)
    balances_before = {
        name: learning_token.balance_of(chain.new_account(name)) for name in users
    }
    _LOGGER.info("Owner distributing rewards")
    learning_token.distribute_rewards(chain.tx(owner), quest_id)

    rewards = {}
    for name in users:
        reward_received = (
            learning_token.balance_of(chain.new_account(name)) - balances_before[name]
        )
        rewards[name] = format_token(reward_received)
        _LOGGER.info(f"{name} received {rewards[name]} LHT")
    return rewards


def fire_main():
    fire.Fire(main)


if __name__ == "__main__":
    fire_main()
