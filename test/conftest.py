from dataclasses import dataclass
from typing import List

import pytest

from learning_token.onchain.learning_token import LearningToken
from learning_token.onchain.util import ONE_DAY, Address
from learning_token.utils.chain import LocalChain

TOKEN = 10**18


@dataclass
class Deployment:
    chain: LocalChain
    learning_token: LearningToken
    owner: Address
    alice: Address
    bob: Address
    carol: Address
    david: Address
    eva: Address

    @property
    def users(self) -> List[Address]:
        return [self.alice, self.bob, self.carol, self.david, self.eva]

    def tx(self, sender: Address):
        return self.chain.tx(sender)

    def fund(self, account: Address, amount: int) -> None:
        self.learning_token.transfer(self.tx(self.owner), account, amount)

    def fund_and_stake(self, account: Address, amount: int) -> None:
        self.fund(account, amount)
        self.learning_token.stake_tokens(self.tx(account), amount)

    def create_quest(
        self,
        description: str = "Build a DeFi protocol",
        reward_pool: int = 1000 * TOKEN,
        voting_duration: int = 7 * ONE_DAY,
        top_participants: int = 3,
    ) -> int:
        return self.learning_token.create_quest(
            self.tx(self.owner),
            description,
            reward_pool,
            voting_duration,
            top_participants,
        )

    def submit(self, account: Address, quest_id: int = 0) -> int:
        return self.learning_token.submit_solution(
            self.tx(account),
            quest_id,
            f"https://github.com/{account}/solution",
            f"https://{account}.example.com",
        )

    def held_balances(self) -> int:
        token = self.learning_token
        accounts = [self.owner, token.address] + self.users
        return sum(token.balance_of(a) for a in accounts)


def deploy() -> Deployment:
    chain = LocalChain()
    owner = chain.new_account("owner")
    return Deployment(
        chain=chain,
        learning_token=chain.deploy(owner),
        owner=owner,
        alice=chain.new_account("alice"),
        bob=chain.new_account("bob"),
        carol=chain.new_account("carol"),
        david=chain.new_account("david"),
        eva=chain.new_account("eva"),
    )


@pytest.fixture
def deployment() -> Deployment:
    return deploy()


@pytest.fixture
def deploy_fn():
    return deploy
