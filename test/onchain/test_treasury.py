import pytest
from hypothesis import given
from hypothesis import strategies as st

from learning_token.onchain.errors import (
    AlreadyDistributed,
    InsufficientBalance,
    NoSolutions,
    NoVotesCast,
    ReentrantCall,
    UnauthorizedAccount,
    VotingPeriodNotEnded,
)
from learning_token.onchain.events import EventLog, RewardsDistributed
from learning_token.onchain.ledger import Ledger
from learning_token.onchain.quests.quests import QuestStore
from learning_token.onchain.treasury.treasurer import RewardDistributor
from learning_token.onchain.treasury.util import rank_solutions, split_reward_pool
from learning_token.onchain.util import ONE_DAY, Solution

from conftest import TOKEN


def solutions_with_votes(votes):
    return [
        Solution(participant=f"p{i}", github_link="g", website_link="w", votes=v)
        for i, v in enumerate(votes)
    ]


@given(st.lists(st.integers(min_value=0, max_value=10**30)))
def test_rank_solutions_sorts_descending(votes):
    solutions = solutions_with_votes(votes)
    rank_solutions(solutions)
    ranked_votes = [s.votes for s in solutions]
    assert ranked_votes == sorted(votes, reverse=True)
    assert sorted(s.participant for s in solutions) == sorted(
        f"p{i}" for i in range(len(votes))
    )


def test_rank_solutions_tie_order():
    solutions = solutions_with_votes([1, 2, 1, 2])
    rank_solutions(solutions)
    # ties end up in exchange order, not in submission order
    assert [s.participant for s in solutions] == ["p1", "p3", "p2", "p0"]


def test_rank_solutions_handles_many_equal_votes():
    solutions = solutions_with_votes([7] * 500)
    rank_solutions(solutions)
    assert [s.participant for s in solutions] == [f"p{i}" for i in range(500)]


@given(st.integers(min_value=0, max_value=10**40))
def test_reward_split_is_exact(reward_pool):
    voter_pool, participant_pool = split_reward_pool(reward_pool)
    assert voter_pool == reward_pool * 10 // 100
    assert participant_pool == reward_pool - voter_pool


def setup_voted_quest(deployment, reward_pool=10000, top_participants=2):
    """
    Bob and carol submit, alice stakes and votes for bob
    """
    token = deployment.learning_token
    deployment.create_quest(reward_pool=reward_pool, top_participants=top_participants)
    deployment.submit(deployment.bob)
    deployment.submit(deployment.carol)
    deployment.fund_and_stake(deployment.alice, 1000 * TOKEN)
    deployment.chain.increase_time(ONE_DAY)
    return token.vote(deployment.tx(deployment.alice), 0, 0)


def test_distribute_rewards(deployment):
    token = deployment.learning_token
    weight = setup_voted_quest(deployment)
    assert weight == 1000 * TOKEN
    balances_before = {a: token.balance_of(a) for a in deployment.users}
    custody_before = token.balance_of(token.address)
    deployment.chain.increase_time(7 * ONE_DAY)

    plan = token.distribute_rewards(deployment.tx(deployment.owner), 0)

    received = {a: token.balance_of(a) - balances_before[a] for a in deployment.users}
    assert received[deployment.bob] == 9000 // 2
    assert received[deployment.alice] == 1000
    assert received[deployment.carol] == 0
    assert token.balance_of(token.address) == custody_before - 4500 - 1000
    assert token.events.last(RewardsDistributed) == RewardsDistributed(0, 4500, 1000)
    assert plan.participant_payouts == [(deployment.bob, 4500)]
    assert plan.voter_payouts == [(deployment.alice, 1000)]

    quest = token.get_quest(0)
    assert quest.is_closed is True
    assert quest.total_voting_weight == weight
    solutions = token.get_quest_solutions(0)
    assert solutions[0].votes > solutions[1].votes


def test_distribute_twice_fails(deployment):
    token = deployment.learning_token
    setup_voted_quest(deployment)
    deployment.chain.increase_time(7 * ONE_DAY)
    token.distribute_rewards(deployment.tx(deployment.owner), 0)
    with pytest.raises(AlreadyDistributed):
        token.distribute_rewards(deployment.tx(deployment.owner), 0)
    assert token.get_quest(0).is_closed is True


def test_distribute_requires_owner(deployment):
    token = deployment.learning_token
    setup_voted_quest(deployment)
    deployment.chain.increase_time(7 * ONE_DAY)
    with pytest.raises(UnauthorizedAccount):
        token.distribute_rewards(deployment.tx(deployment.alice), 0)
    assert token.get_quest(0).is_closed is False


def test_distribute_before_end_fails(deployment):
    token = deployment.learning_token
    setup_voted_quest(deployment)
    quest = token.get_quest(0)
    deployment.chain.set_next_timestamp(quest.end_time)
    with pytest.raises(VotingPeriodNotEnded):
        token.distribute_rewards(deployment.tx(deployment.owner), 0)
    deployment.chain.increase_time(1)
    token.distribute_rewards(deployment.tx(deployment.owner), 0)


def test_distribute_without_votes_fails(deployment):
    deployment.create_quest()
    deployment.submit(deployment.bob)
    deployment.chain.increase_time(8 * ONE_DAY)
    with pytest.raises(NoVotesCast):
        deployment.learning_token.distribute_rewards(deployment.tx(deployment.owner), 0)


def test_distribute_without_solutions_fails():
    events = EventLog()
    ledger = Ledger(events)
    quests = QuestStore(events)
    quest = quests.create_quest("quest", 100, ONE_DAY, 1, available_rewards=100, now=0)
    quest.total_voting_weight = 1
    distributor = RewardDistributor(quests, ledger, "custody", events)
    with pytest.raises(NoSolutions):
        distributor.distribute_rewards(quest.id, ONE_DAY + 1)


def test_unvoted_top_solutions_get_nothing(deployment):
    token = deployment.learning_token
    deployment.create_quest(reward_pool=10001, top_participants=3)
    for account in (deployment.bob, deployment.carol, deployment.david):
        deployment.submit(account)
    deployment.fund_and_stake(deployment.alice, 10)
    deployment.chain.increase_time(ONE_DAY)
    token.vote(deployment.tx(deployment.alice), 0, 2)
    custody_before = token.balance_of(token.address)
    deployment.chain.increase_time(7 * ONE_DAY)

    plan = token.distribute_rewards(deployment.tx(deployment.owner), 0)

    assert plan.voter_reward_pool == 1000
    assert plan.participant_reward_pool == 9001
    assert plan.reward_per_participant == 3000
    assert token.balance_of(deployment.david) == 3000
    assert token.balance_of(deployment.bob) == 0
    assert token.balance_of(deployment.carol) == 0
    assert token.events.last(RewardsDistributed) == RewardsDistributed(0, 3000, 1000)
    # the remainder of the participant pool stays in custody
    assert token.balance_of(token.address) == custody_before - 4000


def test_voter_rewards_are_proportional(deployment):
    token = deployment.learning_token
    deployment.create_quest(reward_pool=1000, top_participants=1)
    deployment.submit(deployment.david)
    deployment.submit(deployment.eva)
    deployment.fund_and_stake(deployment.alice, 1)
    deployment.fund_and_stake(deployment.bob, 2)
    deployment.fund_and_stake(deployment.carol, 1)
    deployment.chain.increase_time(ONE_DAY)
    token.vote(deployment.tx(deployment.alice), 0, 0)
    token.vote(deployment.tx(deployment.bob), 0, 1)
    token.vote(deployment.tx(deployment.carol), 0, 1)
    deployment.chain.increase_time(7 * ONE_DAY)

    plan = token.distribute_rewards(deployment.tx(deployment.owner), 0)

    # eva's solution ranks first with 3 of the 4 votes
    assert plan.participant_payouts == [(deployment.eva, 900)]
    assert plan.voter_payouts == [
        (deployment.alice, 25),
        (deployment.bob, 50),
        (deployment.carol, 25),
    ]
    assert token.get_quest_solution(0, 0).participant == deployment.eva


def test_preview_matches_distribution(deployment):
    token = deployment.learning_token
    setup_voted_quest(deployment, reward_pool=12345, top_participants=1)
    preview = token.preview_rewards(0)
    assert [s.participant for s in token.get_quest_solutions(0)] == [
        deployment.bob,
        deployment.carol,
    ]
    deployment.chain.increase_time(7 * ONE_DAY)
    assert token.distribute_rewards(deployment.tx(deployment.owner), 0) == preview


def test_failed_distribution_is_rolled_back(deployment):
    token = deployment.learning_token
    reward_pool = token.REWARD_POOL
    deployment.fund_and_stake(deployment.alice, 100 * TOKEN)
    for _ in range(2):
        deployment.create_quest(reward_pool=reward_pool, top_participants=1)
        reward_pool = 105 * TOKEN
    deployment.submit(deployment.bob, quest_id=0)
    deployment.submit(deployment.bob, quest_id=1)
    deployment.chain.increase_time(ONE_DAY)
    token.vote(deployment.tx(deployment.alice), 0, 0)
    token.vote(deployment.tx(deployment.alice), 1, 0)
    deployment.chain.increase_time(7 * ONE_DAY)
    token.distribute_rewards(deployment.tx(deployment.owner), 0)
    assert token.balance_of(token.address) == 100 * TOKEN

    bob_before = token.balance_of(deployment.bob)
    events_before = len(token.events)
    with pytest.raises(InsufficientBalance):
        token.distribute_rewards(deployment.tx(deployment.owner), 1)

    assert token.balance_of(deployment.bob) == bob_before
    assert token.balance_of(token.address) == 100 * TOKEN
    assert token.get_quest(1).is_closed is False
    assert len(token.events) == events_before


def test_distribution_is_guarded_against_reentrancy(deployment):
    token = deployment.learning_token
    setup_voted_quest(deployment)
    deployment.chain.increase_time(7 * ONE_DAY)

    def reenter(sender, receiver, amount):
        if sender == token.address:
            token.unstake_tokens(deployment.tx(deployment.alice))

    token.add_transfer_hook(reenter)
    with pytest.raises(ReentrantCall):
        token.distribute_rewards(deployment.tx(deployment.owner), 0)
    token.remove_transfer_hook(reenter)

    assert token.get_quest(0).is_closed is False
    assert token.get_stake(deployment.alice).amount == 1000 * TOKEN
    token.distribute_rewards(deployment.tx(deployment.owner), 0)
    assert token.get_quest(0).is_closed is True
