import asyncio

import pytest

from baselume.constants import LedgerEvents
from baselume.utils.ledger_exceptions import (
    DuplicateSubmission, InvalidAddress, InvalidGameId, InvalidScore, Unauthorized
)

from conftest import ALICE, BOB, DAY, OWNER, START_DAY, STRANGER


async def test_record_score_updates_lifetime_and_daily_totals(ledger):
    receipt = await ledger.record_score(ALICE, 8, "g1", caller=OWNER)

    assert receipt.player == ALICE
    assert receipt.score == 8
    assert receipt.day == START_DAY
    assert receipt.game_id == "g1"
    assert await ledger.get_total_score(ALICE) == 8
    assert await ledger.get_daily_score(ALICE) == 8
    assert await ledger.get_daily_score(ALICE, START_DAY) == 8
    assert await ledger.get_total_players() == 1


async def test_conservation_across_many_submissions(ledger, manual_clock):
    scores = [3, 10, 1, 7, 7]
    for index, score in enumerate(scores):
        await ledger.record_score(ALICE, score, f"game-{index}", caller=OWNER)
        manual_clock.advance(DAY // 3)

    assert await ledger.get_total_score(ALICE) == sum(scores)
    entries = await ledger.get_player_entries(ALICE)
    assert [entry.score for entry in entries] == scores
    daily_totals = [await ledger.get_daily_score(ALICE, day) for day in {e.day for e in entries}]
    assert len(daily_totals) > 1
    assert sum(daily_totals) == sum(scores)


async def test_daily_partition_respects_day_boundary(ledger, manual_clock):
    manual_clock.set(START_DAY * DAY + DAY - 1)
    await ledger.record_score(ALICE, 4, "late", caller=OWNER)
    manual_clock.advance(1)
    await ledger.record_score(ALICE, 6, "early", caller=OWNER)

    assert await ledger.get_daily_score(ALICE, START_DAY) == 4
    assert await ledger.get_daily_score(ALICE, START_DAY + 1) == 6
    assert await ledger.get_daily_score(ALICE) == 6
    assert await ledger.get_total_score(ALICE) == 10
    assert [e.game_id for e in await ledger.get_player_entries(ALICE, day=START_DAY)] == ["late"]


async def test_addresses_are_case_insensitive(ledger):
    await ledger.record_score(ALICE.upper().replace('0X', '0x'), 5, "g1", caller=OWNER)
    assert await ledger.get_total_score(ALICE) == 5
    assert await ledger.get_total_players() == 1


@pytest.mark.parametrize("score", [0, 11, -1, 5.0, "7", True, None])
async def test_invalid_score_is_rejected_without_side_effects(ledger, score):
    with pytest.raises(InvalidScore):
        await ledger.record_score(ALICE, score, "g3", caller=OWNER)

    assert await ledger.get_total_score(ALICE) == 0
    assert await ledger.get_total_players() == 0


async def test_score_eleven_leaves_existing_total_unchanged(ledger):
    await ledger.record_score(ALICE, 8, "g1", caller=OWNER)

    with pytest.raises(InvalidScore):
        await ledger.record_score(ALICE, 11, "g3", caller=OWNER)

    assert await ledger.get_total_score(ALICE) == 8


@pytest.mark.parametrize("game_id", ["", "x" * 101, None, 42])
async def test_invalid_game_id_is_rejected(ledger, game_id):
    with pytest.raises(InvalidGameId):
        await ledger.record_score(ALICE, 5, game_id, caller=OWNER)
    assert await ledger.get_total_players() == 0


async def test_game_id_of_max_length_is_accepted(ledger):
    await ledger.record_score(ALICE, 5, "x" * 100, caller=OWNER)
    assert await ledger.get_total_score(ALICE) == 5


async def test_invalid_player_address_is_rejected(ledger):
    with pytest.raises(InvalidAddress):
        await ledger.record_score("alice", 5, "g1", caller=OWNER)


async def test_duplicate_game_for_same_player_is_rejected(ledger):
    await ledger.record_score(ALICE, 6, "g1", caller=OWNER)

    with pytest.raises(DuplicateSubmission):
        await ledger.record_score(ALICE, 9, "g1", caller=OWNER)

    assert await ledger.get_total_score(ALICE) == 6
    assert len(await ledger.get_player_entries(ALICE)) == 1


async def test_same_game_id_for_different_players_is_allowed(ledger):
    await ledger.record_score(ALICE, 6, "room-1", caller=OWNER)
    await ledger.record_score(BOB, 4, "room-1", caller=OWNER)

    assert await ledger.get_total_score(ALICE) == 6
    assert await ledger.get_total_score(BOB) == 4


async def test_non_submitter_cannot_record(ledger):
    with pytest.raises(Unauthorized):
        await ledger.record_score(ALICE, 5, "g1", caller=STRANGER)
    with pytest.raises(Unauthorized):
        await ledger.record_score(ALICE, 5, "g1", caller="not-an-address")
    assert await ledger.get_total_score(ALICE) == 0


async def test_owner_can_grant_submitter_role(ledger):
    assert not await ledger.is_submitter(STRANGER)

    with pytest.raises(Unauthorized):
        await ledger.add_submitter(STRANGER, caller=STRANGER)

    await ledger.add_submitter(STRANGER, caller=OWNER)
    await ledger.add_submitter(STRANGER, caller=OWNER)

    assert await ledger.is_submitter(STRANGER)
    await ledger.record_score(ALICE, 5, "g1", caller=STRANGER)
    assert await ledger.get_total_score(ALICE) == 5


async def test_reads_default_to_zero(ledger):
    assert await ledger.get_total_score(BOB) == 0
    assert await ledger.get_daily_score(BOB, 12) == 0
    assert await ledger.get_total_score("garbage") == 0
    assert await ledger.get_daily_score("garbage") == 0
    assert await ledger.get_player_entries("garbage") == []
    assert await ledger.get_total_players() == 0


async def test_current_day_follows_clock(ledger, manual_clock):
    assert ledger.get_current_day() == START_DAY
    manual_clock.advance(DAY)
    assert ledger.get_current_day() == START_DAY + 1


async def test_score_recorded_listener(ledger):
    events = []
    ledger.add_listener(LedgerEvents.SCORE_RECORDED, lambda **payload: events.append(payload))

    receipt = await ledger.record_score(ALICE, 7, "g1", caller=OWNER)

    assert events == [{
        'player': ALICE,
        'score': 7,
        'timestamp': receipt.timestamp,
        'game_id': "g1",
    }]


async def test_failing_listener_does_not_break_write(ledger):
    def broken(**payload):
        raise RuntimeError("listener down")

    ledger.add_listener(LedgerEvents.SCORE_RECORDED, broken)
    await ledger.record_score(ALICE, 7, "g1", caller=OWNER)
    assert await ledger.get_total_score(ALICE) == 7

    ledger.remove_listener(LedgerEvents.SCORE_RECORDED, broken)
    await ledger.record_score(ALICE, 1, "g2", caller=OWNER)
    assert await ledger.get_total_score(ALICE) == 8


async def test_rejected_listener_not_called_on_failure(ledger):
    events = []
    ledger.add_listener(LedgerEvents.SCORE_RECORDED, lambda **payload: events.append(payload))

    with pytest.raises(InvalidScore):
        await ledger.record_score(ALICE, 0, "g1", caller=OWNER)

    assert events == []


async def test_concurrent_retries_count_once(ledger):
    results = await asyncio.gather(
        *(ledger.record_score(ALICE, 4, "retried", caller=OWNER) for _ in range(5)),
        return_exceptions=True
    )

    accepted = [r for r in results if not isinstance(r, Exception)]
    rejected = [r for r in results if isinstance(r, DuplicateSubmission)]
    assert len(accepted) == 1
    assert len(rejected) == 4
    assert await ledger.get_total_score(ALICE) == 4


async def test_concurrent_distinct_games_all_count(ledger):
    await asyncio.gather(
        *(ledger.record_score(ALICE, 2, f"g{i}", caller=OWNER) for i in range(10))
    )
    assert await ledger.get_total_score(ALICE) == 20
    assert len(await ledger.get_player_entries(ALICE)) == 10
