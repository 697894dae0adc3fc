"""Running aggregate cells."""
import asyncio

import pytest

from conftest import interleave
from facultyfeedback.services.aggregator import NO_DATA, RatingAggregator


async def test_first_fold_creates_cell(db):
    cell = await RatingAggregator(db).fold("A1", "KNOWLEDGE", 4)
    assert (cell.response_count, cell.value_sum, cell.mean) == (1, 4, 4.0)


async def test_folds_accumulate(db):
    aggregator = RatingAggregator(db)
    await aggregator.fold("A1", "PUNCTUALITY", 4)
    cell = await aggregator.fold("A1", "PUNCTUALITY", 2)
    assert (cell.response_count, cell.value_sum, cell.mean) == (2, 6, 3.0)


async def test_mean_of_without_responses_is_no_data(db):
    assert await RatingAggregator(db).mean_of("A1", "CLARITY") is NO_DATA


async def test_mean_of_reports_count(db):
    aggregator = RatingAggregator(db)
    for value in (5, 4, 4):
        await aggregator.fold("A1", "CLARITY", value)
    result = await aggregator.mean_of("A1", "CLARITY")
    assert result.response_count == 3
    assert result.value == pytest.approx(13 / 3)


@pytest.mark.parametrize("bad_value", [0, 6, True, 3.5])
async def test_fold_rejects_out_of_range(db, bad_value):
    with pytest.raises(ValueError):
        await RatingAggregator(db).fold("A1", "CLARITY", bad_value)
    assert await db.aggregated_ratings.count_documents({}) == 0


async def test_fold_is_a_single_atomic_increment(db):
    aggregator = RatingAggregator(db)
    collection = interleave(aggregator)
    await aggregator.fold("A1", "SUPPORT", 3)

    assert collection.call_names() == ["find_one_and_update"]
    _, args, kwargs = collection.calls[0]
    assert args == (
        {"assignment_id": "A1", "criterion_id": "SUPPORT"},
        {"$inc": {"response_count": 1, "value_sum": 3}},
    )
    assert kwargs["upsert"] is True


async def test_concurrent_folds_lose_nothing(db):
    aggregator = RatingAggregator(db)
    interleave(aggregator)
    values = [(i % 5) + 1 for i in range(40)]
    await asyncio.gather(*[aggregator.fold("A1", "ENGAGEMENT", v) for v in values])
    cell = await aggregator.get_cell("A1", "ENGAGEMENT")
    assert cell.response_count == len(values)
    assert cell.value_sum == sum(values)
    assert await db.aggregated_ratings.count_documents({}) == 1


async def test_cells_for_batches_assignments(db):
    aggregator = RatingAggregator(db)
    await aggregator.submit_all("A1", {"KNOWLEDGE": 5, "CLARITY": 3})
    await aggregator.fold("A2", "KNOWLEDGE", 1)
    await aggregator.fold("A9", "KNOWLEDGE", 1)
    cells = await aggregator.cells_for(["A1", "A2"])
    assert set(cells) == {("A1", "KNOWLEDGE"), ("A1", "CLARITY"), ("A2", "KNOWLEDGE")}
    assert await aggregator.cells_for([]) == {}
