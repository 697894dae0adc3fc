"""
Rating aggregator - running (count, sum) cells per (assignment, criterion).

Cells hold only counts and sums. Nothing here ever sees a student id, so no
individual response can be recovered from stored state.

Every fold is one atomic upsert with an $inc expression. Reading a cell,
adding in Python and writing it back would lose increments under
concurrent submissions.
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from facultyfeedback.config import logger, MIN_RATING_VALUE, MAX_RATING_VALUE
from facultyfeedback.models.rating import AggregateCell, MeanResult

NO_DATA = None


class RatingAggregator:
    def __init__(self, db):
        self.collection = db.aggregated_ratings

    async def fold(self, assignment_id: str, criterion_id: str, value: int) -> AggregateCell:
        """Add one value to a cell, creating it on first use."""
        if isinstance(value, bool) or not isinstance(value, int) \
                or not (MIN_RATING_VALUE <= value <= MAX_RATING_VALUE):
            raise ValueError(f"Rating value out of range: {value!r}")

        key = {"assignment_id": assignment_id, "criterion_id": criterion_id}
        update = {"$inc": {"response_count": 1, "value_sum": value}}
        try:
            doc = await self.collection.find_one_and_update(
                key, update,
                upsert=True,
                projection={"_id": 0},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # Two first folds raced on insert; the loser's increment
            # applies to the cell the winner created.
            doc = await self.collection.find_one_and_update(
                key, update,
                upsert=True,
                projection={"_id": 0},
                return_document=ReturnDocument.AFTER,
            )
        return AggregateCell(**doc)

    async def submit_all(self, assignment_id: str, ratings: Mapping[str, int]) -> List[AggregateCell]:
        """Fold one already-validated submission into its cells."""
        cells = []
        for criterion_id, value in ratings.items():
            cells.append(await self.fold(assignment_id, criterion_id, value))
        logger.info(f"Folded {len(cells)} ratings into assignment {assignment_id}")
        return cells

    async def get_cell(self, assignment_id: str, criterion_id: str) -> Optional[AggregateCell]:
        doc = await self.collection.find_one(
            {"assignment_id": assignment_id, "criterion_id": criterion_id},
            {"_id": 0}
        )
        return AggregateCell(**doc) if doc else None

    async def mean_of(self, assignment_id: str, criterion_id: str) -> Union[MeanResult, None]:
        """Mean and response count, or NO_DATA when nobody has rated yet."""
        cell = await self.get_cell(assignment_id, criterion_id)
        if cell is None or cell.response_count == 0:
            return NO_DATA
        return MeanResult(value=cell.mean, response_count=cell.response_count)

    async def cells_for(self, assignment_ids: Iterable[str]) -> Dict[Tuple[str, str], AggregateCell]:
        """All cells for a batch of assignments, keyed by (assignment_id, criterion_id)."""
        assignment_ids = list(assignment_ids)
        if not assignment_ids:
            return {}
        docs = await self.collection.find(
            {"assignment_id": {"$in": assignment_ids}},
            {"_id": 0}
        ).to_list(None)
        return {(d["assignment_id"], d["criterion_id"]): AggregateCell(**d) for d in docs}
