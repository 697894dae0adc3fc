"""
Rating catalog - the fixed, ordered set of evaluation criteria.
Loaded once per instance and read-only afterwards.
"""

from typing import Dict, List, Optional, Sequence

from facultyfeedback.config import (
    logger, RATING_CRITERIA_COUNT, MIN_RATING_VALUE, MAX_RATING_VALUE,
)
from facultyfeedback.errors import CatalogMisconfiguredError, ValidationError
from facultyfeedback.models.rating import RatingCriterion, RatingInput

DEFAULT_CRITERIA = [
    ("PUNCTUALITY", "Rate the faculty's punctuality."),
    ("KNOWLEDGE", "Rate the faculty's subject knowledge."),
    ("ENGAGEMENT", "Rate the faculty's engagement with students."),
    ("CLARITY", "Rate the clarity of the faculty's explanations."),
    ("SUPPORT", "Rate the support provided by the faculty outside of class."),
]


async def seed_default_criteria(db):
    """Replace the catalog with the five default criteria."""
    await db.rating_criteria.delete_many({})
    docs = [
        {
            "criterion_id": criterion_id,
            "question_text": question_text,
            "order": index + 1,
            "is_active": True,
        }
        for index, (criterion_id, question_text) in enumerate(DEFAULT_CRITERIA)
    ]
    await db.rating_criteria.insert_many(docs)
    logger.info(f"Seeded {len(docs)} rating criteria")
    return [RatingCriterion(**d) for d in docs]


class RatingCatalog:
    def __init__(self, db):
        self.db = db
        self._criteria: Optional[List[RatingCriterion]] = None

    async def list_active_criteria(self) -> List[RatingCriterion]:
        """Active criteria in display order. Exactly RATING_CRITERIA_COUNT or an error."""
        if self._criteria is None:
            docs = await self.db.rating_criteria.find(
                {"is_active": True}, {"_id": 0}
            ).sort("order", 1).to_list(100)
            criteria = [RatingCriterion(**d) for d in docs]
            if len(criteria) != RATING_CRITERIA_COUNT:
                logger.error(
                    f"Rating catalog holds {len(criteria)} active criteria, expected {RATING_CRITERIA_COUNT}"
                )
                raise CatalogMisconfiguredError(len(criteria), RATING_CRITERIA_COUNT)
            self._criteria = criteria
        return list(self._criteria)

    async def question_text_of(self, criterion_id: str) -> Optional[str]:
        for criterion in await self.list_active_criteria():
            if criterion.criterion_id == criterion_id:
                return criterion.question_text
        return None

    async def validate_ratings(self, ratings: Sequence[RatingInput]) -> Dict[str, int]:
        """
        All-or-nothing check of a submission against the full catalog.
        Returns {criterion_id: value} or raises ValidationError naming every bad field.
        """
        criteria = await self.list_active_criteria()
        expected_ids = {c.criterion_id for c in criteria}

        fields = []
        problems = []
        seen = {}

        if len(ratings) != RATING_CRITERIA_COUNT:
            fields.append("ratings")
            problems.append(
                f"Exactly {RATING_CRITERIA_COUNT} ratings are required, got {len(ratings)}"
            )

        for idx, rating in enumerate(ratings):
            if rating.criterion_id not in expected_ids:
                fields.append(f"ratings[{idx}].criterion_id")
                problems.append(f"Unknown rating criterion: {rating.criterion_id}")
            elif rating.criterion_id in seen:
                fields.append(f"ratings[{idx}].criterion_id")
                problems.append(f"Duplicate rating criterion: {rating.criterion_id}")
            else:
                seen[rating.criterion_id] = rating.value

            if isinstance(rating.value, bool) or not (MIN_RATING_VALUE <= rating.value <= MAX_RATING_VALUE):
                fields.append(f"ratings[{idx}].value")
                problems.append(
                    f"Rating value must be between {MIN_RATING_VALUE} and {MAX_RATING_VALUE}"
                )

        missing = sorted(expected_ids - set(seen))
        if missing and "ratings" not in fields:
            fields.append("ratings")
            problems.append(f"Missing ratings for: {', '.join(missing)}")

        if problems:
            raise ValidationError(problems[0] if len(problems) == 1 else "; ".join(problems), fields)

        return seen
