from dataclasses import dataclass, field

from ..core.evaluation import AnswerValue, Criticality
from ..core.rubric import RubricDefinition


@dataclass
class ScoreResult:
    total: float = 0.0
    per_section: dict[str, float] = field(default_factory=dict)


class ScoringEngine:
    """Weighted rubric scoring with the critical-failure override."""

    EXCELLENT_THRESHOLD = 90
    GOOD_THRESHOLD = 80
    FAIR_THRESHOLD = 70

    def __init__(self, rubric: RubricDefinition):
        self.rubric = rubric

    def score(self, answers: dict[str, AnswerValue], has_critical_failure: bool) -> ScoreResult:
        """Computes per-section points and the total.

        A section scores ``weight * positive / applicable``, where N/A answers are not
        applicable. A section answered entirely with N/A counts as fully met; a section
        with no answers at all scores 0. Any critical failure zeroes everything.
        """
        if has_critical_failure:
            return ScoreResult(0.0, {section.id: 0.0 for section in self.rubric.sections})

        per_section: dict[str, float] = {}
        for section in self.rubric.sections:
            given = [answers[q.id] for q in section.questions if q.id in answers]
            applicable = [answer for answer in given if answer is not AnswerValue.NOT_APPLICABLE]
            positive = sum(1 for answer in applicable if answer is AnswerValue.YES)

            if applicable:
                ratio = positive / len(applicable)
            elif given:
                ratio = 1.0
            else:
                ratio = 0.0
            per_section[section.id] = ratio * section.weight

        total = min(max(sum(per_section.values()), 0.0), 100.0)
        return ScoreResult(total, per_section)

    @classmethod
    def classify(cls, total: float, has_critical_failure: bool) -> Criticality:
        if has_critical_failure:
            return Criticality.CRITICAL
        if total >= cls.EXCELLENT_THRESHOLD:
            return Criticality.EXCELLENT
        if total >= cls.GOOD_THRESHOLD:
            return Criticality.GOOD
        if total >= cls.FAIR_THRESHOLD:
            return Criticality.FAIR
        return Criticality.CRITICAL
