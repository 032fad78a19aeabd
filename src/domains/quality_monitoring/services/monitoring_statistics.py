from typing import List

import pandas as pd

from utils.logging.logging_manager import LogManager

from ..core.evaluation import AnswerValue, Criticality, Evaluation
from ..core.monitoring_summary import (
    GroupSummary,
    MonitoringSummary,
    PeriodSummary,
    QuestionFailure,
    ReasonCount,
)
from ..core.rubric import RubricDefinition

NO_SUPERVISOR = "Sem Supervisor"


class MonitoringStatistics:
    """
    Computes dashboard indicators (averages, rates, rankings, monthly evolution)
    from a list of evaluations.
    """

    def __init__(self, rubric: RubricDefinition):
        self.rubric = rubric
        self.logger = LogManager.get_instance().get_logger("MonitoringStatistics")

    def summarize(self, evaluations: List[Evaluation]) -> MonitoringSummary:
        if not evaluations:
            self.logger.info("No evaluations to summarize")
            return MonitoringSummary(
                criticality_distribution={label.value: 0 for label in Criticality},
                section_attainment={section.id: 0.0 for section in self.rubric.sections},
            )

        df = self._to_dataframe(evaluations)
        summary = MonitoringSummary(
            total_evaluations=len(df),
            average_score=self._round(df["final_score"].mean()),
            critical_failure_rate=self._round(df["critical_failure"].mean() * 100),
            conversion_rate=self._round(df["sale_effective"].mean() * 100),
            not_applicable_rate=self._not_applicable_rate(evaluations),
            section_attainment=self._section_attainment(evaluations),
            criticality_distribution=self._criticality_distribution(df),
            no_sale_reasons=self._no_sale_reasons(df),
            question_failures=self._question_failures(evaluations),
            consultants=self._group(df, "consultant_name"),
            supervisors=self._group(df, "supervisor_name"),
            monthly_evolution=self._monthly_evolution(df),
        )
        self.logger.info(
            f"Summarized {summary.total_evaluations} evaluations (average {summary.average_score:.2f})"
        )
        return summary

    @staticmethod
    def _to_dataframe(evaluations: List[Evaluation]) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    "consultant_name": evaluation.consultant_name,
                    "supervisor_name": evaluation.supervisor_name or NO_SUPERVISOR,
                    "final_score": evaluation.final_score,
                    "critical_failure": evaluation.has_critical_failure,
                    "sale_effective": evaluation.sale_effective,
                    "no_sale_reason": evaluation.no_sale_reason,
                    "criticality": evaluation.criticality.value,
                    "period": f"{evaluation.contact_date.year:04d}-{evaluation.contact_date.month:02d}",
                }
                for evaluation in evaluations
            ]
        )

    @staticmethod
    def _round(value: float) -> float:
        return round(float(value), 2)

    def _section_attainment(self, evaluations: List[Evaluation]) -> dict:
        scores = pd.DataFrame([evaluation.section_scores for evaluation in evaluations])
        attainment = {}
        for section in self.rubric.sections:
            if section.weight <= 0 or section.id not in scores:
                attainment[section.id] = 0.0
                continue
            mean_points = scores[section.id].fillna(0).mean()
            attainment[section.id] = self._round(mean_points / section.weight * 100)
        return attainment

    @staticmethod
    def _criticality_distribution(df: pd.DataFrame) -> dict:
        counts = df["criticality"].value_counts()
        return {label.value: int(counts.get(label.value, 0)) for label in Criticality}

    @staticmethod
    def _no_sale_reasons(df: pd.DataFrame) -> List[ReasonCount]:
        reasons = df.loc[~df["sale_effective"] & df["no_sale_reason"].notna(), "no_sale_reason"]
        counts = reasons.value_counts()
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [ReasonCount(reason=reason, count=int(count)) for reason, count in ranked]

    def _question_failures(self, evaluations: List[Evaluation]) -> List[QuestionFailure]:
        failures = []
        for section, question in self.rubric.iter_questions():
            count = sum(1 for evaluation in evaluations if evaluation.answers.get(question.id) is AnswerValue.NO)
            if count:
                failures.append(
                    QuestionFailure(
                        question_id=question.id,
                        text=question.text,
                        section_title=section.title,
                        count=count,
                    )
                )
        # Stable sort keeps rubric order among equal counts.
        return sorted(failures, key=lambda failure: failure.count, reverse=True)

    def _not_applicable_rate(self, evaluations: List[Evaluation]) -> float:
        answers = pd.Series([answer.value for evaluation in evaluations for answer in evaluation.answers.values()])
        if answers.empty:
            return 0.0
        return self._round((answers == AnswerValue.NOT_APPLICABLE.value).mean() * 100)

    def _group(self, df: pd.DataFrame, column: str) -> List[GroupSummary]:
        grouped = df.groupby(column)["final_score"].agg(["count", "mean"]).reset_index()
        grouped = grouped.sort_values(["mean", column], ascending=[False, True])
        return [
            GroupSummary(name=row[column], count=int(row["count"]), average_score=self._round(row["mean"]))
            for _, row in grouped.iterrows()
        ]

    def _monthly_evolution(self, df: pd.DataFrame) -> List[PeriodSummary]:
        grouped = df.groupby("period")["final_score"].agg(["count", "mean"]).reset_index()
        return [
            PeriodSummary(period=row["period"], count=int(row["count"]), average_score=self._round(row["mean"]))
            for _, row in grouped.sort_values("period").iterrows()
        ]
