import itertools
from datetime import datetime, timedelta

from utils.logging.logging_manager import LogManager

from ..core.action_item import ActionItem, ActionItemKind, ActionItemPriority, Responsible
from ..core.evaluation import AnswerValue, Evaluation
from ..core.rubric import RubricDefinition

LOW_SCORE_THRESHOLD = 80
SECTION_ATTAINMENT_THRESHOLD = 60
REPEATED_FAILURE_WINDOW = 3
RECURRENT_REASON_MIN_PRIOR = 2

STANDARD_DEADLINE = timedelta(days=7)
FOLLOW_UP_DEADLINE = timedelta(days=1)


class ActionItemIdGenerator:
    """Issues ids of the form ``auto-<trigger>-<evaluation id>-<n>``.

    The counter is shared by every trigger, so two items built for the same
    evaluation in the same instant still get distinct ids.
    """

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)

    def next_id(self, trigger: str, evaluation_id: str) -> str:
        return f"auto-{trigger}-{evaluation_id}-{next(self._counter)}"


class ActionPlanEngine:
    """Derives development-plan items (PDIs) from one evaluation and the consultant's history.

    Triggers are independent; one evaluation may yield several items:

    - ``score``: final score below 80.
    - ``section``: one per section attaining less than 60% of its weight.
    - ``critical``: critical failure, 24h supervised follow-up.
    - ``repeat``: a question answered "Não" on the current evaluation and on the
      two most recent prior ones.
    - ``reason``: generic-disinterest no-sale reason seen on at least two prior evaluations.
    """

    def __init__(
        self,
        rubric: RubricDefinition,
        generic_disinterest_reason: str,
        id_generator: ActionItemIdGenerator | None = None,
    ):
        self.rubric = rubric
        self.generic_disinterest_reason = generic_disinterest_reason
        self.id_generator = id_generator or ActionItemIdGenerator()
        self.logger = LogManager.get_instance().get_logger("ActionPlanEngine")

    def generate(
        self, current: Evaluation, history: list[Evaluation], now: datetime | None = None
    ) -> list[ActionItem]:
        """Returns the items triggered by ``current``.

        Args:
            current (Evaluation): The evaluation being registered.
            history (list[Evaluation]): Previous evaluations, excluding ``current``.
                Only those of the same consultant are considered.
            now (datetime): Reference instant for creation time and deadlines.

        Returns:
            list[ActionItem]: Generated items, all Pending.
        """
        now = now or datetime.now()
        prior = [evaluation for evaluation in history if evaluation.consultant_name == current.consultant_name]

        items: list[ActionItem] = []
        items.extend(self._low_score(current, now))
        items.extend(self._weak_sections(current, now))
        items.extend(self._critical_failure(current, now))
        items.extend(self._repeated_failures(current, prior, now))
        items.extend(self._recurrent_reason(current, prior, now))

        if items:
            self.logger.info(
                f"{len(items)} action item(s) for {current.consultant_name} from evaluation {current.id}"
            )
        return items

    def _low_score(self, current: Evaluation, now: datetime) -> list[ActionItem]:
        if current.final_score >= LOW_SCORE_THRESHOLD:
            return []
        return [
            self._item(
                current,
                now,
                trigger="score",
                title="Performance: Nota Abaixo de 80%",
                action_plan="Revisar técnicas de negociação e realizar treinamento de contorno de objeções.",
                priority=ActionItemPriority.HIGH,
                responsible=Responsible.SUPERVISOR,
                deadline=STANDARD_DEADLINE,
            )
        ]

    def _weak_sections(self, current: Evaluation, now: datetime) -> list[ActionItem]:
        items = []
        for section in self.rubric.sections:
            if section.weight <= 0:
                continue
            attainment = current.section_scores.get(section.id, 0.0) / section.weight * 100
            if attainment >= SECTION_ATTAINMENT_THRESHOLD:
                continue
            items.append(
                self._item(
                    current,
                    now,
                    trigger="section",
                    title=f"Melhoria em Competência: {section.title}",
                    action_plan=(
                        f"Realizar plano de recuperação focado em {section.title} "
                        f"(Nota atual: {attainment:.0f}%). "
                        "Revisar materiais e agendar monitoria de acompanhamento."
                    ),
                    priority=ActionItemPriority.MEDIUM,
                    responsible=Responsible.CONSULTANT,
                    deadline=STANDARD_DEADLINE,
                )
            )
        return items

    def _critical_failure(self, current: Evaluation, now: datetime) -> list[ActionItem]:
        if not current.has_critical_failure:
            return []
        reason = current.critical_failure_reason or "Falha grave não especificada"
        return [
            self._item(
                current,
                now,
                trigger="critical",
                title="FALHA GRAVE: Plano de Correção Imediata",
                action_plan=f"Feedback obrigatório sobre: {reason}. Monitoria de acompanhamento em 24h.",
                priority=ActionItemPriority.HIGH,
                responsible=Responsible.SUPERVISOR,
                deadline=FOLLOW_UP_DEADLINE,
                kind=ActionItemKind.FOLLOW_UP,
            )
        ]

    def _repeated_failures(self, current: Evaluation, prior: list[Evaluation], now: datetime) -> list[ActionItem]:
        # Current first, then the most recent prior ones; equal dates keep input order.
        recent = sorted(prior, key=lambda evaluation: evaluation.contact_date, reverse=True)
        window = [current, *recent][:REPEATED_FAILURE_WINDOW]
        if len(window) < REPEATED_FAILURE_WINDOW:
            return []

        items = []
        for _, question in self.rubric.iter_questions():
            if current.answers.get(question.id) is not AnswerValue.NO:
                continue
            if not all(evaluation.answers.get(question.id) is AnswerValue.NO for evaluation in window):
                continue
            items.append(
                self._item(
                    current,
                    now,
                    trigger="repeat",
                    title=f"Reincidência de Erro: {question.text[:30]}...",
                    action_plan=(
                        "O consultor perdeu pontos neste item por 3 vezes seguidas. "
                        f'Treino específico de "{question.text}" + Role Play obrigatório.'
                    ),
                    priority=ActionItemPriority.HIGH,
                    responsible=Responsible.SUPERVISOR,
                    deadline=STANDARD_DEADLINE,
                )
            )
        return items

    def _recurrent_reason(self, current: Evaluation, prior: list[Evaluation], now: datetime) -> list[ActionItem]:
        reason = self.generic_disinterest_reason
        if current.sale_effective or current.no_sale_reason != reason:
            return []
        occurrences = sum(1 for evaluation in prior if evaluation.no_sale_reason == reason)
        if occurrences < RECURRENT_REASON_MIN_PRIOR:
            return []
        return [
            self._item(
                current,
                now,
                trigger="reason",
                title="Recorrência: Desinteresse Genérico",
                action_plan=(
                    "Treinamento intensivo de Criação de Valor e Gatilhos de Urgência. "
                    "Revisar abordagem inicial."
                ),
                priority=ActionItemPriority.MEDIUM,
                responsible=Responsible.CONSULTANT,
                deadline=STANDARD_DEADLINE,
            )
        ]

    def _item(
        self,
        current: Evaluation,
        now: datetime,
        trigger: str,
        title: str,
        action_plan: str,
        priority: ActionItemPriority,
        responsible: Responsible,
        deadline: timedelta,
        kind: ActionItemKind = ActionItemKind.DEVELOPMENT_PLAN,
    ) -> ActionItem:
        return ActionItem(
            id=self.id_generator.next_id(trigger, current.id),
            consultant_name=current.consultant_name,
            title=title,
            action_plan=action_plan,
            deadline=(now + deadline).date(),
            created_at=now,
            priority=priority,
            responsible=responsible,
            origin_evaluation_id=current.id,
            kind=kind,
        )
