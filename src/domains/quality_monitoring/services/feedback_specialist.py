from typing import List, Optional

from utils.logging.logging_manager import LogManager
from utils.ollama_assistant import OllamaAssistant

from ..core.evaluation import AnswerValue, Evaluation
from ..core.rubric import RubricDefinition

logger = LogManager.get_instance().get_logger("FeedbackSpecialist")

EMPTY_RESPONSE_MESSAGE = "Não foi possível gerar o feedback automático."
CONNECTION_ERROR_MESSAGE = "Erro ao conectar com o assistente de IA. Verifique a configuração do modelo."


def collect_negative_points(evaluation: Evaluation, rubric: RubricDefinition) -> List[str]:
    """Lists every question answered "Não" as "<section>: <question>", plus the critical failure."""
    points = [
        f"{section.title}: {question.text}"
        for section, question in rubric.iter_questions()
        if evaluation.answers.get(question.id) is AnswerValue.NO
    ]
    if evaluation.has_critical_failure:
        points.append(f"FALHA GRAVE: {evaluation.critical_failure_reason or ''}".rstrip())
    return points


class FeedbackSpecialist(OllamaAssistant):
    """
    A specialized assistant that writes coaching feedback for a monitored contact.
    The model output is returned untouched; any failure yields a fixed fallback message.
    """

    def __init__(self, host: Optional[str] = None, model: Optional[str] = None, **kwargs):
        super().__init__(
            host=host or "http://localhost:11434",
            model=model or "llama3.2",
            **kwargs,
        )
        self.logger = logger

    def _create_feedback_prompt(
        self, consultant_name: str, description: str, negative_points: List[str], score: float
    ) -> str:
        points = "\n".join(f"- {point}" for point in negative_points) or "- Nenhum"
        return f"""
Você é um especialista sênior em Garantia de Qualidade (QA) para Call Centers de vendas educacionais.
Analise os seguintes dados de uma monitoria realizada:

Consultor: {consultant_name}
Nota Final: {score:.2f}%
Descrição do Contato: "{description}"
Pontos de Atenção (Respostas "Não" ou Falhas Graves):
{points}

Tarefa:
Escreva um feedback construtivo, profissional e motivador.

Diretrizes:
1. Se houver "FALHA GRAVE", o tom deve ser sério e corretivo, focando na conformidade imediata.
2. Se a nota for baixa (<60%) mas sem falha grave, foque em plano de ação e recuperação.
3. Se a nota for alta, reconheça os méritos e sugira pequenos polimentos.
4. Agrupe o feedback por blocos (Ex: Abordagem, Negociação) se possível.
5. Use formatação Markdown (negrito para pontos chaves).
6. Seja empático mas firme nos pontos de correção.
"""

    def generate_feedback(
        self, consultant_name: str, description: str, negative_points: List[str], score: float
    ) -> str:
        """
        Generates feedback text for one evaluation.

        Args:
            consultant_name (str): Consultant being coached.
            description (str): Free-text description of the contact.
            negative_points (List[str]): Failed items, see collect_negative_points.
            score (float): Final score, 0 to 100.

        Returns:
            str: The model text, or a fixed fallback message when generation fails.
        """
        prompt = self._create_feedback_prompt(consultant_name, description, negative_points, score)
        try:
            text = self.generate_text([{"role": "user", "content": prompt}])
        except Exception as e:
            self.logger.error(f"Feedback generation failed for {consultant_name}: {e}")
            return CONNECTION_ERROR_MESSAGE

        if not text or not text.strip():
            self.logger.warning(f"Empty feedback returned for {consultant_name}")
            return EMPTY_RESPONSE_MESSAGE
        return text

    def generate_for_evaluation(self, evaluation: Evaluation, rubric: RubricDefinition) -> str:
        return self.generate_feedback(
            evaluation.consultant_name,
            evaluation.notes or "",
            collect_negative_points(evaluation, rubric),
            evaluation.final_score,
        )
