import os

from dotenv import load_dotenv

load_dotenv()

_CONFIG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "config")


def _split_env(name: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Config:
    def __init__(self):
        # Configuração externa (rubrica e cabeçalhos da planilha)
        self._rubric_file = os.getenv("QM_RUBRIC_FILE", os.path.join(_CONFIG_DIR, "rubric.json"))
        self._header_map_file = os.getenv("QM_HEADER_MAP_FILE", os.path.join(_CONFIG_DIR, "header_map.json"))

        # Importação
        self._import_encodings = _split_env("QM_IMPORT_ENCODINGS", "utf-8-sig,cp1252")
        self._workflow_statuses = _split_env(
            "QM_WORKFLOW_STATUSES",
            "Monitorado,Revisado,Aguardando evidência,Aguardando consultor,Aguardando supervisão",
        )
        if not self._workflow_statuses:
            raise ValueError("QM_WORKFLOW_STATUSES must list at least one status.")
        self._default_feedback_status = os.getenv("QM_DEFAULT_FEEDBACK_STATUS", "Pendente")
        self._generic_disinterest_reason = os.getenv(
            "QM_GENERIC_DISINTEREST_REASON", "Desinteresse genérico (resposta vaga)"
        )

        # Conexão Ollama
        self._ollama_host = os.getenv("OLLAMA_HOST", "http://localhost:11434")
        self._ollama_model = os.getenv("OLLAMA_MODEL", "llama3.2")

        # Runtime Ollama
        self._ollama_num_ctx = int(os.getenv("OLLAMA_NUM_CTX", "8192"))
        self._ollama_temperature = float(os.getenv("OLLAMA_TEMPERATURE", "0.4"))
        self._ollama_top_p = float(os.getenv("OLLAMA_TOP_P", "0.9"))

    # --- Properties for external configuration ---
    @property
    def rubric_file(self) -> str:
        return self._rubric_file

    @property
    def header_map_file(self) -> str:
        return self._header_map_file

    # --- Properties for import ---
    @property
    def import_encodings(self) -> list[str]:
        return self._import_encodings

    @property
    def workflow_statuses(self) -> list[str]:
        return self._workflow_statuses

    @property
    def default_workflow_status(self) -> str:
        return self._workflow_statuses[0]

    @property
    def default_feedback_status(self) -> str:
        return self._default_feedback_status

    @property
    def generic_disinterest_reason(self) -> str:
        return self._generic_disinterest_reason

    # --- Properties for Ollama ---
    @property
    def ollama_host(self) -> str:
        return self._ollama_host

    @property
    def ollama_model(self) -> str:
        return self._ollama_model

    def get_ollama_config(self) -> dict:
        return {
            "num_ctx": self._ollama_num_ctx,
            "temperature": self._ollama_temperature,
            "top_p": self._ollama_top_p,
        }
