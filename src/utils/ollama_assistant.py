from typing import Dict, List, Optional

from ollama import ChatResponse, Client, ResponseError

from utils.logging.logging_manager import LogManager


class OllamaAssistant:
    """
    A generic assistant backed by an Ollama language model.
    Specialized assistants subclass it and build their own prompts on top of generate_text.
    """

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = "llama3.2",
        client: Optional[Client] = None,
        **kwargs,
    ):
        """
        Initializes the OllamaAssistant with specified parameters.

        Args:
            host (str): The address of the Ollama instance.
            model (str): The name of the Ollama model to use.
            client (Optional[Client]): Pre-built client, used instead of connecting to ``host``.
            **kwargs: Model runtime options (temperature, num_ctx, top_p...).

        Raises:
            ValueError: If the model configuration is invalid.
        """
        self._validate_model_configuration(host, model)
        self._logger = LogManager.get_instance().get_logger(self.__class__.__name__)
        LogManager.get_instance().silence("httpx")
        self.client = client or Client(host=host)
        self.model = model
        self.config = kwargs

    def _validate_model_configuration(self, host: str, model: str) -> None:
        """
        Validates the model configuration before initializing the assistant.

        Raises:
            ValueError: If the host or model is invalid.
        """
        if not isinstance(host, str) or not host.startswith("http"):
            raise ValueError("Invalid host URL provided for Ollama instance.")
        if not isinstance(model, str) or not model:
            raise ValueError("Model name must be a non-empty string.")

    def generate_text(self, messages: List[Dict[str, str]]) -> str:
        """
        Generates text using the configured model and input messages.

        Args:
            messages (List[Dict[str, str]]): Messages in the format [{"role": "user", "content": "..."}].

        Returns:
            str: The generated text response.

        Raises:
            ResponseError: If the Ollama API returns an error.
            Exception: For other unexpected errors.
        """
        self._logger.info(f"Generating text with model {self.model}")
        try:
            response: ChatResponse = self.client.chat(model=self.model, messages=messages, options=self.config)
            self._logger.debug(f"Generated response: {response.message['content']}")
            return response.message["content"]
        except ResponseError as e:
            self._logger.error(
                f"Ollama API error: {e.error} (Status Code: {e.status_code})",
                exc_info=True,
            )
            raise
        except Exception as e:
            self._logger.error(f"Unexpected error in generate_text: {e}", exc_info=True)
            raise
