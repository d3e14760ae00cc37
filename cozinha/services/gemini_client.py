from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from cozinha.services.errors import GeminiConfigurationError, GenerationError, RateLimitedError, ServiceError

logger = logging.getLogger(__name__)

PROMPT_DIR = Path(__file__).resolve().parent / "prompts"
GEMINI_TIMEOUT_SECONDS = float(os.getenv("GEMINI_TIMEOUT_SECONDS", "30"))


class GeminiPromptError(ServiceError):
    pass


def load_prompt(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except FileNotFoundError as not_found_error:
        raise GeminiPromptError(f"Prompt file not found: {file_path}") from not_found_error
    except OSError as io_error:
        raise GeminiPromptError(f"Unable to read prompt file: {io_error}") from io_error


class TextGenerator(ABC):
    """Serviço de texto generativo: recebe prompt e devolve texto puro."""

    @abstractmethod
    def generate(
        self,
        prompt: str,
        *,
        system_instruction: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> str:
        pass


class GeminiClient(TextGenerator):
    def __init__(
        self,
        api_key: str | None,
        model_name: str = "gemini-2.5-flash",
        timeout: float = GEMINI_TIMEOUT_SECONDS,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.timeout = timeout
        self._configure_api()

    def _configure_api(self) -> None:
        if not self.api_key:
            raise GeminiConfigurationError("Missing Google API key.")
        genai.configure(api_key=self.api_key)

    def generate(
        self,
        prompt: str,
        *,
        system_instruction: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
    ) -> str:
        model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=system_instruction,
        )
        config: dict[str, Any] = {}
        if temperature is not None:
            config["temperature"] = temperature
        if max_output_tokens is not None:
            config["max_output_tokens"] = max_output_tokens

        try:
            response = model.generate_content(
                prompt,
                generation_config=genai.GenerationConfig(**config) if config else None,
                request_options={"timeout": self.timeout},
            )
            text = response.text
        except google_exceptions.ResourceExhausted as error:
            raise RateLimitedError(
                "Limite da API do Gemini atingido. Tente novamente em alguns instantes."
            ) from error
        except google_exceptions.GoogleAPIError as error:
            raise GenerationError(f"Gemini request failed: {error}") from error
        except ValueError as error:
            # response.text falha quando a resposta veio bloqueada ou sem candidatos
            raise GenerationError(f"Gemini returned no text: {error}") from error

        if not text or not text.strip():
            raise GenerationError("Model response did not include text content.")
        return text.strip()
