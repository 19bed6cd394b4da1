"""
LLM Service
Wrapper per LLM locali (Ollama o LM Studio) usati come oracolo di generazione testo.

L'output dell'LLM è considerato non fidato: generate_json restituisce
Parsed(value) oppure Unparsed(raw_text), mai un'eccezione di parsing.
"""

import json
import os
import re
from typing import Any, Optional

import ollama

from careerforge.models.llm_response import ParseResult, Parsed, Unparsed
from careerforge.services.logging_utils import log_timing, print_with_prefix, truncate


DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "mistral"
DEFAULT_LMSTUDIO_BASE_URL = "http://localhost:1234/v1"


class OllamaNotAvailableError(Exception):
    """Eccezione per quando il backend LLM non è disponibile."""
    pass


class LLMService:
    """
    Servizio per interagire con LLM locali (Ollama o LM Studio).

    Espone generate(prompt) -> str, l'unica capacità richiesta dall'oracolo.
    """

    def __init__(
        self,
        model: Optional[str] = None,
        temperature: float = 0.3,
        timeout: int = 120,
        provider: str = "ollama",  # "ollama" o "lmstudio"
        ollama_base_url: Optional[str] = None,
        lmstudio_base_url: Optional[str] = None,
        lmstudio_api_key: Optional[str] = None,
        lmstudio_model: Optional[str] = None,
        ollama_client: Optional[Any] = None,
        lmstudio_client: Optional[Any] = None,
        verbose: bool = True
    ):
        """
        Inizializza il servizio LLM.

        Args:
            model: Nome del modello (default: env OLLAMA_MODEL o "mistral")
            temperature: Temperatura per la generazione (0-1, più basso = più deterministico)
            timeout: Timeout in secondi per le chiamate
            provider: "ollama" o "lmstudio"
            ollama_base_url: Host Ollama (default: env OLLAMA_BASE_URL o http://localhost:11434)
            lmstudio_base_url: Base URL per LM Studio (default: env LMSTUDIO_BASE_URL o http://localhost:1234/v1)
            lmstudio_api_key: API key per LM Studio (default: env LMSTUDIO_API_KEY o "lmstudio")
            lmstudio_model: Nome modello LM Studio (default: env LMSTUDIO_MODEL, fallback su "model")
            ollama_client: Client Ollama già costruito (test o configurazioni custom)
            lmstudio_client: Client OpenAI compatibile già costruito
            verbose: Abilita i log su stdout
        """
        self.provider = (provider or "ollama").lower()
        if self.provider not in {"ollama", "lmstudio"}:
            raise ValueError("provider deve essere 'ollama' o 'lmstudio'")

        self.verbose = verbose
        self.temperature = temperature
        self.timeout = timeout
        self.is_available = False

        self.ollama_base_url = ollama_base_url or os.getenv("OLLAMA_BASE_URL", DEFAULT_OLLAMA_BASE_URL)
        self.lmstudio_base_url = lmstudio_base_url or os.getenv("LMSTUDIO_BASE_URL", DEFAULT_LMSTUDIO_BASE_URL)
        self.lmstudio_api_key = lmstudio_api_key or os.getenv("LMSTUDIO_API_KEY", "lmstudio")

        model = model or os.getenv("OLLAMA_MODEL", DEFAULT_OLLAMA_MODEL)
        if self.provider == "lmstudio":
            self.model = lmstudio_model or os.getenv("LMSTUDIO_MODEL") or model
        else:
            self.model = model

        self._ollama_client = ollama_client
        self._lmstudio_client = lmstudio_client

        # Verifica provider
        if self.provider == "ollama":
            self._check_ollama()
        else:
            self._check_lmstudio()

    def _get_ollama_client(self):
        if self._ollama_client is None:
            self._ollama_client = ollama.Client(host=self.ollama_base_url, timeout=self.timeout)
        return self._ollama_client

    def _check_ollama(self) -> None:
        """Verifica che Ollama sia in esecuzione e il modello sia disponibile."""
        try:
            models = self._get_ollama_client().list()
            model_names = [m.model for m in models.models] if models.models else []

            # Cerca il modello (con o senza tag :latest)
            model_found = any(
                self.model in name or name.startswith(self.model)
                for name in model_names
            )

            if not model_found:
                self._log(f"Modello '{self.model}' non trovato. Modelli disponibili: {model_names}")
                self._log(f"Esegui: ollama pull {self.model}")
                self.is_available = False
            else:
                self.is_available = True
                self._log(f"LLM Service pronto (modello: {self.model})")

        except ConnectionError:
            self.is_available = False
            self._log(f"Ollama non raggiungibile su {self.ollama_base_url}. Avvialo con: ollama serve")
        except Exception as e:
            self.is_available = False
            self._log(f"Errore connessione Ollama: {e}")

    def _get_lmstudio_client(self):
        """Crea (lazy) client OpenAI compatibile con LM Studio."""
        if self._lmstudio_client is None:
            from openai import OpenAI

            self._lmstudio_client = OpenAI(
                base_url=self.lmstudio_base_url,
                api_key=self.lmstudio_api_key,
                timeout=self.timeout
            )
        return self._lmstudio_client

    def _check_lmstudio(self) -> None:
        """Verifica che LM Studio sia raggiungibile e il modello disponibile."""
        try:
            client = self._get_lmstudio_client()
            models = client.models.list()
            model_names = [m.id for m in models.data] if getattr(models, "data", None) else []

            model_found = any(
                self.model in name or name.startswith(self.model)
                for name in model_names
            )

            if not model_found:
                self._log(f"Modello '{self.model}' non trovato su LM Studio. Modelli disponibili: {model_names}")
                self.is_available = False
            else:
                self.is_available = True
                self._log(f"LLM Service pronto (provider: lmstudio, modello: {self.model})")
        except Exception as e:
            self.is_available = False
            self._log(f"LM Studio non raggiungibile: {e}")

    def generate(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None
    ) -> str:
        """
        Genera testo dal prompt.

        Args:
            prompt: Il prompt da inviare al modello
            system_prompt: Prompt di sistema opzionale
            temperature: Override della temperatura

        Returns:
            Testo generato dal modello

        Raises:
            OllamaNotAvailableError: backend non disponibile o chiamata fallita
        """
        if not self.is_available:
            if self.provider == "ollama":
                raise OllamaNotAvailableError(
                    "Ollama non disponibile. Avvialo con 'ollama serve' e assicurati "
                    f"che il modello '{self.model}' sia installato (ollama pull {self.model})"
                )
            raise OllamaNotAvailableError(
                "LM Studio non disponibile. Avvialo e assicurati che l'endpoint sia raggiungibile "
                f"(base_url={self.lmstudio_base_url}) e che il modello '{self.model}' sia caricato"
            )

        temperature = self.temperature if temperature is None else temperature

        try:
            with log_timing(self._log, f"generate ({self.provider}/{self.model})"):
                if self.provider == "ollama":
                    response = self._get_ollama_client().generate(
                        model=self.model,
                        prompt=prompt,
                        system=system_prompt,
                        options={"temperature": temperature}
                    )
                    text = response.response
                else:
                    messages = []
                    if system_prompt:
                        messages.append({"role": "system", "content": system_prompt})
                    messages.append({"role": "user", "content": prompt})

                    response = self._get_lmstudio_client().chat.completions.create(
                        model=self.model,
                        messages=messages,
                        temperature=temperature
                    )
                    text = response.choices[0].message.content
        except Exception as e:
            if self.provider == "ollama":
                raise OllamaNotAvailableError(f"Errore chiamata Ollama: {e}") from e
            raise OllamaNotAvailableError(f"Errore chiamata LM Studio: {e}") from e

        self._log(f"Prompt: {truncate(prompt)}")
        self._log(f"Output: {truncate(text)}")
        return text or ""

    def generate_json(
        self,
        prompt: str,
        system_prompt: Optional[str] = None,
        temperature: Optional[float] = None
    ) -> ParseResult:
        """
        Genera e parsa JSON dal prompt.

        Returns:
            Parsed(value) se la risposta contiene JSON valido, altrimenti Unparsed(testo)
        """
        # Aggiungi istruzione per JSON se non presente
        if "json" not in prompt.lower():
            prompt += "\n\nRespond ONLY with valid JSON, no other text."

        response_text = self.generate(prompt, system_prompt, temperature)
        return parse_json_response(response_text)

    def _log(self, message: str) -> None:
        print_with_prefix("[LLMService]", message, enabled=self.verbose)


def parse_json_response(text: Optional[str]) -> ParseResult:
    """Estrae JSON da testo che potrebbe contenere altro."""
    if text is None:
        return Unparsed(raw_text="")

    # Prima prova parsing diretto
    try:
        return Parsed(json.loads(text.strip()))
    except json.JSONDecodeError:
        pass

    # Cerca il primo JSON object {...} bilanciato
    start_idx = text.find('{')
    if start_idx != -1:
        depth = 0
        end_idx = start_idx
        for i, char in enumerate(text[start_idx:], start_idx):
            if char == '{':
                depth += 1
            elif char == '}':
                depth -= 1
                if depth == 0:
                    end_idx = i + 1
                    break

        if depth == 0 and end_idx > start_idx:
            try:
                return Parsed(json.loads(text[start_idx:end_idx]))
            except json.JSONDecodeError:
                pass

    # Fallback: cerca in blocchi di codice
    json_patterns = [
        r'```json\s*([\s\S]*?)\s*```',
        r'```\s*([\s\S]*?)\s*```',
    ]

    for pattern in json_patterns:
        match = re.search(pattern, text)
        if match:
            try:
                return Parsed(json.loads(match.group(1)))
            except json.JSONDecodeError:
                continue

    return Unparsed(raw_text=text)
