"""
LLM Manager - Abstraction layer for multiple LLM backends.

This module provides a unified interface for both OpenRouter API and local Ollama models,
allowing seamless switching between different LLM providers. Providers accept a full
message list so callers can run multi-turn conversations as well as one-shot prompts.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Any
from dataclasses import dataclass
import aiohttp
import requests

from ..config import get_llm_config, LLMConfig
from ..utils import get_logger

logger = get_logger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?\s*|```")

@dataclass
class LLMResponse:
    """Standardized response from LLM providers."""
    success: bool
    content: str = ""
    model: str = ""
    usage: Optional[Dict[str, int]] = None
    finish_reason: Optional[str] = None
    error: Optional[str] = None
    data: Optional[Any] = None

def strip_code_fences(text: str) -> str:
    """Remove markdown code fences that models like to wrap JSON in."""
    return _CODE_FENCE.sub("", text or "").strip()

def parse_json_payload(text: str) -> Any:
    """
    Parse a JSON document out of a model response.

    Raises:
        ValueError: if the cleaned text is not valid JSON
    """
    return json.loads(strip_code_fences(text))

def build_messages(prompt: str, system_prompt: str = "") -> List[Dict[str, str]]:
    """Build a chat message list for a one-shot prompt."""
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": prompt})
    return messages

class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    async def chat(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        """Generate the next assistant message for a conversation."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is available."""
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        """Get the model name being used."""
        pass

    async def generate_text(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate text response."""
        return await self.chat(build_messages(prompt, system_prompt), **kwargs)

    async def generate_structured_response(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate a JSON response and parse it into ``response.data``."""
        response = await self.generate_text(prompt, system_prompt, json_mode=True, **kwargs)

        if response.success:
            try:
                response.data = parse_json_payload(response.content)
            except ValueError:
                logger.warning("Could not parse structured response as JSON")
                response.data = None

        return response

class OpenRouterProvider(LLMProvider):
    """OpenRouter API provider for various LLM models."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self.base_url = "https://openrouter.ai/api/v1"
        self.headers = {
            "Authorization": f"Bearer {config.openrouter_api_key}",
            "HTTP-Referer": "http://localhost:8501",
            "X-Title": "OfferFlow Interview Prep",
            "Content-Type": "application/json"
        }

    async def chat(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        """Generate a chat completion using OpenRouter API."""
        if not self.config.openrouter_api_key:
            return LLMResponse(
                success=False,
                error="OpenRouter API key not configured"
            )

        try:
            payload = {
                "model": self.config.default_model,
                "messages": messages,
                "temperature": kwargs.get("temperature", self.config.temperature),
                "max_tokens": kwargs.get("max_tokens", self.config.max_tokens)
            }
            if kwargs.get("json_mode"):
                payload["response_format"] = {"type": "json_object"}

            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    f"{self.base_url}/chat/completions",
                    headers=self.headers,
                    json=payload
                ) as response:
                    if response.status == 200:
                        data = await response.json()
                        content = data["choices"][0]["message"]["content"] or ""

                        return LLMResponse(
                            success=True,
                            content=content,
                            model=data.get("model", self.config.default_model),
                            usage=data.get("usage", {}),
                            finish_reason=data["choices"][0].get("finish_reason")
                        )
                    else:
                        error_text = await response.text()
                        return LLMResponse(
                            success=False,
                            error=f"OpenRouter API error {response.status}: {error_text}"
                        )

        except Exception as e:
            logger.error(f"Error calling OpenRouter API: {e}")
            return LLMResponse(
                success=False,
                error=f"OpenRouter API error: {str(e)}"
            )

    def is_available(self) -> bool:
        """Check if OpenRouter is available."""
        return bool(self.config.openrouter_api_key)

    def get_model_name(self) -> str:
        """Get the model name being used."""
        return self.config.default_model

class OllamaProvider(LLMProvider):
    """Local Ollama provider for running models locally."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self.base_url = config.ollama_base_url

    async def chat(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        """Generate a chat completion using Ollama."""
        try:
            payload = {
                "model": self.config.local_llm_model,
                "messages": messages,
                "stream": False,
                "options": {
                    "temperature": kwargs.get("temperature", self.config.temperature),
                    "num_predict": kwargs.get("max_tokens", self.config.max_tokens)
                }
            }
            if kwargs.get("json_mode"):
                payload["format"] = "json"

            timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    f"{self.base_url}/api/chat",
                    json=payload
                ) as response:
                    if response.status == 200:
                        data = await response.json()

                        return LLMResponse(
                            success=True,
                            content=data.get("message", {}).get("content", ""),
                            model=self.config.local_llm_model,
                            finish_reason="stop" if data.get("done") else "length"
                        )
                    else:
                        error_text = await response.text()
                        return LLMResponse(
                            success=False,
                            error=f"Ollama API error {response.status}: {error_text}"
                        )

        except Exception as e:
            logger.error(f"Error calling Ollama API: {e}")
            return LLMResponse(
                success=False,
                error=f"Ollama API error: {str(e)}"
            )

    def is_available(self) -> bool:
        """Check if Ollama is available."""
        try:
            response = requests.get(f"{self.base_url}/api/tags", timeout=5)
            return response.status_code == 200
        except requests.RequestException:
            return False

    def get_model_name(self) -> str:
        """Get the model name being used."""
        return self.config.local_llm_model

class LLMManager:
    """Main LLM manager that coordinates different providers."""

    def __init__(self, config: Optional[LLMConfig] = None):
        self.config = config or get_llm_config()
        self.providers: Dict[str, LLMProvider] = {}
        self._initialize_providers()

    def _initialize_providers(self):
        """Initialize available providers."""
        # OpenRouter provider
        if self.config.openrouter_api_key:
            self.providers["openrouter"] = OpenRouterProvider(self.config)

        # Ollama provider
        if self.config.use_local_llm:
            self.providers["ollama"] = OllamaProvider(self.config)

    def get_available_providers(self) -> List[str]:
        """Get list of available providers."""
        available = []
        for name, provider in self.providers.items():
            if provider.is_available():
                available.append(name)
        return available

    def get_primary_provider(self) -> Optional[LLMProvider]:
        """Get the primary provider to use."""
        # Prefer OpenRouter if available
        if "openrouter" in self.providers and self.providers["openrouter"].is_available():
            return self.providers["openrouter"]

        # Fall back to Ollama
        if "ollama" in self.providers and self.providers["ollama"].is_available():
            return self.providers["ollama"]

        return None

    async def chat(self, messages: List[Dict[str, str]], **kwargs) -> LLMResponse:
        """Continue a conversation using the primary provider."""
        provider = self.get_primary_provider()

        if not provider:
            return LLMResponse(
                success=False,
                error="No LLM providers available"
            )

        return await provider.chat(messages, **kwargs)

    async def generate_text(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate text using the primary provider."""
        return await self.chat(build_messages(prompt, system_prompt), **kwargs)

    async def generate_structured_response(self, prompt: str, system_prompt: str = "", **kwargs) -> LLMResponse:
        """Generate structured response using the primary provider."""
        provider = self.get_primary_provider()

        if not provider:
            return LLMResponse(
                success=False,
                error="No LLM providers available"
            )

        return await provider.generate_structured_response(prompt, system_prompt, **kwargs)

    async def test_providers(self) -> Dict[str, bool]:
        """Send a tiny prompt to every configured provider."""
        results = {}
        for name, provider in self.providers.items():
            response = await provider.generate_text("Reply with the single word: ready", max_tokens=10)
            results[name] = response.success
            if not response.success:
                logger.warning(f"Provider {name} failed self-test: {response.error}")
        return results

    def get_provider_info(self) -> Dict[str, Dict[str, Any]]:
        """Get information about available providers."""
        info = {}
        primary_provider = self.get_primary_provider()

        for name, provider in self.providers.items():
            info[name] = {
                "name": name,
                "available": provider.is_available(),
                "model": provider.get_model_name(),
                "is_primary": provider == primary_provider
            }

        return info

# Global LLM manager instance
_llm_manager = None

def get_llm_manager() -> LLMManager:
    """Get the global LLM manager instance."""
    global _llm_manager
    if _llm_manager is None:
        _llm_manager = LLMManager()
    return _llm_manager
