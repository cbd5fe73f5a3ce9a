"""
Gaia — Completion Providers
Single class routing a role-tagged prompt to OpenAI, xAI, Claude, or Gemini.
"""

import asyncio
import logging
from config import Config

log = logging.getLogger("gaia.providers")

SUPPORTED_PROVIDERS = ("openai", "xai", "claude", "gemini")


class CompletionError(RuntimeError):
    """Raised when the completion service fails or returns no text."""


def _split_system(messages: list[dict]) -> tuple[str, list[dict]]:
    """Separate system units from the conversational ones."""
    system_parts = [m["content"] for m in messages if m.get("role") == "system"]
    rest = [m for m in messages if m.get("role") in ("user", "assistant")]
    return "\n\n".join(system_parts), rest


class LLMClient:
    """
    Unified completion interface. Routes to the correct SDK based on provider name.

    Supported providers:
      - openai  → OpenAI ChatGPT (via openai SDK)
      - xai     → xAI Grok (via openai SDK with custom base_url)
      - claude  → Anthropic Claude (via anthropic SDK)
      - gemini  → Google Gemini (via google-generativeai SDK)

    The service is stateless: every call carries the full prompt.
    """

    def __init__(self, config: Config):
        self.config = config
        self.provider_name = config.llm_provider
        self.model = config.llm_model
        self.max_output_tokens = max(256, int(getattr(config, "max_output_tokens", 1024) or 1024))
        self._client = None

        self._init_client()

    def _init_client(self):
        """Initialize the appropriate SDK client."""
        if self.provider_name in ("openai", "xai"):
            import openai

            if self.provider_name == "xai":
                if not self.config.xai_api_key:
                    raise ValueError("XAI_API_KEY is required when LLM_PROVIDER=xai")
                self._client = openai.OpenAI(
                    api_key=self.config.xai_api_key,
                    base_url="https://api.x.ai/v1",
                )
            else:
                if not self.config.openai_api_key:
                    raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")
                self._client = openai.OpenAI(api_key=self.config.openai_api_key)

        elif self.provider_name == "claude":
            import anthropic

            if not self.config.anthropic_api_key:
                raise ValueError("ANTHROPIC_API_KEY is required when LLM_PROVIDER=claude")
            self._client = anthropic.Anthropic(api_key=self.config.anthropic_api_key)

        elif self.provider_name == "gemini":
            import google.generativeai as genai

            if not self.config.gemini_api_key:
                raise ValueError("GEMINI_API_KEY is required when LLM_PROVIDER=gemini")
            genai.configure(api_key=self.config.gemini_api_key)

        else:
            raise ValueError(
                f"Unknown provider: {self.provider_name!r}. "
                f"Supported: {', '.join(SUPPORTED_PROVIDERS)}"
            )
        log.info(f"Initialized {self.provider_name} provider (model: {self.model})")

    async def complete(self, messages: list[dict]) -> str:
        """
        Send a prompt to the completion service and return the generated text.

        Args:
            messages: Ordered list of {"role": "system"|"user"|"assistant", "content": "..."}.

        Raises:
            CompletionError: the provider call failed or produced no text.
        """
        try:
            if self.provider_name in ("openai", "xai"):
                text = await self._complete_openai(messages)
            elif self.provider_name == "claude":
                text = await self._complete_claude(messages)
            else:
                text = await self._complete_gemini(messages)
        except CompletionError:
            raise
        except Exception as e:
            raise CompletionError(f"{self.provider_name} request failed: {e}") from e

        text = (text or "").strip()
        if not text:
            raise CompletionError(f"{self.provider_name} returned an empty completion")
        return text

    # ── OpenAI / xAI ──────────────────────────────────────────

    async def _complete_openai(self, messages: list[dict]) -> str:
        """Chat completion via the OpenAI-compatible API."""
        response = await asyncio.to_thread(
            self._client.chat.completions.create,
            model=self.model,
            messages=messages,
            max_tokens=self.max_output_tokens,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    # ── Claude ────────────────────────────────────────────────

    async def _complete_claude(self, messages: list[dict]) -> str:
        """Anthropic's Messages API takes the system prompt as a separate param."""
        system_prompt, api_messages = _split_system(messages)
        kwargs = {
            "model": self.model,
            "messages": api_messages,
            "max_tokens": self.max_output_tokens,
        }
        if system_prompt:
            kwargs["system"] = system_prompt

        response = await asyncio.to_thread(self._client.messages.create, **kwargs)
        text_parts = [block.text for block in response.content if hasattr(block, "text")]
        return "\n".join(text_parts)

    # ── Gemini ────────────────────────────────────────────────

    async def _complete_gemini(self, messages: list[dict]) -> str:
        import google.generativeai as genai

        system_prompt, api_messages = _split_system(messages)
        model = genai.GenerativeModel(
            self.model,
            system_instruction=system_prompt or None,
        )

        history = []
        for msg in api_messages[:-1]:
            role = "user" if msg["role"] == "user" else "model"
            history.append({"role": role, "parts": [msg["content"]]})

        chat = model.start_chat(history=history)
        last_msg = api_messages[-1]["content"] if api_messages else ""
        response = await asyncio.to_thread(chat.send_message, last_msg)
        return response.text or ""
