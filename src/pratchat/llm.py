"""
LiteLLM integration for reply generation.

The relay treats generation as a black box: given the full transcript, return
the model's reply text or raise GenerationFailure.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, Sequence

import litellm

from pratchat.config import CONFIG
from pratchat.logger import get_logger

if TYPE_CHECKING:
    from pratchat.session.transcript import Turn

logger = get_logger(__name__)

# Drop unsupported parameters when calling APIs
litellm.drop_params = True

Generator = Callable[[Sequence["Turn"]], Awaitable[str]]

# Transcript roles → chat-completion roles
_ROLE_MAP = {"user": "user", "model": "assistant"}


class GenerationFailure(RuntimeError):
    """The generation backend failed (network, quota, model error)."""


@dataclass
class GenerationResult:
    """Outcome of one generation call; exactly one of text/error is set."""

    ok: bool
    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: str) -> "GenerationResult":
        return cls(ok=False, error=error)


async def run_generation(
    generator: Generator, turns: Sequence["Turn"]
) -> GenerationResult:
    """Call the generator and fold any exception into a failed result."""
    try:
        text = await generator(turns)
    except Exception as e:
        logger.error(f"Generation failed: {e}")
        return GenerationResult.failure(str(e) or e.__class__.__name__)
    return GenerationResult.success(text if text is not None else "")


class LLMClient:
    """LiteLLM client that turns a transcript into the next model reply."""

    def __init__(
        self,
        model: str = None,
        system_prompt: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        """Initialize LLM client.

        Args:
            model: LiteLLM model identifier (defaults to CONFIG.model)
            system_prompt: Optional system message prepended to every call
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate
        """
        self.model = model or CONFIG.model
        self.system_prompt = (
            system_prompt if system_prompt is not None else CONFIG.system_prompt
        )
        self.temperature = temperature
        self.max_tokens = max_tokens

    def build_messages(self, turns: Sequence["Turn"]) -> list[dict[str, str]]:
        """Convert transcript turns into chat-completion messages."""
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        for turn in turns:
            messages.append({"role": _ROLE_MAP[turn.role], "content": turn.content})
        return messages

    async def generate(self, turns: Sequence["Turn"]) -> str:
        """Generate the reply to the last user turn.

        Args:
            turns: Full alternating history, ending with the user turn

        Returns:
            Generated text response

        Raises:
            GenerationFailure: If the completion call fails
        """
        try:
            response = await litellm.acompletion(
                model=self.model,
                messages=self.build_messages(turns),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error(f"LLM completion failed (model={self.model}): {e}")
            raise GenerationFailure(str(e)) from e

        content = response.choices[0].message.content
        return content or ""

    async def __call__(self, turns: Sequence["Turn"]) -> str:
        return await self.generate(turns)
