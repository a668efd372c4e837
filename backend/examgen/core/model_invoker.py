import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from openai import AsyncOpenAI

from .errors import AllModelsFailedError, EmptyResponseError, MissingCredentialError
from .schemas import ModelInfo
from .settings import GenerationContext

logger = logging.getLogger("examgen.invoker")

# ------------------------------------------------------------
# Model catalog, fastest/cheapest first
# ------------------------------------------------------------
MODEL_CATALOG: List[ModelInfo] = [
    ModelInfo(id="gpt-4o-mini", name="GPT-4o mini", description="Fastest standard model (Recommended)"),
    ModelInfo(id="gpt-4.1-mini", name="GPT-4.1 mini", description="Fast model with a larger context window"),
    ModelInfo(id="gpt-4o", name="GPT-4o", description="High intelligence for complex logic"),
    ModelInfo(id="gpt-4.1", name="GPT-4.1", description="Most capable model, slowest and most expensive"),
]

MODEL_PRIORITY: Tuple[str, ...] = tuple(m.id for m in MODEL_CATALOG)

ClientFactory = Callable[[str, Optional[str]], Any]


def default_client_factory(api_key: str, base_url: Optional[str] = None) -> AsyncOpenAI:
    # retries are lateral across models, never on the same model
    return AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)


def resolve_model_order(preferred: Optional[str], priority: Sequence[str] = MODEL_PRIORITY) -> List[str]:
    """Move ``preferred`` to the front when it is a known model."""
    models = list(priority)
    if preferred and preferred in models:
        models = [preferred] + [m for m in models if m != preferred]
    return models


def _response_text(resp: Any) -> Optional[str]:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return None
    content = choices[0].message.content
    if not content or not content.strip():
        return None
    return content


class ModelInvoker:
    """Sends one prompt to the first candidate model that answers."""

    def __init__(
        self,
        context: GenerationContext,
        priority: Sequence[str] = MODEL_PRIORITY,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.context = context
        self.priority = tuple(priority)
        self.client_factory = client_factory or default_client_factory

    def candidates(self) -> List[str]:
        return resolve_model_order(self.context.preferred_model, self.priority)

    async def invoke(self, prompt: str, *, json_response: bool = False, system: Optional[str] = None) -> str:
        api_key = self.context.resolve_api_key()
        if not api_key:
            raise MissingCredentialError()

        models = self.candidates()
        client = self.client_factory(api_key, self.context.base_url)

        messages: List[Dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        extra: Dict[str, Any] = {}
        if json_response:
            extra["response_format"] = {"type": "json_object"}

        attempts: List[Tuple[str, BaseException]] = []
        for model in models:
            try:
                resp = await client.chat.completions.create(model=model, messages=messages, **extra)
                text = _response_text(resp)
                if text is None:
                    raise EmptyResponseError(model)
            except Exception as e:
                logger.warning(f"Model {model} failed, trying next... ({type(e).__name__}: {e})")
                attempts.append((model, e))
                continue

            logger.info(f"Model {model} answered ({len(text)} chars) after {len(attempts) + 1} attempt(s).")
            return text

        last_error = attempts[-1][1] if attempts else None
        logger.error(f"All {len(models)} candidate models failed.")
        raise AllModelsFailedError(last_error, attempts)
