import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# ------------------------------------------------------------
# Ensure environment is loaded early
# ------------------------------------------------------------
load_dotenv()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class GenerationContext:
    """Credential and model preference for one generation call.

    A session key (sent by the browser) always wins over the process-level
    default read from ``OPENAI_API_KEY``.
    """

    session_api_key: Optional[str] = None
    default_api_key: Optional[str] = None
    preferred_model: Optional[str] = None
    base_url: Optional[str] = None

    def resolve_api_key(self) -> Optional[str]:
        return _clean(self.session_api_key) or _clean(self.default_api_key)

    @classmethod
    def from_env(
        cls,
        session_api_key: Optional[str] = None,
        preferred_model: Optional[str] = None,
    ) -> "GenerationContext":
        return cls(
            session_api_key=_clean(session_api_key),
            default_api_key=_clean(os.getenv("OPENAI_API_KEY")),
            preferred_model=_clean(preferred_model) or _clean(os.getenv("EXAMGEN_PREFERRED_MODEL")),
            base_url=_clean(os.getenv("EXAMGEN_BASE_URL")),
        )
