from dataclasses import dataclass
from typing import Dict, Tuple

from alice_bridge.errors import ConfigError

_STYLE = (
    "Отвечай на русском языке. Избегай markdown, списков и длинных абзацев. "
    "Максимум 2–3 предложения."
)


@dataclass(frozen=True)
class ProviderProfile:
    name: str
    display_name: str
    kind: str  # "chat" | "text"
    base_url: str
    model: str
    api_key_env: str
    key_prefix: str
    history_window: int
    max_history: int
    temperature: float = 0.7
    max_tokens: int = 512
    stop_markers: Tuple[str, ...] = ()

    @property
    def system_prompt(self) -> str:
        return (
            f"Ты — {self.display_name}, дружелюбный и краткий ассистент "
            f"для Алисы (Яндекс.Диалоги). {_STYLE}"
        )

    @property
    def greeting(self) -> str:
        return f"Привет! Я {self.display_name} — умный ИИ, который говорит по-русски. Чем могу помочь?"

    @property
    def apology(self) -> str:
        return f"Похоже, {self.display_name} временно задумался... Повторите, пожалуйста."


PROVIDERS: Dict[str, ProviderProfile] = {
    "deepseek": ProviderProfile(
        name="deepseek",
        display_name="DeepSeek",
        kind="chat",
        base_url="https://api.deepseek.com",
        model="deepseek-chat",
        api_key_env="DEEPSEEK_API_KEY",
        key_prefix="sk-",
        history_window=6,
        max_history=10,
    ),
    "openai": ProviderProfile(
        name="openai",
        display_name="ChatGPT",
        kind="chat",
        base_url="https://api.openai.com/v1",
        model="gpt-4o-mini",
        api_key_env="OPENAI_API_KEY",
        key_prefix="sk-",
        history_window=6,
        max_history=10,
    ),
    "openrouter": ProviderProfile(
        name="openrouter",
        display_name="Llama",
        kind="chat",
        base_url="https://openrouter.ai/api/v1",
        model="meta-llama/llama-3.1-8b-instruct",
        api_key_env="OPENROUTER_API_KEY",
        key_prefix="sk-or-",
        history_window=6,
        max_history=6,
    ),
    "groq": ProviderProfile(
        name="groq",
        display_name="Groq",
        kind="chat",
        base_url="https://api.groq.com/openai/v1",
        model="llama-3.1-8b-instant",
        api_key_env="GROQ_API_KEY",
        key_prefix="gsk_",
        history_window=4,
        max_history=4,
    ),
    "mistral": ProviderProfile(
        name="mistral",
        display_name="Mistral",
        kind="chat",
        base_url="https://api.mistral.ai/v1",
        model="mistral-small-latest",
        api_key_env="MISTRAL_API_KEY",
        key_prefix="",
        history_window=6,
        max_history=10,
    ),
    "huggingface": ProviderProfile(
        name="huggingface",
        display_name="Mistral",
        kind="text",
        base_url="https://api-inference.huggingface.co/models",
        model="mistralai/Mistral-7B-Instruct-v0.2",
        api_key_env="HF_API_TOKEN",
        key_prefix="hf_",
        history_window=4,
        max_history=4,
        max_tokens=300,
        stop_markers=("</s>", "<|endoftext|>", "<|im_end|>", "[INST]"),
    ),
}


def get_profile(name: str) -> ProviderProfile:
    try:
        return PROVIDERS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(PROVIDERS))
        raise ConfigError(f"Unknown LLM_PROVIDER '{name}' (expected one of: {known})") from None
