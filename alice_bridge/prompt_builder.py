from typing import Dict, List

from alice_bridge.providers import ProviderProfile
from alice_bridge.session_manager import Turn


def build_prompt(profile: ProviderProfile, history: List[Turn]) -> List[Dict[str, str]]:
    """
    Chat-completion message list: system instruction + recent turns
    """
    prompt = [{"role": "system", "content": profile.system_prompt}]
    prompt += [turn.as_message() for turn in history[-profile.history_window:]]
    return prompt


def build_text_prompt(messages: List[Dict[str, str]]) -> str:
    # text-generation endpoints take a single instruction-formatted string
    system = ""
    prompt_text = "<s>"
    for msg in messages:
        if msg["role"] == "system":
            system = f"<<SYS>>\n{msg['content']}\n<</SYS>>\n\n"
        elif msg["role"] == "user":
            prompt_text += f"[INST] {system}{msg['content']} [/INST]"
            system = ""
        elif msg["role"] == "assistant":
            prompt_text += f" {msg['content']}</s><s>"
    return prompt_text
