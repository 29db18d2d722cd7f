import logging
import re

from alice_bridge.errors import UpstreamError
from alice_bridge.models import AliceRequest, AliceResponse
from alice_bridge.post_processor import process_response, truncate_reply
from alice_bridge.prompt_builder import build_prompt
from alice_bridge.providers import ProviderProfile
from alice_bridge.session_manager import SessionStore, Turn

logger = logging.getLogger(__name__)

CLOSING_KEYWORDS = frozenset({"пока", "хватит", "стоп"})
FAREWELL = "Спасибо за разговор! До новых встреч."
INVALID_REQUEST = "Некорректный формат запроса."

_WORD = re.compile(r"\w+")


def is_closing(text: str) -> bool:
    return any(word in CLOSING_KEYWORDS for word in _WORD.findall(text.lower()))


class DialogService:
    def __init__(self, profile: ProviderProfile, store: SessionStore, client):
        self.profile = profile
        self.store = store
        self.client = client

    async def handle(self, req: AliceRequest) -> AliceResponse:
        session = self.store.get_or_create(req.session.session_id, req.session.new)
        text = req.request.original_utterance.strip()

        if not text:
            greeting = self.profile.greeting
            self.store.append(session, Turn("assistant", greeting))
            return AliceResponse.say(greeting)

        if is_closing(text):
            return AliceResponse.say(FAREWELL, end_session=True)

        self.store.append(session, Turn("user", text))
        try:
            reply = await self._ask(session.history)
        except UpstreamError as e:
            logger.error("❌ [Session %s] upstream failed: %s", session.session_id, e)
            return AliceResponse.say(self.profile.apology)
        except Exception:
            logger.exception("❌ [Session %s] unexpected error in /alice", session.session_id)
            return AliceResponse.say(self.profile.apology)

        self.store.append(session, Turn("assistant", reply))
        return AliceResponse.say(reply)

    async def _ask(self, history) -> str:
        messages = build_prompt(self.profile, history)
        raw = await self.client.complete(messages)
        reply = process_response(raw, self.profile.stop_markers)
        if not reply:
            raise UpstreamError("reply is empty after post-processing")
        return truncate_reply(reply)
