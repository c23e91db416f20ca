# edubot/service/webhook_simulator.py

"""
Webhook Simulator - 模拟 WhatsApp / Facebook 消息事件

Each simulated message becomes a brand-new conversation, answered through
the chat service's one-shot path with no prior history. The in/out event
lines are display-only: the outgoing line is logged after a fixed delay,
persistence has already happened by then.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Dict, List, Optional

from edubot.config import Config
from edubot.model.helpdesk import (
    Conversation,
    Platform,
    WebhookDirection,
    WebhookEvent,
    new_conversation_id,
)
from edubot.service.chat_service import ChatService, ExchangeMode

logger = logging.getLogger(__name__)

# platform → (conversation id prefix, student id); both channels share the demo sender id
CHANNELS: Dict[Platform, tuple] = {
    Platform.WHATSAPP: ("wa-", "WTS-001"),
    Platform.FACEBOOK: ("fb-", "WTS-001"),
}


class WebhookSimulator:
    """Fabricates inbound platform messages locally."""

    def __init__(
        self,
        chat_service: ChatService,
        response_delay: Optional[float] = None,
        max_events: Optional[int] = None,
    ):
        self.chat_service = chat_service
        self.response_delay = (
            Config.simulator.response_delay_seconds if response_delay is None else response_delay
        )
        self._events: Deque[WebhookEvent] = deque(
            maxlen=max_events or Config.simulator.max_events
        )

    @property
    def events(self) -> List[WebhookEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()

    async def simulate(self, platform: Platform, text: str) -> Optional[Conversation]:
        """
        Process one incoming webhook message.

        Returns:
            The new conversation, or None when text is blank.

        Raises:
            ValueError: platform is not a messaging channel.
        """
        if platform not in CHANNELS:
            raise ValueError(f"No webhook channel for platform {platform.value}")

        text = (text or "").strip()
        if not text:
            return None

        prefix, student_id = CHANNELS[platform]
        self._log(WebhookDirection.INCOMING, platform, text)

        session = self.chat_service.open_session(
            student_id=student_id,
            student_name=f"{platform.value} User",
            platform=platform,
            conversation_id=new_conversation_id(prefix),
        )
        conversation = await self.chat_service.submit_query(
            session, text, mode=ExchangeMode.SYNC
        )

        await asyncio.sleep(self.response_delay)
        self._log(WebhookDirection.OUTGOING, platform, conversation.last_message.text)
        return conversation

    def _log(self, direction: WebhookDirection, platform: Platform, text: str) -> None:
        event = WebhookEvent(direction=direction, platform=platform, text=text)
        self._events.append(event)
        if direction is WebhookDirection.INCOMING:
            logger.info(f"📥 WEBHOOK_INCOMING [{platform.value}] {text}")
        else:
            logger.info(f"📤 WEBHOOK_OUTGOING [{platform.value}] {text}")
