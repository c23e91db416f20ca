"""
llm_service.py

提供：
- 回答生成（一次性返回 / 流式返回）
- 单条问题的分类（category + sentiment）

依赖：
    pip install litellm

The gateway fails closed: classification degrades to {Other, Neutral},
one-shot generation degrades to a fixed apology string. Streamed generation
raises GenerationError and the caller keeps whatever it already received.
Nothing is retried.
"""

from __future__ import annotations

import json
import logging
import re
from typing import AsyncIterator, Dict, List, Optional

import litellm
from litellm import acompletion

from ..config import Config
from ..config.config import LLMConfig
from ..errors import GenerationError
from ..model.helpdesk import QueryAnalysis, QueryCategory, Sentiment

logger = logging.getLogger(__name__)

APOLOGY_TEXT = "An error occurred while processing your request. Please try again later."
FALLBACK_TEXT = "I am having trouble understanding. Please contact support."

History = List[Dict[str, str]]


def init_litellm():
    litellm.drop_params = True
    if Config.llm.api_key:
        litellm.api_key = Config.llm.api_key
    if Config.llm.api_base:
        litellm.api_base = Config.llm.api_base


def build_system_prompt(university_name: str, faq_context: str) -> str:
    return f"""You are an elite Student Helpdesk AI Bot for "{university_name}".
Your goals:
1. Provide helpful, accurate, and polite information to students.
2. If you are unsure, provide the contact for the specific department.
3. Use the following FAQ context if relevant:
{faq_context}

4. Support both English and Urdu. If the student speaks Urdu, respond in Urdu.
5. Keep responses concise and structured.
"""


def build_classification_prompt(query: str) -> str:
    categories = ", ".join(c.value for c in QueryCategory)
    sentiments = ", ".join(s.value for s in Sentiment)
    return f"""Analyze the following student query and return JSON only.
Query: "{query}"

Categories: {categories}.
Sentiments: {sentiments}.

Respond with an object of the form {{"category": "<one category>", "sentiment": "<one sentiment>"}}.
"""


def _strip_code_fence(text: str) -> str:
    """Some providers wrap JSON mode output in ```json fences."""
    match = re.search(r"```(?:json)?\s*(.*?)```", text, flags=re.DOTALL)
    return match.group(1) if match else text


def parse_analysis(raw: Optional[str]) -> QueryAnalysis:
    """
    Parse classifier output.

    Unknown category / sentiment values map to Other / Neutral;
    anything that is not a JSON object raises ValueError.
    """
    data = json.loads(_strip_code_fence(raw or "{}"))
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return QueryAnalysis(
        category=data.get("category"),
        sentiment=data.get("sentiment"),
    )


class LanguageModelGateway:
    """
    Contract used by the chat service.

    Subclasses implement _classify / _generate / _stream; the public
    methods add the fail-closed behaviour and logging.
    """

    async def classify(self, query: str) -> QueryAnalysis:
        try:
            return await self._classify(query)
        except Exception as e:
            logger.warning(f"⚠️ Classification failed, using defaults: {e}")
            return QueryAnalysis.default()

    async def generate(self, query: str, history: History, context: str) -> str:
        try:
            text = await self._generate(query, history, context)
        except Exception as e:
            logger.error(f"❌ Generation failed: {e}")
            return APOLOGY_TEXT
        return text or FALLBACK_TEXT

    async def generate_stream(
        self,
        query: str,
        history: History,
        context: str,
    ) -> AsyncIterator[str]:
        try:
            async for delta in self._stream(query, history, context):
                if delta:
                    yield delta
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(str(e)) from e

    async def _classify(self, query: str) -> QueryAnalysis:
        raise NotImplementedError

    async def _generate(self, query: str, history: History, context: str) -> Optional[str]:
        raise NotImplementedError

    def _stream(self, query: str, history: History, context: str) -> AsyncIterator[str]:
        raise NotImplementedError


class LiteLLMGateway(LanguageModelGateway):
    """Gateway backed by litellm (Gemini by default, any litellm provider works)."""

    def __init__(
        self,
        llm_config: Optional[LLMConfig] = None,
        university_name: Optional[str] = None,
    ):
        self.llm_config = llm_config or Config.llm
        self.university_name = university_name or Config.university_name

    def _build_messages(self, query: str, history: History, context: str) -> History:
        messages = [
            {"role": "system", "content": build_system_prompt(self.university_name, context)},
        ]
        messages.extend(history)
        messages.append({"role": "user", "content": query})
        return messages

    async def _generate(self, query: str, history: History, context: str) -> Optional[str]:
        resp = await acompletion(
            messages=self._build_messages(query, history, context),
            temperature=self.llm_config.temperature,
            **self.llm_config.to_litellm_params(),
        )
        return resp.choices[0].message.content

    async def _stream(self, query: str, history: History, context: str) -> AsyncIterator[str]:
        resp = await acompletion(
            messages=self._build_messages(query, history, context),
            temperature=self.llm_config.temperature,
            stream=True,
            **self.llm_config.to_litellm_params(),
        )
        async for chunk in resp:
            if chunk.choices and chunk.choices[0].delta.content:
                yield chunk.choices[0].delta.content

    async def _classify(self, query: str) -> QueryAnalysis:
        resp = await acompletion(
            messages=[{"role": "user", "content": build_classification_prompt(query)}],
            response_format={"type": "json_object"},
            temperature=0,
            **self.llm_config.to_litellm_params(),
        )
        analysis = parse_analysis(resp.choices[0].message.content)
        logger.info(f"🏷️ Classified query as {analysis.category.value} / {analysis.sentiment.value}")
        return analysis
