"""
Generative text features: product copywriting and the shopping assistant.

Both calls go to a hosted chat model and never raise; any failure is logged
and answered with a fixed fallback sentence.
"""

import logging
from typing import List, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from config import Settings
from schemas import ChatTurn, Product

logger = logging.getLogger(__name__)

DESCRIPTION_FALLBACK = "Error generating description. Please check your API Key."
DESCRIPTION_EMPTY = "Could not generate description."
CHAT_FALLBACK = "I'm currently offline (API Error). Please try again later."
CHAT_EMPTY = "I'm having trouble thinking right now."

DESCRIPTION_PROMPT = """\
You are an expert e-commerce copywriter for IntelliVend.
Write a compelling, SEO-friendly product description (max 100 words) for a product.

Product Name: {name}
Category: {category}
Keywords: {keywords}

Tone: Professional yet persuasive.
Return ONLY the description text, no other conversational filler.
"""

ASSISTANT_SYSTEM_PROMPT = """\
You are the "IntelliVend Assistant", an intelligent AI shopping assistant for the IntelliVend marketplace.
Your goal is to help users find products, compare prices, and answer questions about the catalog.

Current Product Catalog:
{catalog}

Rules:
1. Be helpful, concise, and friendly.
2. If suggesting a product, mention its Name and Price.
3. If the user asks about something not in the catalog, politely suggest they check back later or recommend a similar category if available.
4. Keep responses under 3 sentences unless detailed comparison is asked.
"""


def build_chat_model(settings: Settings) -> BaseChatModel:
    api_key = settings.api_key
    if not api_key:
        logger.error("API_KEY is missing from environment")
    return ChatOpenAI(
        model=settings.ai_model,
        base_url=settings.ai_base_url,
        api_key=api_key or "dummy-key",
        max_retries=0,
    )


def catalog_summary(products: List[Product]) -> str:
    return "\n".join(
        f"- ID: {p.id}, Name: {p.name}, Price: ${p.price}, Category: {p.category}, Vendor: {p.vendor_name}"
        for p in products
    )


def _text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, list):
        content = "".join(part if isinstance(part, str) else part.get("text", "") for part in content)
    return (content or "").strip()


class ShoppingAssistant:
    def __init__(self, model: BaseChatModel):
        self.model = model

    async def generate_description(self, name: str, category: str, keywords: str) -> str:
        prompt = DESCRIPTION_PROMPT.format(name=name, category=category, keywords=keywords)
        try:
            reply = await self.model.ainvoke([HumanMessage(content=prompt)])
        except Exception:
            logger.exception("Generate description failed for %r", name)
            return DESCRIPTION_FALLBACK
        return _text(reply) or DESCRIPTION_EMPTY

    async def chat(self, message: str, products: List[Product], history: Optional[List[ChatTurn]] = None) -> str:
        messages: List[BaseMessage] = [
            SystemMessage(content=ASSISTANT_SYSTEM_PROMPT.format(catalog=catalog_summary(products)))
        ]
        for turn in history or []:
            if turn.role == "user":
                messages.append(HumanMessage(content=turn.text))
            else:
                messages.append(AIMessage(content=turn.text))
        messages.append(HumanMessage(content=message))
        try:
            reply = await self.model.ainvoke(messages)
        except Exception:
            logger.exception("Shopping assistant chat failed")
            return CHAT_FALLBACK
        return _text(reply) or CHAT_EMPTY
