"""
services/prompt_service.py

Builds the system prompt Swift speaks with:
  persona template (by language) + location/time + optional PubMed references,
then wraps it with the conversation into the message list sent to the LLM.

Adding a language = adding a row to PERSONAS (and VOICES in tts_service).
"""

from typing import Optional, Sequence

from app.models.request import ConversationTurn
from app.models.response import AssembledPrompt, Language, LiteratureRecord
from app.services.context_service import UNKNOWN

ABSTRACT_EXCERPT_CHARS = 200

PERSONAS: dict[Language, str] = {
    Language.EN: """- You are Swift, a friendly and helpful voice assistant.
- Respond briefly to the user's request, and do not provide unnecessary information.
- If you don't understand the user's request, ask for clarification.
- You do not have access to up-to-date information, so you should not provide real-time data.
- You are not capable of performing actions other than responding to the user.
- Do not use markdown, emojis, or other formatting in your responses. Respond in a way easily spoken by text-to-speech software.
- User location is {location}.
- The current time is {time}.
- Your large language model is Llama 3, created by Meta, the 8 billion parameter version. It is hosted on Groq, an AI infrastructure company that builds fast inference technology.
- Your text-to-speech model is Sonic, created and hosted by Cartesia, a company that builds fast and realistic speech synthesis technology.
- You are built with FastAPI.""",
    Language.ZH_TW: """- 你是 Swift，一個友善且樂於助人的語音助手。
- 請使用繁體中文回應用戶的請求，並保持簡潔。
- 如果你不理解用戶的請求，請尋求澄清。
- 你沒有獲取即時信息的能力，所以不應提供實時數據。
- 你不能執行回應以外的其他操作。
- 請使用適合語音播放的自然中文，避免使用標記語言、表情符號或其他格式。
- 用戶位置是 {location}。
- 現在的時間是 {time}。
- 你的大型語言模型是 Llama 3，由 Meta 創建的 80 億參數版本。它託管在 Groq 上，這是一家開發快速推理技術的 AI 基礎設施公司。
- 你的文字轉語音模型是 Sonic，由 Cartesia 創建和託管，這是一家開發快速且逼真的語音合成技術的公司。
- 你使用 FastAPI 構建。""",
}


def format_references(records: Sequence[LiteratureRecord]) -> str:
    """Numbered block in search order; abstracts cut to ABSTRACT_EXCERPT_CHARS."""
    block = "\n\nReferenced research:\n"
    for i, record in enumerate(records, start=1):
        excerpt = (record.abstract or "No abstract available")[:ABSTRACT_EXCERPT_CHARS]
        block += (
            f'{i}. "{record.title}" ({record.pub_date or "n.d."})\n'
            f"   Key findings: {excerpt}...\n"
        )
    return block


def compose_system_prompt(
    language: Language,
    location: Optional[str] = None,
    current_time: Optional[str] = None,
    records: Optional[Sequence[LiteratureRecord]] = None,
) -> str:
    template = PERSONAS.get(language, PERSONAS[Language.EN])
    prompt = template.format(
        location=location or UNKNOWN,
        time=current_time or UNKNOWN,
    )
    if records:
        prompt += format_references(records)
    return prompt


def assemble_prompt(
    system_prompt: str,
    history: Sequence[ConversationTurn],
    transcript: str,
) -> AssembledPrompt:
    messages = [{"role": "system", "content": system_prompt}]
    messages.extend(turn.as_message() for turn in history)
    messages.append({"role": "user", "content": transcript})
    return AssembledPrompt(system_prompt=system_prompt, messages=tuple(messages))
