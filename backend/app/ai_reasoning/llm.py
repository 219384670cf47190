import logging
from openai import AsyncOpenAI
from core.config import AI_EVALUATION_MODEL, OPENAI_API_KEY

logger = logging.getLogger("app.ai_reasoning.llm")

# Built on first use so the app starts without OPENAI_API_KEY.
client: AsyncOpenAI | None = None

JSON_SYSTEM_PROMPT = "You are a strict JSON generator. Output JSON only."
TEXT_SYSTEM_PROMPT = "You are a senior interviewer. Output plain text only."


class CollaboratorError(RuntimeError):
    """The generative-AI collaborator failed or returned an unusable answer."""


def get_client() -> AsyncOpenAI:
    global client
    if client is None:
        client = AsyncOpenAI(api_key=OPENAI_API_KEY or None)
    return client


async def call_llm(prompt: str, json_mode: bool = True) -> str:
    """
    Sends prompt to LLM and returns raw text response.
    With json_mode the caller parses the JSON string.

    Single attempt, no deadline. Any failure, including a missing API key,
    is raised as CollaboratorError.
    """
    if not str(prompt or "").strip():
        return "{}" if json_mode else ""

    try:
        response = await get_client().chat.completions.create(
            model=AI_EVALUATION_MODEL,
            messages=[
                {
                    "role": "system",
                    "content": JSON_SYSTEM_PROMPT if json_mode else TEXT_SYSTEM_PROMPT,
                },
                {
                    "role": "user",
                    "content": prompt,
                },
            ],
            temperature=0.4,
        )
    except Exception as exc:
        logger.warning("call_llm failure | err=%s", exc)
        raise CollaboratorError(f"LLM call failed: {exc}") from exc

    message = response.choices[0].message.content
    return str(message or "").strip()
