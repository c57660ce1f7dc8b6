import os

from openai import OpenAI

DEFAULT_MODEL = "gpt-4o-mini"


def get_openai_client(api_key=None, timeout=None) -> OpenAI:
    api_key = api_key or os.environ.get("OPENAI_API_KEY")
    if not api_key:
        raise RuntimeError("OPENAI_API_KEY is not set")
    if timeout is None:
        return OpenAI(api_key=api_key)
    return OpenAI(api_key=api_key, timeout=timeout, max_retries=0)


def call_chat_text(
    system_prompt,
    user_content,
    *,
    client=None,
    model=None,
    max_tokens=30,
    temperature=0.7,
    logger=None,
):
    """Call OpenAI chat completion and return response content or None."""
    try:
        client = client or get_openai_client()
        response = client.chat.completions.create(
            model=model or os.environ.get("OPENAI_MODEL", DEFAULT_MODEL),
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content
    except Exception as exc:
        if logger:
            logger.warning("OpenAI API error: %s", exc)
        return None
