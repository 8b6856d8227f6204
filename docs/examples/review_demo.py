"""
Example: ask for a grammar review and get a typed `Review` back.

Run:
    STRICTCHAT_API_KEY=... uv run python docs/examples/review_demo.py
"""

from __future__ import annotations

import asyncio

from pydantic import BaseModel, Field

from strictchat import ModelRefusalError, StructuredChatClient


class Review(BaseModel):
    explanation: str = Field(
        description="An explanation of the incorrect vocabulary and grammar points."
    )
    incorrect_words: list[str] | None = None
    incorrect_grammars: list[str] | None = None


async def main() -> None:
    client = StructuredChatClient.from_env().with_system_role(
        "You are a helpful English tutor."
    )

    prompt = "Explain the errors in the following sentences: 'He go to school yesterday.'"
    try:
        review = await client.call(prompt, Review)
    except ModelRefusalError as e:
        print("refused:", e.refusal)
        return

    print("schema name:", client.build_request(prompt, Review).schema_name)
    print(review.model_dump_json(indent=2))


if __name__ == "__main__":
    asyncio.run(main())
