"""
Typed view of the Gemini generateContent response.

A part is one of TextPart, InlineDataPart or OtherPart, picked by which key
it carries. The API emits camelCase (inlineData, mimeType); snake_case keys
are accepted as well.
"""
from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Tag
from pydantic.alias_generators import to_camel


class GeminiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class InlineData(GeminiModel):
    mime_type: Optional[str] = None
    data: str


class TextPart(GeminiModel):
    text: str


class InlineDataPart(GeminiModel):
    inline_data: InlineData


class OtherPart(GeminiModel):
    """Any part kind we do not consume (function calls, thoughts, ...)"""
    model_config = ConfigDict(extra="allow")


def _part_kind(value: Any) -> str:
    if isinstance(value, dict):
        inline = value.get("inlineData", value.get("inline_data"))
        if isinstance(inline, dict) and inline.get("data"):
            return "inline_data"
        if isinstance(value.get("text"), str):
            return "text"
        return "other"
    if isinstance(value, InlineDataPart):
        return "inline_data"
    if isinstance(value, TextPart):
        return "text"
    return "other"


Part = Annotated[
    Union[
        Annotated[InlineDataPart, Tag("inline_data")],
        Annotated[TextPart, Tag("text")],
        Annotated[OtherPart, Tag("other")],
    ],
    Discriminator(_part_kind),
]


class Content(GeminiModel):
    role: Optional[str] = None
    parts: Optional[List[Part]] = None


class Candidate(GeminiModel):
    content: Optional[Content] = None
    finish_reason: Optional[str] = None


class PromptFeedback(GeminiModel):
    block_reason: Optional[str] = None


class GenerateContentResponse(GeminiModel):
    candidates: Optional[List[Candidate]] = None
    prompt_feedback: Optional[PromptFeedback] = None

    def first_inline_image(self) -> Optional[InlineData]:
        """Inline data of the first image part in the first candidate"""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None:
            return None
        for part in content.parts or []:
            if isinstance(part, InlineDataPart):
                return part.inline_data
        return None


class GeminiErrorDetail(GeminiModel):
    code: Optional[int] = None
    message: Optional[str] = None
    status: Optional[str] = None


class GeminiErrorBody(GeminiModel):
    error: Optional[GeminiErrorDetail] = None
