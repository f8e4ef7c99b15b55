"""Schemas for the text-to-speech endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TextToSpeechRequest(BaseModel):
    text: str = Field(..., min_length=1)
    voice_id: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("voiceId", "voice_id"),
        serialization_alias="voiceId",
    )
    output_format: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("outputFormat", "output_format"),
        serialization_alias="outputFormat",
    )
    engine: Optional[str] = None
    language_code: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("languageCode", "language_code"),
        serialization_alias="languageCode",
    )

    model_config = ConfigDict(populate_by_name=True)


class TextToSpeechResponse(BaseModel):
    success: bool
    audio_data: Optional[str] = Field(None, serialization_alias="audioData")
    audio_format: Optional[str] = Field(None, serialization_alias="audioFormat")
    voice_id: Optional[str] = Field(None, serialization_alias="voiceId")
    text_length: int = Field(0, serialization_alias="textLength")
    estimated_duration_seconds: int = Field(0, serialization_alias="estimatedDurationSeconds")

    model_config = ConfigDict(populate_by_name=True)


class VoiceView(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    gender: Optional[str] = None
    engines: List[str] = Field(default_factory=list)


class VoiceListResponse(BaseModel):
    language_code: str = Field(..., serialization_alias="languageCode")
    voices: List[VoiceView] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


__all__ = [
    "TextToSpeechRequest",
    "TextToSpeechResponse",
    "VoiceListResponse",
    "VoiceView",
]
