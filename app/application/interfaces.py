"""Collaborator contracts consumed by the chat pipeline.

Concrete implementations live in ``app.services``; tests substitute fakes.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class SpeechToTextInterface(ABC):
    """Speech recognition contract"""

    @abstractmethod
    async def decode(
        self,
        audio_bytes: bytes,
        language_code: str,
        encoding: str,
        sample_rate: int,
    ) -> str:
        ...

    @abstractmethod
    async def is_available(self) -> bool:
        ...


class ReasonerInterface(ABC):
    """Language-reasoning contract used for rewriting, classifying and answering"""

    @abstractmethod
    async def complete(self, prompt: str) -> str:
        ...

    @abstractmethod
    async def is_configured(self) -> bool:
        ...


class PlaceSearchInterface(ABC):
    """Place lookup contract"""

    @abstractmethod
    async def search(
        self,
        query: str,
        location: Optional[str] = None,
        radius_meters: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def details(self, place_id: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def is_configured(self) -> bool:
        ...


class TextToSpeechInterface(ABC):
    """Speech synthesis contract"""

    @abstractmethod
    async def synthesize(
        self,
        text: str,
        voice_id: str,
        language_code: str,
        output_format: str,
        engine: str,
    ) -> bytes:
        ...

    @abstractmethod
    async def list_voices(self, language_code: str) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    async def is_available(self) -> bool:
        ...
