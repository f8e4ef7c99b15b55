"""HTTP tests for the /api/chatbot endpoints with fake collaborators."""

from __future__ import annotations

import base64
import importlib
import logging

import pytest
from fastapi.testclient import TestClient

from conftest import FakePlaces, FakeReasoner, FakeStt, FakeTts
from app.controllers.dependencies import get_places, get_reasoner, get_stt, get_tts
from app.main import app
from app.pipelines.chat.flow import PIPELINE_STAGES
from app.pipelines.chat.handlers import UNKNOWN_APOLOGY
from app.pipelines.chat.ingestion import STT_FALLBACK_TEXT


@pytest.fixture
def collaborators():
    fakes = {
        "reasoner": FakeReasoner(),
        "stt": FakeStt(),
        "places": FakePlaces(),
        "tts": FakeTts(),
    }
    app.dependency_overrides[get_reasoner] = lambda: fakes["reasoner"]
    app.dependency_overrides[get_stt] = lambda: fakes["stt"]
    app.dependency_overrides[get_places] = lambda: fakes["places"]
    app.dependency_overrides[get_tts] = lambda: fakes["tts"]

    yield fakes

    app.dependency_overrides.clear()


@pytest.fixture
def client(collaborators) -> TestClient:
    return TestClient(app)


def test_place_search_for_gangnam_station_returns_mock_record(client, collaborators):
    response = client.post(
        "/api/chatbot/chat",
        json={"message": "강남역 중식집 추천해줘", "sessionId": "session-1"},
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["intent"] == "PLACE_SEARCH"
    assert payload["confidence"] == "high"
    assert payload["sessionId"] == "session-1"
    assert payload["extractedInfo"]["location"] == "강남역"
    assert payload["extractedInfo"]["keywords"] == ["중식", "추천"]

    record = payload["structuredData"]
    assert record["source"] == "mock"
    assert record["mockReason"] == "empty_result"
    assert record["id"].startswith("mock-")
    assert record["name"] in payload["message"]
    assert "4.5" in payload["message"]
    assert 3 <= len(record["nearby"]) <= 5

    assert base64.b64decode(payload["audioData"]) == b"ID3-fake-mp3"
    assert payload["audioFormat"] == "mp3"
    assert payload["audioDurationSeconds"] >= 1
    spoken = collaborators["tts"].calls[0]["text"]
    assert "**" not in spoken
    assert collaborators["places"].searches == [("강남역 중식 추천", "강남역", 5000)]


def test_live_place_result_is_formatted(client, collaborators):
    collaborators["places"].results = [
        {"place_id": "p1", "name": "진진", "rating": 4.6, "formatted_address": "서울 마포구"},
        {"place_id": "p2", "name": "하하", "rating": 4.2},
    ]
    collaborators["places"].details_payload = {
        "place_id": "p1",
        "name": "진진",
        "rating": 4.6,
        "formatted_address": "서울 마포구",
        "weekday_text": ["월요일: 오전 11:00 ~ 오후 10:00"],
        "reviews": [{"author_name": "민지", "text": "훌륭해요", "rating": 5}],
    }

    response = client.post("/api/chatbot/chat", json={"message": "홍대 중식 맛집 추천"})

    payload = response.json()
    assert payload["success"] is True
    assert payload["structuredData"]["source"] == "live"
    assert payload["structuredData"]["nearby"][0]["name"] == "하하"
    assert "진진" in payload["message"]
    assert "월요일: 오전 11:00 ~ 오후 10:00" in payload["message"]
    assert "민지: 훌륭해요" in payload["message"]


def test_missing_input_returns_400_with_generated_session(client):
    response = client.post("/api/chatbot/chat", json={})

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["errorMessage"] == "텍스트 메시지가 필요합니다."
    assert payload["sessionId"]


def test_missing_input_echoes_session_id(client):
    response = client.post("/api/chatbot/chat", json={"message": "   ", "sessionId": "abc"})

    assert response.status_code == 400
    assert response.json()["sessionId"] == "abc"


def test_invalid_audio_on_chat_returns_400(client):
    response = client.post("/api/chatbot/chat", json={"audioData": "***"})

    assert response.status_code == 400
    assert response.json()["errorMessage"] == "유효하지 않은 오디오 데이터입니다."


def test_audio_input_is_transcribed_before_processing(client, collaborators):
    collaborators["reasoner"].intent = "GENERAL_CHAT"
    audio = base64.b64encode(b"\x00\x01pcm").decode("ascii")

    response = client.post(
        "/api/chatbot/chat",
        json={"audioData": audio, "message": "ignored", "includeAudio": False},
    )

    payload = response.json()
    assert payload["success"] is True
    assert payload["extractedInfo"]["originalQuery"] == "홍대 카페 추천해줘"
    assert "audioData" not in payload
    assert collaborators["stt"].calls[0] == (b"\x00\x01pcm", "ko-KR", "pcm", 16000)


def test_stt_failure_falls_back_to_fixed_text(client, collaborators):
    collaborators["stt"].error = RuntimeError("transcribe down")
    collaborators["reasoner"].intent = "GENERAL_CHAT"
    audio = base64.b64encode(b"pcm").decode("ascii")

    response = client.post("/api/chatbot/chat", json={"audioData": audio})

    payload = response.json()
    assert payload["success"] is True
    assert payload["extractedInfo"]["originalQuery"] == STT_FALLBACK_TEXT


def test_classification_failure_resolves_to_unknown(client, collaborators):
    collaborators["reasoner"].fail = {"classify", "answer"}

    response = client.post("/api/chatbot/chat", json={"message": "안녕하세요"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["intent"] == "UNKNOWN"
    assert payload["confidence"] == "low"
    assert payload["message"] == UNKNOWN_APOLOGY


def test_stray_classifier_label_is_coerced(client, collaborators):
    collaborators["reasoner"].intent = "PLACE_SEARCH please"
    collaborators["reasoner"].answer = "조금 더 자세히 알려주세요."

    response = client.post("/api/chatbot/chat", json={"message": "음..."})

    payload = response.json()
    assert payload["intent"] == "UNKNOWN"
    assert payload["message"] == "조금 더 자세히 알려주세요."


def test_unconfigured_reasoner_returns_503(client, collaborators):
    collaborators["reasoner"].configured = False

    response = client.post("/api/chatbot/chat", json={"message": "안녕"})

    assert response.status_code == 503
    assert response.json()["errorMessage"] == "AI 서비스 설정이 완료되지 않았습니다."


def test_unexpected_failure_returns_500_with_session(client, collaborators):
    async def broken() -> bool:
        raise RuntimeError("boom")

    collaborators["reasoner"].is_configured = broken

    response = client.post("/api/chatbot/chat", json={"message": "안녕", "sessionId": "s-9"})

    assert response.status_code == 500
    payload = response.json()
    assert payload["success"] is False
    assert payload["errorMessage"] == "서비스 처리 중 오류가 발생했습니다."
    assert payload["sessionId"] == "s-9"


def test_unexpected_failure_is_logged_with_stage(client, collaborators, caplog):
    async def broken() -> bool:
        raise RuntimeError("boom")

    collaborators["reasoner"].is_configured = broken

    with caplog.at_level(logging.ERROR, logger="app.services.chat_pipeline"):
        client.post("/api/chatbot/chat", json={"message": "안녕", "sessionId": "s-10"})

    assert any(
        record.getMessage() == "stage=pipeline session=s-10 chat pipeline failed"
        for record in caplog.records
    )


def test_tts_failure_keeps_message(client, collaborators):
    collaborators["tts"].error = RuntimeError("polly down")
    collaborators["reasoner"].intent = "INFORMATION_REQUEST"

    response = client.post("/api/chatbot/chat", json={"message": "비빔밥은 어디 음식이야?"})

    payload = response.json()
    assert payload["success"] is True
    assert payload["message"] == "도움이 되는 답변입니다."
    assert "audioData" not in payload


def test_stt_endpoint_rejects_invalid_base64(client):
    response = client.post(
        "/api/chatbot/stt",
        json={"audioData": "not base64!!", "sessionId": "s-1"},
    )

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["errorMessage"]
    assert payload["sessionId"] == "s-1"


def test_stt_endpoint_requires_audio(client):
    response = client.post("/api/chatbot/stt", json={})

    assert response.status_code == 400
    assert response.json()["errorMessage"] == "오디오 데이터가 필요합니다."


def test_stt_endpoint_returns_text(client):
    audio = base64.b64encode(b"pcm-bytes").decode("ascii")

    response = client.post("/api/chatbot/stt", json={"audioData": audio, "sessionId": "s-2"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "text": "홍대 카페 추천해줘",
        "sessionId": "s-2",
        "degraded": False,
    }


def test_stt_endpoint_reports_degraded_transcription(client, collaborators):
    collaborators["stt"].error = RuntimeError("down")
    audio = base64.b64encode(b"pcm").decode("ascii")

    response = client.post("/api/chatbot/stt", json={"audioData": audio})

    payload = response.json()
    assert response.status_code == 200
    assert payload["success"] is False
    assert payload["degraded"] is True
    assert payload["text"] == STT_FALLBACK_TEXT


def test_stt_endpoint_empty_transcript_is_not_degraded(client, collaborators):
    collaborators["stt"].text = "   "
    audio = base64.b64encode(b"pcm").decode("ascii")

    response = client.post("/api/chatbot/stt", json={"audioData": audio})

    payload = response.json()
    assert response.status_code == 200
    assert payload["success"] is False
    assert payload["degraded"] is False
    assert "text" not in payload


def test_status_reports_each_collaborator(client, collaborators):
    collaborators["places"].configured = False

    response = client.get("/api/chatbot/status")

    assert response.status_code == 200
    payload = response.json()
    assert payload["services"] == {
        "bedrock": True,
        "stt": True,
        "preprocessing": True,
        "google_places": False,
        "polly": True,
    }
    assert payload["overall"] is False


def test_diagnostic_endpoint_skips_audio(client, collaborators):
    response = client.post("/api/chatbot/test", json={"message": "홍대 카페 추천"})

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["intent"] == "PLACE_SEARCH"
    assert payload["extractedInfo"]["location"] == "홍대"
    assert collaborators["tts"].calls == []


def test_chat_turn_is_counted(client):
    from prometheus_client import REGISTRY

    before = REGISTRY.get_sample_value(
        "chat_requests_total", {"intent": "PLACE_SEARCH", "success": "true"}
    ) or 0.0

    client.post("/api/chatbot/chat", json={"message": "신촌 맛집"})

    after = REGISTRY.get_sample_value(
        "chat_requests_total", {"intent": "PLACE_SEARCH", "success": "true"}
    )
    assert after == before + 1


def test_health_reports_service_identity(client):
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "healthy"
    assert set(payload) == {"status", "service", "version"}


def test_stage_map_points_at_real_modules():
    assert [stage.order for stage in PIPELINE_STAGES] == list(range(1, 7))
    for stage in PIPELINE_STAGES:
        assert importlib.import_module(stage.module).__name__ == stage.module
