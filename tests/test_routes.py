from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import httpx
import openai
import pytest
from fastapi.testclient import TestClient

from api.config import Config
from fakes import FakeOpenAI, staged_files, word
from pipelines.meeting_minutes_service import build_minutes_prompt
from server import create_app

SILENT_WAV = b"RIFF$\x00\x00\x00WAVEfmt " + b"\x00" * 64

FIXED_MINUTES = {
    "resumo_executivo": "A equipe decidiu lançar o produto em março.",
    "participantes": ["João"],
    "topicos_discutidos": [{"titulo": "Lançamento", "descricao": "Definição da data de lançamento"}],
    "decisoes_tomadas": [{"decisao": "Lançar o produto em março", "responsavel": "João", "prazo": "março"}],
    "encaminhamentos": [{"tarefa": "Coordenar o lançamento", "responsavel": "João", "prazo": "março"}],
    "observacoes": "",
}


def audio_files(content: bytes = SILENT_WAV, name: str = "silencio.wav") -> dict:
    return {"audio": (name, content, "audio/wav")}


def connection_error(url: str) -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", url))


# =============================================================================
# /health
# =============================================================================

def test_health_reports_configured_provider(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "openai": "connected"}


def test_health_reports_missing_credential(tmp_path: Path) -> None:
    app = create_app(Config(upload_dir=tmp_path), client=FakeOpenAI())
    with TestClient(app) as test_client:
        response = test_client.get("/health")

    assert response.json()["openai"] == "not configured"


def test_responses_carry_request_id(client: TestClient) -> None:
    response = client.get("/health")

    assert response.headers["X-Request-ID"]
    assert "X-Processing-Time" in response.headers


def test_upload_directory_created_at_startup(config: Config, fake_openai: FakeOpenAI) -> None:
    assert not config.upload_dir.exists()

    with TestClient(create_app(config, client=fake_openai)):
        assert config.upload_dir.is_dir()


# =============================================================================
# /transcribe
# =============================================================================

def test_transcribe_silent_audio_end_to_end(client: TestClient, fake_openai: FakeOpenAI, upload_dir: Path) -> None:
    fake_openai.transcriptions.response = SimpleNamespace(text="", words=[], duration=3.0)

    response = client.post("/transcribe", files=audio_files())

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["transcription"] == ""
    assert body["words"] == []
    assert body["duration"] == 3.0
    assert isinstance(body["processingTime"], float)
    assert staged_files(upload_dir) == []


def test_transcribe_returns_words(client: TestClient, fake_openai: FakeOpenAI) -> None:
    fake_openai.transcriptions.response = SimpleNamespace(
        text="Olá pessoal",
        words=[word("Olá", 0.0, 0.4), word("pessoal", 0.4, 1.1)],
        duration=1.2,
    )

    body = client.post("/transcribe", files=audio_files()).json()

    assert body["words"] == [
        {"word": "Olá", "start": 0.0, "end": 0.4},
        {"word": "pessoal", "start": 0.4, "end": 1.1},
    ]


def test_transcribe_hands_staged_file_to_provider(client: TestClient, fake_openai: FakeOpenAI, upload_dir: Path) -> None:
    seen = {}

    def inspect(call):
        seen["exists"] = call["file_path"].exists()
        seen["parent"] = call["file_path"].parent
        seen["content"] = call["file"].read()

    fake_openai.transcriptions.on_call = inspect

    client.post("/transcribe", files=audio_files())

    assert seen == {"exists": True, "parent": upload_dir, "content": SILENT_WAV}


def test_transcribe_failure_deletes_staged_file(client: TestClient, fake_openai: FakeOpenAI, upload_dir: Path) -> None:
    fake_openai.transcriptions.error = connection_error("https://api.openai.com/v1/audio/transcriptions")

    response = client.post("/transcribe", files=audio_files())

    assert response.status_code == 500
    assert response.json() == {
        "error": "Erro ao transcrever áudio",
        "details": "Connection error.",
        "code": "UPSTREAM_ERROR",
    }
    assert staged_files(upload_dir) == []


def test_unexpected_failure_mid_call_deletes_staged_file(client: TestClient, fake_openai: FakeOpenAI, upload_dir: Path) -> None:
    fake_openai.transcriptions.error = RuntimeError("stream reset")

    response = client.post("/transcribe", files=audio_files())

    assert response.status_code == 500
    assert response.json()["details"] == "stream reset"
    assert staged_files(upload_dir) == []


@pytest.mark.parametrize("path", ["/transcribe", "/process-meeting"])
def test_missing_audio_is_rejected_without_provider_calls(client: TestClient, fake_openai: FakeOpenAI, path: str) -> None:
    response = client.post(path, data={"meetingDate": "2025-03-01"})

    assert response.status_code == 400
    assert response.json()["error"] == "Nenhum arquivo enviado"
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert fake_openai.call_count == 0


def test_oversized_audio_is_rejected(fake_openai: FakeOpenAI, upload_dir: Path) -> None:
    config = Config(openai_api_key="sk-test", upload_dir=upload_dir, max_upload_size=16)
    with TestClient(create_app(config, client=fake_openai)) as test_client:
        response = test_client.post("/transcribe", files=audio_files(b"x" * 17))

    assert response.status_code == 400
    assert fake_openai.call_count == 0
    assert staged_files(upload_dir) == []


# =============================================================================
# /generate-minutes
# =============================================================================

def test_generate_minutes_echoes_model_json(client: TestClient, fake_openai: FakeOpenAI) -> None:
    fake_openai.set_minutes(FIXED_MINUTES)

    response = client.post(
        "/generate-minutes",
        json={"transcription": "Decidimos lançar o produto em março. João ficou responsável."},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["minutes"] == FIXED_MINUTES
    assert isinstance(body["processingTime"], float)


def test_generate_minutes_sends_metadata_in_prompt(client: TestClient, fake_openai: FakeOpenAI) -> None:
    client.post(
        "/generate-minutes",
        json={"transcription": "Pauta única.", "meetingDate": "2025-03-01", "startTime": "09:00", "endTime": "10:00"},
    )

    prompt = fake_openai.completions.calls[0]["messages"][1]["content"]
    assert "- Data: 2025-03-01" in prompt
    assert "- Horário: 09:00 - 10:00" in prompt


def test_generate_minutes_prompt_is_byte_identical_across_requests(client: TestClient, fake_openai: FakeOpenAI) -> None:
    payload = {"transcription": "Bom dia.", "meetingDate": "2025-03-01"}

    client.post("/generate-minutes", json=payload)
    client.post("/generate-minutes", json=payload)

    first, second = (call["messages"][1]["content"] for call in fake_openai.completions.calls)
    assert first.encode("utf-8") == second.encode("utf-8")


@pytest.mark.parametrize("payload", [{}, {"transcription": ""}, {"transcription": None}])
def test_generate_minutes_requires_transcription(client: TestClient, fake_openai: FakeOpenAI, payload: dict) -> None:
    response = client.post("/generate-minutes", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "Transcrição não fornecida"
    assert fake_openai.call_count == 0


def test_generate_minutes_rejects_non_json_body(client: TestClient) -> None:
    response = client.post("/generate-minutes", content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_generate_minutes_unparseable_completion(client: TestClient, fake_openai: FakeOpenAI) -> None:
    fake_openai.completions.content = "Aqui está a ata: {quebrado"

    response = client.post("/generate-minutes", json={"transcription": "Bom dia."})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Erro ao gerar ata"
    assert body["code"] == "PARSE_ERROR"
    assert "JSON" in body["details"]

    assert client.get("/health").status_code == 200


def test_generate_minutes_provider_failure(client: TestClient, fake_openai: FakeOpenAI) -> None:
    fake_openai.completions.error = connection_error("https://api.openai.com/v1/chat/completions")

    response = client.post("/generate-minutes", json={"transcription": "Bom dia."})

    assert response.status_code == 500
    assert response.json()["code"] == "UPSTREAM_ERROR"


# =============================================================================
# /process-meeting
# =============================================================================

def test_process_meeting_end_to_end(client: TestClient, fake_openai: FakeOpenAI, upload_dir: Path) -> None:
    transcript = "Decidimos lançar o produto em março. João ficou responsável."
    fake_openai.transcriptions.response = SimpleNamespace(
        text=transcript,
        words=[word("Decidimos", 0.0, 0.5)],
        duration=42.4,
    )
    fake_openai.set_minutes(FIXED_MINUTES)

    response = client.post(
        "/process-meeting",
        files=audio_files(),
        data={"meetingDate": "2025-03-01", "startTime": "14:00", "endTime": "15:00"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["transcription"] == transcript
    assert body["words"] == [{"word": "Decidimos", "start": 0.0, "end": 0.5}]
    assert body["duration"] == 42.4
    assert body["minutes"] == FIXED_MINUTES
    assert isinstance(body["processingTime"], float)
    assert staged_files(upload_dir) == []


def test_process_meeting_prompt_includes_audio_duration(client: TestClient, fake_openai: FakeOpenAI) -> None:
    fake_openai.transcriptions.response = SimpleNamespace(text="Bom dia.", words=[], duration=42.4)

    client.post("/process-meeting", files=audio_files(), data={"meetingDate": "2025-03-01"})

    prompt = fake_openai.completions.calls[0]["messages"][1]["content"]
    assert "- Duração do áudio: 42 segundos" in prompt
    assert prompt.startswith(build_minutes_prompt("Bom dia.").split("INFORMAÇÕES ADICIONAIS")[0])


def test_process_meeting_transcription_runs_before_minutes(client: TestClient, fake_openai: FakeOpenAI) -> None:
    order = []
    fake_openai.transcriptions.on_call = lambda call: order.append(("transcribe", len(fake_openai.completions.calls)))

    client.post("/process-meeting", files=audio_files())

    assert order == [("transcribe", 0)]
    assert len(fake_openai.completions.calls) == 1


def test_process_meeting_minutes_failure_loses_transcript_and_cleans_up(
    client: TestClient, fake_openai: FakeOpenAI, upload_dir: Path
) -> None:
    fake_openai.transcriptions.response = SimpleNamespace(text="Bom dia.", words=[], duration=2.0)
    fake_openai.completions.content = "not json"

    response = client.post("/process-meeting", files=audio_files())

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Erro ao processar reunião"
    assert body["code"] == "PARSE_ERROR"
    assert "transcription" not in body
    assert staged_files(upload_dir) == []


def test_process_meeting_transcription_failure_skips_minutes(
    client: TestClient, fake_openai: FakeOpenAI, upload_dir: Path
) -> None:
    fake_openai.transcriptions.error = connection_error("https://api.openai.com/v1/audio/transcriptions")

    response = client.post("/process-meeting", files=audio_files())

    assert response.status_code == 500
    assert fake_openai.completions.calls == []
    assert staged_files(upload_dir) == []
