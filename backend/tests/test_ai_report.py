from types import SimpleNamespace
from unittest.mock import patch

import httpx
import openai
import pytest

from scout_desk.core.config import Settings
from scout_desk.schemas.player import ComparisonCandidate
from scout_desk.services.ai_report import (
    EMPTY_REPORT,
    ReportCredentialsMissing,
    ReportGenerationError,
    compare_players,
    generate_report,
)


def _response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


@pytest.fixture
def ai_settings():
    return Settings(ai_api_key="gsk-test", club_name="Porto Vitória FC")


def test_missing_key_is_a_credentials_error(make_player):
    with pytest.raises(ReportCredentialsMissing):
        generate_report(make_player(), Settings(ai_api_key=None))


def test_report_prompt_carries_player_and_context(ai_settings, make_player):
    player = make_player(name="Caio Rocha", age=19, ai_context_data="gols,assist\n7,3")
    with patch("scout_desk.services.ai_report.OpenAI") as client_cls:
        client_cls.return_value.chat.completions.create.return_value = _response("**Análise de Perfil**")
        report = generate_report(player, ai_settings)

    assert report == "**Análise de Perfil**"
    client_cls.assert_called_once_with(api_key="gsk-test", base_url=ai_settings.ai_base_url)
    kwargs = client_cls.return_value.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "llama-3.3-70b-versatile"
    prompt = kwargs["messages"][1]["content"]
    assert "Caio Rocha" in prompt
    assert "19 anos" in prompt
    assert "7,3" in prompt


def test_empty_completion_gets_placeholder(ai_settings, make_player):
    with patch("scout_desk.services.ai_report.OpenAI") as client_cls:
        client_cls.return_value.chat.completions.create.return_value = _response("")
        assert generate_report(make_player(), ai_settings) == EMPTY_REPORT


def test_rejected_key_maps_to_credentials_missing(ai_settings, make_player):
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    error = openai.AuthenticationError("invalid key", response=httpx.Response(401, request=request), body=None)
    with patch("scout_desk.services.ai_report.OpenAI") as client_cls:
        client_cls.return_value.chat.completions.create.side_effect = error
        with pytest.raises(ReportCredentialsMissing):
            generate_report(make_player(), ai_settings)


def test_other_failures_are_generation_errors(ai_settings, make_player):
    with patch("scout_desk.services.ai_report.OpenAI") as client_cls:
        client_cls.return_value.chat.completions.create.side_effect = openai.OpenAIError("timeout")
        with pytest.raises(ReportGenerationError):
            generate_report(make_player(), ai_settings)


@pytest.mark.parametrize("count", [1, 6])
def test_comparison_needs_two_to_five(count, ai_settings):
    candidates = [ComparisonCandidate(name=f"C{i}", data=[{"gols": i}]) for i in range(count)]
    with pytest.raises(ValueError):
        compare_players(candidates, ai_settings)


def test_comparison_lists_every_candidate(ai_settings):
    candidates = [ComparisonCandidate(name=n, data=[{"gols": 3}]) for n in ("Caio", "Duda", "Lia")]
    with patch("scout_desk.services.ai_report.OpenAI") as client_cls:
        client_cls.return_value.chat.completions.create.return_value = _response("## Resumo Comparativo")
        assert compare_players(candidates, ai_settings) == "## Resumo Comparativo"
        prompt = client_cls.return_value.chat.completions.create.call_args.kwargs["messages"][1]["content"]
    for name in ("### Caio", "### Duda", "### Lia"):
        assert name in prompt
