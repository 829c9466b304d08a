from __future__ import annotations

import json
from typing import List, Optional, Sequence, Tuple

from openai import AuthenticationError, OpenAI, OpenAIError

from scout_desk.core.config import Settings, get_settings
from scout_desk.core.logger import get_logger
from scout_desk.schemas.player import ComparisonCandidate, Player

logger = get_logger(__name__)

EMPTY_REPORT = "Relatório vazio retornado pela IA."
CONTEXT_LIMIT = 8000
MIN_COMPARISON = 2
MAX_COMPARISON = 5


class ReportCredentialsMissing(RuntimeError):
    """No usable API key for the report service."""


class ReportGenerationError(RuntimeError):
    pass


def _build_client(settings: Settings) -> Tuple[OpenAI, str]:
    if not settings.ai_api_key:
        raise ReportCredentialsMissing("API_KEY_MISSING")
    client = OpenAI(api_key=settings.ai_api_key, base_url=settings.ai_base_url)
    return client, settings.ai_model


def _complete(system_prompt: str, user_prompt: str, settings: Settings) -> str:
    client, model = _build_client(settings)
    try:
        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=settings.ai_temperature,
            max_tokens=settings.ai_max_tokens,
            top_p=1,
        )
    except AuthenticationError as exc:
        raise ReportCredentialsMissing(f"API key rejected: {exc}") from exc
    except OpenAIError as exc:
        logger.error("Report generation failed: %s", exc)
        raise ReportGenerationError(f"Erro na análise técnica: {exc}") from exc

    text = response.choices[0].message.content if response.choices else ""
    return text or EMPTY_REPORT


def generate_report(player: Player, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    context = (player.ai_context_data or "")[:CONTEXT_LIMIT] or "Sem dados detalhados."
    age = f"{player.age} anos" if player.age is not None else "não informada"

    user_prompt = (
        f"Atue como Diretor de Inteligência de Futebol do {settings.club_name}. "
        "Analise este atleta para o nosso banco de dados:\n"
        f"Nome: {player.name}\n"
        f"Posição: {player.position1.value}\n"
        f"Idade: {age}\n"
        f"Dados Técnicos Extraídos (Contexto): {context}\n\n"
        "Gere um relatório técnico direto e altamente profissional em 3 seções:\n"
        "1. **Análise de Perfil**: Características físicas e técnicas dominantes.\n"
        "2. **Leitura de Potencial**: Como ele se encaixa no futebol moderno.\n"
        "3. **Veredito de Mercado**: Recomendações para contratação ou monitoramento.\n\n"
        "Use um tom sério e técnico. Formate títulos em negrito (**Título**)."
    )
    return _complete(
        "Você é um analista de desempenho sênior especializado em scouting de futebol brasileiro.",
        user_prompt,
        settings,
    )


def compare_players(candidates: Sequence[ComparisonCandidate], settings: Optional[Settings] = None) -> str:
    if len(candidates) < MIN_COMPARISON:
        raise ValueError(f"At least {MIN_COMPARISON} players are needed for a comparison")
    if len(candidates) > MAX_COMPARISON:
        raise ValueError(f"At most {MAX_COMPARISON} players can be compared")
    settings = settings or get_settings()

    blocks: List[str] = []
    per_candidate = CONTEXT_LIMIT // len(candidates)
    for candidate in candidates:
        rows = json.dumps(candidate.data, ensure_ascii=False, default=str)[:per_candidate]
        blocks.append(f"### {candidate.name}\n{rows}")

    user_prompt = (
        f"Compare os atletas abaixo para o departamento de mercado do {settings.club_name}.\n"
        "Responda em Markdown com as seções: ## Resumo Comparativo, ## Pontos Fortes e Fracos, "
        "## Ranking Final (tabela) e ## Recomendação.\n\n" + "\n\n".join(blocks)
    )
    return _complete(
        "Você é um analista de dados de futebol. Baseie-se apenas nos números fornecidos.",
        user_prompt,
        settings,
    )
