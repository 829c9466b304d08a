from __future__ import annotations

import io
import zipfile
from datetime import date
from typing import Any, Dict, List, Sequence

import numpy as np
import pandas as pd

from scout_desk.schemas.player import Foot, Player

EXPORT_COLUMNS = [
    "Nome",
    "Competição",
    "Classificação",
    "Clube",
    "Nascimento",
    "Pé Dominante",
    "Posição",
    "Agente",
    "Jogos Vistos",
    "Link Vídeo",
]

FOOT_LABELS = {Foot.RIGHT: "Destro", Foot.LEFT: "Canhoto", Foot.BOTH: "Ambidestro"}


def export_filename(club_name: str, today: date) -> str:
    slug = "".join(part[0] for part in club_name.split() if part).upper()
    return f"Relatorio_Jogadores_{slug}_{today.isoformat()}.csv"


def players_to_csv(players: Sequence[Player]) -> bytes:
    """CSV (UTF-8 with BOM) of the given roster."""
    if not players:
        raise ValueError("No players to export")
    rows = [
        {
            "Nome": p.name,
            "Competição": p.competition,
            "Classificação": p.recommendation.value,
            "Clube": p.club,
            "Nascimento": p.birth_date,
            "Pé Dominante": FOOT_LABELS[p.foot],
            "Posição": p.position1.value,
            "Agente": p.agent or "",
            "Jogos Vistos": p.games_watched,
            "Link Vídeo": p.video_url or "",
        }
        for p in players
    ]
    df = pd.DataFrame(rows, columns=EXPORT_COLUMNS)
    return df.to_csv(index=False).encode("utf-8-sig")


def _parse_upload(content: bytes, filename: str) -> pd.DataFrame:
    lower = filename.lower()
    try:
        if lower.endswith(".csv"):
            return pd.read_csv(io.BytesIO(content))
        if lower.endswith(".xlsx") or lower.endswith(".xls"):
            return pd.read_excel(io.BytesIO(content))
    except (ValueError, zipfile.BadZipFile, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ValueError(f"Could not read '{filename}': {exc}") from exc
    raise ValueError("Unsupported file type; upload CSV or Excel")


def _clean(df: pd.DataFrame) -> pd.DataFrame:
    df = df.dropna(how="all")
    df = df.replace([np.inf, -np.inf], np.nan)
    return df.astype(object).where(pd.notnull(df), None)


def context_from_upload(content: bytes, filename: str) -> str:
    """Spreadsheet flattened to CSV text, stored as a player's AI context."""
    df = _clean(_parse_upload(content, filename))
    if df.empty:
        raise ValueError(f"'{filename}' has no data rows")
    return df.to_csv(index=False)


def records_from_upload(content: bytes, filename: str) -> List[Dict[str, Any]]:
    df = _clean(_parse_upload(content, filename))
    if df.empty:
        raise ValueError(f"'{filename}' has no data rows")
    return df.to_dict(orient="records")
