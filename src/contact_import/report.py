from __future__ import annotations

from typing import Dict, Sequence

import pandas as pd

from .models import CONTACT_FIELDS, CandidateContact

BUCKETS = ("very_high", "high", "medium", "low")


def pct(n, d):
    return round((n / d * 100.0), 2) if d else 0.0


def completeness_score(candidate: CandidateContact) -> int:
    """0-100, additive with caps. Reachability counts more than labels."""
    score = 0
    if candidate.name:
        score += 25
        # first and last name
        if " " in candidate.name:
            score += 5
    if candidate.company_name:
        score += 15
    if candidate.email:
        score += 25
    if candidate.phone:
        score += 20
    if candidate.address:
        score += 10
    return int(max(0, min(100, score)))


def confidence_bucket(score: int) -> str:
    if score >= 80:
        return "very_high"
    if score >= 60:
        return "high"
    if score >= 40:
        return "medium"
    return "low"


def build_preview_frame(candidates: Sequence[CandidateContact]) -> pd.DataFrame:
    rows = []
    for candidate in candidates:
        score = completeness_score(candidate)
        row = candidate.to_dict()
        row["completeness_score"] = score
        row["confidence_bucket"] = confidence_bucket(score)
        rows.append(row)
    columns = list(CONTACT_FIELDS) + ["completeness_score", "confidence_bucket"]
    return pd.DataFrame(rows, columns=columns)


def summarize_preview(frame: pd.DataFrame) -> Dict[str, object]:
    total = len(frame)
    bucket_counts = frame["confidence_bucket"].value_counts().to_dict() if total else {}
    summary: Dict[str, object] = {
        "total_candidates": total,
        "avg_completeness": round(float(frame["completeness_score"].mean()), 2) if total else 0.0,
        "bucket_counts": {bucket: int(bucket_counts.get(bucket, 0)) for bucket in BUCKETS},
    }
    for field_name in CONTACT_FIELDS:
        present = int(frame[field_name].notna().sum()) if total else 0
        summary[f"has_{field_name}_pct"] = pct(present, total)
    return summary
