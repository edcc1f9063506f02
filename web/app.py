"""
Trend Relevance Engine - JSON API

A small Flask API exposing relevance scoring, decision scoring and
diversity selection to other services.

Run with: python -m web.app
Or: cd web && python app.py
"""

import sys
from datetime import datetime
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, request, jsonify

from relevance_engine import __version__
from relevance_engine.config import config as settings
from relevance_engine.models import TrendSignal
from relevance_engine.scoring import (
    ORG_TYPES,
    POLICY_DOMAINS,
    BlockedTrend,
    DecisionInput,
    default_topics_for_org_type,
    detect_threats,
    find_blocking_entity,
    match_domains,
    partition_blocked,
    score_decision,
    score_relevance,
    score_trends,
)
from relevance_engine.selection import (
    DiversitySelector,
    SelectorConfig,
    compute_diversity_metrics,
)
from relevance_engine.sources import OrganizationContext

app = Flask(__name__)


class PayloadError(ValueError):
    """Raised when a request body cannot be turned into engine inputs."""
    pass


# =============================================================================
# Request Helpers
# =============================================================================

def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        raise PayloadError("JSON object body required")
    return data


def _organization(data: dict) -> OrganizationContext:
    """Read the organization context from "organization", or from top-level keys."""
    raw = data.get("organization")
    if raw is None:
        raw = {k: data[k] for k in (
            "profile", "watchlist", "affinities", "interest_topics",
            "interest_entities", "alert_preferences",
        ) if k in data}
    if not isinstance(raw, dict):
        raise PayloadError("organization must be an object")
    return OrganizationContext.from_dict(raw)


def _trends(data: dict) -> list[TrendSignal]:
    raw = data.get("trends")
    if raw is None and "trend" in data:
        raw = [data["trend"]]
    if not isinstance(raw, list) or not raw:
        raise PayloadError("'trend' or a non-empty 'trends' array is required")
    return [TrendSignal.from_dict(t) for t in raw]


def _now(data: dict):
    value = data.get("now")
    return datetime.fromisoformat(value) if value else None


def _error(message: str, status: int = 400):
    return jsonify({"success": False, "error": message}), status


@app.errorhandler(PayloadError)
def handle_payload_error(e):
    return _error(str(e))


# =============================================================================
# Info Endpoints
# =============================================================================

@app.route("/api/health")
def api_health():
    """Liveness check."""
    return jsonify({"status": "ok", "version": __version__})


@app.route("/api/config")
def api_config():
    """Current engine settings and any validation problems."""
    return jsonify({
        "app_env": settings.APP_ENV,
        "default_max_trends": settings.DEFAULT_MAX_TRENDS,
        "exploration_ratio": settings.EXPLORATION_RATIO,
        "breaking_max_items": settings.BREAKING_MAX_ITEMS,
        "breaking_min_score": settings.BREAKING_MIN_SCORE,
        "enable_breaking_carveout": settings.ENABLE_BREAKING_CARVEOUT,
        "enable_exploration": settings.ENABLE_EXPLORATION,
        "decision_top_n": settings.DECISION_TOP_N,
        "errors": settings.validate_config(),
    })


@app.route("/api/domains")
def api_domains():
    """Known policy domains and organization types."""
    return jsonify({"policy_domains": list(POLICY_DOMAINS), "org_types": ORG_TYPES})


@app.route("/api/classify", methods=["POST"])
def api_classify():
    """Classify free text into policy domains and threat categories."""
    data = _json_body()
    text = data.get("text", "")
    if not isinstance(text, str) or not text.strip():
        raise PayloadError("'text' is required")

    return jsonify({
        "success": True,
        "domains": match_domains(text),
        "threats": detect_threats(text),
    })


# =============================================================================
# Scoring Endpoints
# =============================================================================

@app.route("/api/relevance", methods=["POST"])
def api_relevance():
    """Score one trend (or several) for one organization."""
    data = _json_body()
    try:
        trends = _trends(data)
        org = _organization(data)
    except (KeyError, TypeError, ValueError) as e:
        raise PayloadError(str(e)) from e

    results = []
    for t in trends:
        denied = find_blocking_entity(t, org.interest_entities)
        results.append({
            "trend_id": t.id,
            "relevance": score_relevance(t, org.profile, org.watchlist, org.affinities).to_dict(),
            "blocked": BlockedTrend(t, denied).reason if denied else None,
        })
    return jsonify({"success": True, "results": results})


@app.route("/api/decision", methods=["POST"])
def api_decision():
    """
    Decision-score one trend.

    Uses the relevance result as fit unless "use_relevance" is false, in
    which case the interest topic fallback applies (defaulting to the
    organization type's topics).

    A trend naming a deny-listed entity is not scored; "decision" is null.
    """
    data = _json_body()
    try:
        trend = _trends(data)[0]
        org = _organization(data)
        now = _now(data)
    except (KeyError, TypeError, ValueError) as e:
        raise PayloadError(str(e)) from e

    denied = find_blocking_entity(trend, org.interest_entities)
    if denied:
        return jsonify({
            "success": True,
            "trend_id": trend.id,
            "blocked": BlockedTrend(trend, denied).reason,
            "relevance": None,
            "decision": None,
        })

    relevance = None
    if data.get("use_relevance", True):
        relevance = score_relevance(trend, org.profile, org.watchlist, org.affinities)

    topics = org.interest_topics or default_topics_for_org_type(org.profile.org_type)
    decision = score_decision(
        DecisionInput.from_trend(trend, relevance),
        profile=org.profile,
        interest_topics=topics,
        interest_entities=org.interest_entities,
        now=now,
    )

    return jsonify({
        "success": True,
        "trend_id": trend.id,
        "blocked": None,
        "relevance": relevance.to_dict() if relevance else None,
        "decision": decision.to_dict(),
    })


@app.route("/api/select", methods=["POST"])
def api_select():
    """
    Score a batch for one organization, select a diverse set and audit it.

    Deny-listed trends are excluded before selection and listed under "blocked".
    """
    data = _json_body()
    try:
        trends = _trends(data)
        org = _organization(data)
        max_count = int(data.get("max_count", settings.DEFAULT_MAX_TRENDS))
    except (KeyError, TypeError, ValueError) as e:
        raise PayloadError(str(e)) from e

    config = SelectorConfig.from_settings()
    if "enable_breaking" in data:
        config.enable_breaking = bool(data["enable_breaking"])
    if "enable_exploration" in data:
        config.enable_exploration = bool(data["enable_exploration"])

    allowed, blocked = partition_blocked(trends, org.interest_entities)
    scored = score_trends(allowed, org.profile, org.watchlist, org.affinities)
    selection = DiversitySelector(config).select(scored, org.profile, max_count)
    metrics = compute_diversity_metrics(selection.selected, org.profile.policy_domains)

    return jsonify({
        "success": True,
        "selected": [
            {"trend_id": st.id, "title": st.trend.title, "relevance": st.relevance.to_dict()}
            for st in selection.selected
        ],
        "uncovered_domains": selection.uncovered_domains,
        "blocked": [b.to_dict() for b in blocked],
        "phase_counts": selection.phase_counts,
        "metrics": metrics.to_dict(),
    })


if __name__ == "__main__":
    print("=" * 50)
    print("🚀 Trend Relevance API")
    print("=" * 50)
    print("Listening on http://localhost:5001")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(debug=settings.DEBUG and not settings.is_production(), port=5001)
