"""
Organization types and their default interest topics.

New organizations have no learned history yet. These self-declared defaults
give the decision scorer's fallback path something to match against until
real interest topics are configured.
"""

from relevance_engine.models.organization import AffinitySource, InterestTopic


ORG_TYPES: list[dict[str, str]] = [
    {"value": "foreign_policy", "label": "Foreign Policy & International Affairs"},
    {"value": "human_rights", "label": "Human Rights & Social Justice"},
    {"value": "candidate", "label": "Political Campaign / Candidate"},
    {"value": "labor", "label": "Labor & Workers Rights"},
    {"value": "climate", "label": "Climate & Environment"},
    {"value": "civil_rights", "label": "Civil Rights & Equality"},
    {"value": "other", "label": "Other"},
]

DEFAULT_TOPICS_BY_ORG_TYPE: dict[str, list[tuple[str, float]]] = {
    "foreign_policy": [
        ("ukraine", 0.8), ("gaza", 0.8), ("israel", 0.7), ("china", 0.7),
        ("russia", 0.7), ("nato", 0.6), ("sanctions", 0.6), ("diplomacy", 0.5),
    ],
    "human_rights": [
        ("police brutality", 0.8), ("civil rights", 0.8), ("voting rights", 0.7),
        ("immigration", 0.7), ("refugees", 0.6), ("discrimination", 0.6),
        ("incarceration", 0.5),
    ],
    "candidate": [
        ("election", 0.9), ("campaign", 0.8), ("polls", 0.7),
        ("endorsement", 0.7), ("debate", 0.6), ("fundraising", 0.6),
    ],
    "labor": [
        ("unions", 0.9), ("strikes", 0.8), ("wages", 0.8),
        ("workers rights", 0.7), ("collective bargaining", 0.7), ("nlrb", 0.6),
    ],
    "climate": [
        ("climate change", 0.9), ("renewable energy", 0.8), ("fossil fuels", 0.8),
        ("emissions", 0.7), ("environmental justice", 0.7), ("green new deal", 0.6),
    ],
    "civil_rights": [
        ("equality", 0.8), ("discrimination", 0.8), ("lgbtq", 0.7),
        ("voting rights", 0.7), ("affirmative action", 0.6), ("dei", 0.6),
    ],
}


def default_topics_for_org_type(org_type: str) -> list[InterestTopic]:
    """
    Get the default interest topics for an organization type.

    Unknown types (including "other") get an empty list.
    """
    return [
        InterestTopic(topic=topic, weight=weight, source=AffinitySource.SELF_DECLARED.value)
        for topic, weight in DEFAULT_TOPICS_BY_ORG_TYPE.get(org_type or "", [])
    ]


def get_org_type_label(org_type: str) -> str:
    """Human-readable label for an organization type, or the raw value."""
    for entry in ORG_TYPES:
        if entry["value"] == org_type:
            return entry["label"]
    return org_type
