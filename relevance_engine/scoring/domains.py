"""
Policy domain configuration.

This file is the single source of truth for the policy domains the engine
knows about. Domains are used for two purposes:
1. Classification: trends delivered without domain tags can be tagged by
   keyword matching (match_domains)
2. Risk review: generic threat indicators flag legal, regulatory,
   reputational, funding and political threats (detect_threats)

CUSTOMIZATION:

To add a keyword:
    1. Append it (lowercase) to the domain's list in POLICY_DOMAIN_KEYWORDS
    2. Keywords are matched as substrings (e.g., "ice" matches "justice" - be specific!)
"""

# =============================================================================
# Policy Domains
# =============================================================================

POLICY_DOMAINS: tuple = (
    "Healthcare",
    "Environment",
    "Labor & Workers Rights",
    "Immigration",
    "Civil Rights",
    "Criminal Justice",
    "Voting Rights",
    "Education",
    "Housing",
    "Economic Justice",
    "Foreign Policy",
    "Technology",
)

# Mapping of domain -> list of keywords (all lowercase)
POLICY_DOMAIN_KEYWORDS: dict[str, list[str]] = {
    "Healthcare": [
        "medicare", "medicaid", "affordable care act", "obamacare",
        "health insurance", "prescription drugs", "drug prices", "hospital",
        "public option", "single payer", "universal healthcare", "mental health",
        "reproductive health", "planned parenthood", "nursing home", "uninsured",
        "pharmaceutical", "vaccine", "pandemic", "public health", "medical debt",
        "preexisting conditions", "telehealth", "opioid", "insulin prices",
        "nurse shortage", "primary care", "fda", "cdc", "nih",
    ],
    "Environment": [
        "climate change", "global warming", "renewable energy", "fossil fuels",
        "pipeline", "carbon emissions", "epa", "green new deal", "paris agreement",
        "environmental justice", "pollution", "clean energy", "electric vehicle",
        "endangered species", "net zero", "greenhouse gas", "wildfire", "drought",
        "clean water", "air quality", "offshore drilling", "methane emissions",
        "pfas", "lead pipes", "sea level rise", "wind turbine", "solar panel",
    ],
    "Labor & Workers Rights": [
        "union", "strike", "minimum wage", "wage theft", "collective bargaining",
        "nlrb", "right to work", "gig economy", "paid leave", "sick leave",
        "overtime", "workplace safety", "osha", "picket line", "labor dispute",
        "department of labor", "independent contractor", "prevailing wage",
        "non-compete", "child labor", "farmworker", "union busting",
        "unfair labor practice", "workers compensation",
    ],
    "Immigration": [
        "immigration", "border", "migrants", "refugees", "asylum", "daca",
        "dreamers", "deportation", "sanctuary city", "green card", "citizenship",
        "undocumented", "border wall", "path to citizenship", "family separation",
        "immigration court", "migrant children", "uscis", "naturalization",
        "temporary protected status", "h-1b", "work authorization",
        "removal proceedings", "immigrant rights",
    ],
    "Civil Rights": [
        "civil rights", "discrimination", "equality", "racial justice", "lgbtq",
        "transgender", "same sex marriage", "hate crime", "affirmative action",
        "title ix", "racial profiling", "religious freedom", "free speech",
        "disability rights", "gender equality", "equal protection",
        "civil liberties", "aclu", "naacp", "first amendment", "marriage equality",
        "systemic racism", "equal pay", "reasonable accommodation",
    ],
    "Criminal Justice": [
        "prison reform", "mass incarceration", "bail reform", "police",
        "qualified immunity", "death penalty", "sentencing", "probation",
        "juvenile justice", "wrongful conviction", "private prison",
        "solitary confinement", "clemency", "police brutality", "excessive force",
        "body camera", "criminal justice reform", "mandatory minimum",
        "consent decree", "restorative justice", "expungement", "cash bail",
        "pretrial detention", "exoneration",
    ],
    "Voting Rights": [
        "voting rights", "voter suppression", "gerrymandering", "redistricting",
        "election", "ballot", "mail-in voting", "voter id", "poll workers",
        "early voting", "voter registration", "electoral college",
        "campaign finance", "dark money", "citizens united", "absentee ballot",
        "ballot drop box", "voter purge", "provisional ballot", "fair maps",
        "election interference", "super pac",
    ],
    "Education": [
        "education", "schools", "teachers", "students", "college", "university",
        "student loans", "student debt", "charter schools", "school choice",
        "curriculum", "school board", "pell grant", "k-12", "higher education",
        "community college", "book ban", "special education", "teacher pay",
        "school voucher", "public schools", "head start", "pre-k",
        "student loan forgiveness", "teacher shortage",
    ],
    "Housing": [
        "housing", "rent", "affordable housing", "homelessness", "eviction",
        "mortgage", "section 8", "public housing", "zoning", "yimby",
        "housing crisis", "rent control", "tenant rights", "fair housing",
        "foreclosure", "housing voucher", "shelter", "housing first", "redlining",
        "hud", "inclusionary zoning", "eviction moratorium",
        "down payment assistance", "permanent supportive housing",
    ],
    "Economic Justice": [
        "economy", "inflation", "recession", "unemployment", "inequality",
        "wealth gap", "billionaire", "corporate tax", "living wage", "poverty",
        "food stamps", "snap", "child tax credit", "wealth tax",
        "income inequality", "social security", "stimulus", "cost of living",
        "wage stagnation", "middle class", "federal reserve", "antitrust",
        "monopoly", "predatory lending", "payday loan", "cfpb", "tax loophole",
    ],
    "Foreign Policy": [
        "foreign policy", "diplomacy", "sanctions", "military", "ukraine",
        "russia", "china", "israel", "palestine", "gaza", "nato", "tariffs",
        "treaty", "embassy", "arms deal", "nuclear", "terrorism",
        "state department", "defense spending", "humanitarian aid", "ceasefire",
        "peace talks", "military aid", "foreign aid", "taiwan", "north korea",
    ],
    "Technology": [
        "artificial intelligence", "social media", "privacy", "surveillance",
        "encryption", "section 230", "big tech", "tiktok", "cybersecurity",
        "net neutrality", "broadband", "digital divide", "data protection",
        "algorithm", "facial recognition", "content moderation", "data breach",
        "ftc", "fcc", "deepfake", "large language model", "cryptocurrency",
        "semiconductor", "data broker", "right to repair", "online safety",
    ],
}

# Generic threat indicators, not tied to any one policy domain
GENERIC_THREAT_INDICATORS: dict[str, list[str]] = {
    "legal_threats": [
        "lawsuit", "indictment", "charges filed", "investigation", "subpoena",
        "court ruling", "injunction", "restraining order", "grand jury",
        "plea deal", "settlement",
    ],
    "regulatory_threats": [
        "revoked", "suspended", "audit", "violation", "fine", "penalty",
        "banned", "prohibited", "restricted", "sanctioned", "compliance",
    ],
    "reputational_threats": [
        "scandal", "controversy", "accused", "alleged", "exposed", "leaked",
        "whistleblower", "misconduct", "ethics violation",
    ],
    "funding_threats": [
        "funding cut", "defunded", "grant denied", "donor withdrawal",
        "budget cut", "financial trouble", "bankruptcy", "layoffs",
    ],
    "political_threats": [
        "opposition", "attacked", "criticized", "condemned", "targeted",
        "under fire", "backlash", "protest against", "boycott",
    ],
}


# =============================================================================
# Helper Functions
# =============================================================================

def matches_domain(text: str, domain: str) -> bool:
    """
    Check if text contains any keyword of a domain.

    Unknown domains never match.
    """
    lower_text = (text or "").lower()
    return any(kw in lower_text for kw in POLICY_DOMAIN_KEYWORDS.get(domain, []))


def match_domains(text: str, min_matches: int = 1) -> list[str]:
    """
    Get all domains with at least min_matches keyword hits in text.

    Args:
        text: Text to classify (title, summary, context terms).
        min_matches: Keyword hits required per domain.

    Returns:
        Matching domains in POLICY_DOMAINS order.
    """
    lower_text = (text or "").lower()
    matches = []

    for domain in POLICY_DOMAINS:
        hits = sum(1 for kw in POLICY_DOMAIN_KEYWORDS[domain] if kw in lower_text)
        if hits >= min_matches:
            matches.append(domain)

    return matches


def detect_threats(text: str) -> list[dict]:
    """
    Detect generic threat indicators in text.

    Returns:
        One {"category", "indicators"} dict per category with any hit.
    """
    lower_text = (text or "").lower()
    threats = []

    for category, indicators in GENERIC_THREAT_INDICATORS.items():
        matched = [ind for ind in indicators if ind in lower_text]
        if matched:
            threats.append({"category": category, "indicators": matched})

    return threats


def get_all_keywords() -> list[str]:
    """Get all unique keywords across domains, in first-seen order."""
    seen = {}
    for keywords in POLICY_DOMAIN_KEYWORDS.values():
        for kw in keywords:
            seen.setdefault(kw, None)
    return list(seen)
