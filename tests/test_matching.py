"""
Tests for text matching helpers, policy domain keywords and org-type defaults.
"""

import pytest

from relevance_engine.scoring.matching import (
    contains_phrase,
    entity_matches,
    label_key,
    normalize_text,
    same_label,
    text_contains,
)
from relevance_engine.scoring.domains import (
    POLICY_DOMAINS,
    POLICY_DOMAIN_KEYWORDS,
    detect_threats,
    get_all_keywords,
    match_domains,
    matches_domain,
)
from relevance_engine.scoring.org_types import (
    ORG_TYPES,
    default_topics_for_org_type,
    get_org_type_label,
)


class TestTextMatching:
    """Tests for substring and word-boundary matching."""

    def test_normalize_text_drops_punctuation(self):
        assert normalize_text("  Sen. Warren's   bill ") == "sen warrens bill"

    def test_text_contains_is_case_insensitive(self):
        assert text_contains("Rural Hospital closures", "hospital")
        assert not text_contains("Rural Hospital closures", "school")

    def test_text_contains_empty_term_never_matches(self):
        assert not text_contains("anything", "")
        assert not text_contains("anything", "   ")

    def test_contains_phrase_respects_word_boundaries(self):
        assert contains_phrase("ICE raids continue", "ice")
        assert not contains_phrase("criminal justice reform", "ice")

    def test_entity_matches_is_bidirectional(self):
        assert entity_matches("Warren", "Elizabeth Warren")
        assert entity_matches("Elizabeth Warren", "Warren")
        assert not entity_matches("Warren", "Warrenton")

    def test_same_label(self):
        assert same_label("Healthcare", " healthcare ")
        assert not same_label("Health", "Healthcare")
        assert not same_label("", "")

    def test_label_key_matches_same_label(self):
        assert label_key(" Labor & Workers Rights ") == "labor & workers rights"
        assert label_key(None) == ""
        assert label_key("Healthcare ") == label_key("HEALTHCARE")


class TestPolicyDomains:
    """Tests for keyword classification."""

    def test_every_domain_has_keywords(self):
        assert len(POLICY_DOMAINS) == 12
        for domain in POLICY_DOMAINS:
            assert POLICY_DOMAIN_KEYWORDS[domain], f"{domain} has no keywords"

    def test_matches_domain(self):
        assert matches_domain("Medicaid expansion vote", "Healthcare")
        assert not matches_domain("Medicaid expansion vote", "Housing")
        assert not matches_domain("Medicaid expansion vote", "Unknown Domain")

    def test_match_domains_returns_domains_in_canonical_order(self):
        domains = match_domains("Eviction crisis hits hospital workers' union")
        assert domains == ["Healthcare", "Labor & Workers Rights", "Housing"]

    def test_match_domains_min_matches(self):
        assert match_domains("hospital", min_matches=2) == []
        assert "Healthcare" in match_domains("hospital medicaid", min_matches=2)

    def test_detect_threats(self):
        threats = detect_threats("Lawsuit filed after scandal; backlash grows")
        categories = [t["category"] for t in threats]
        assert categories == ["legal_threats", "reputational_threats", "political_threats"]
        assert threats[0]["indicators"] == ["lawsuit"]

    def test_detect_threats_clean_text(self):
        assert detect_threats("Community garden opens") == []

    def test_get_all_keywords_is_unique(self):
        keywords = get_all_keywords()
        assert len(keywords) == len(set(keywords))
        assert "medicaid" in keywords


class TestOrgTypeDefaults:
    """Tests for default interest topics per organization type."""

    def test_labor_defaults(self):
        topics = default_topics_for_org_type("labor")
        assert topics[0].topic == "unions"
        assert topics[0].weight == 0.9
        assert all(t.source == "self_declared" for t in topics)

    @pytest.mark.parametrize("org_type", ["other", "", None, "unknown"])
    def test_unknown_types_have_no_defaults(self, org_type):
        assert default_topics_for_org_type(org_type) == []

    def test_org_type_labels(self):
        assert len(ORG_TYPES) == 7
        assert get_org_type_label("climate") == "Climate & Environment"
        assert get_org_type_label("mystery") == "mystery"
