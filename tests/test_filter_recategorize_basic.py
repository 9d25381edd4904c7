import logging

from curation.config import RuleTables
from curation.stages.filtering import filter_by_quality
from curation.stages.recategorize import recategorize_concepts


def test_filter_keeps_scores_at_or_above_threshold():
    concepts = [
        {"name": "low", "qualityScore": 0.39},
        {"name": "edge", "qualityScore": 0.4},
        {"name": "high", "qualityScore": 0.9},
    ]
    kept = filter_by_quality(concepts)
    assert [c["name"] for c in kept] == ["edge", "high"]
    assert [c["name"] for c in filter_by_quality(concepts, threshold=0.6)] == ["high"]


def test_filter_scores_records_without_quality_score():
    kept = filter_by_quality([{"name": "API"}, {"name": "#"}])
    assert [c["name"] for c in kept] == ["API"]


def test_recategorize_first_matching_rule_wins():
    concepts = [
        {"name": "Deep Learning", "category": "general"},
        {"name": "React Hooks"},
        {"name": "Docker"},
        {"name": "SQL query"},
        {"name": "agile approach"},
        {"name": "project plan"},
        {"name": "random text", "category": "misc"},
    ]
    out = recategorize_concepts(concepts)
    assert [c["category"] for c in out] == [
        "artificial_intelligence",
        "programming",
        "system_architecture",
        "data_science",
        "methodology",
        "business",
        "misc",
    ]


def test_recategorize_touches_only_category():
    concepts = [{"name": "Python", "frequency": 4, "qualityScore": 0.9, "category": "general"}]
    out = recategorize_concepts(concepts)
    assert out[0] == {"name": "Python", "frequency": 4, "qualityScore": 0.9, "category": "programming"}
    assert concepts[0]["category"] == "general"


def test_recategorize_with_custom_rules():
    rules = RuleTables(category_rules=[("fruit", "(?i)banana|apple")]).category_regexes
    out = recategorize_concepts([{"name": "Banana bread"}, {"name": "Python"}], rules=rules)
    assert [c["category"] for c in out] == ["fruit", "general"]


def test_recategorize_counts_only_real_changes(caplog):
    caplog.set_level(logging.INFO, logger="curation.stages.recategorize")
    recategorize_concepts([{"name": "random text"}, {"name": "other words", "category": "general"}])
    assert "recategorize: changed=0 of=2" in caplog.text

    caplog.clear()
    recategorize_concepts([{"name": "Docker"}, {"name": "random text"}])
    assert "recategorize: changed=1 of=2" in caplog.text
