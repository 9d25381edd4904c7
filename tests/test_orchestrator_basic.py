import copy
import datetime as dt

import pytest

from curation.config import ConfigError, QualityConfig, QualityTiers
from curation.orchestrator import ConceptQualityPipeline, improve_concept_db

NOW = dt.datetime(2025, 1, 1, tzinfo=dt.timezone.utc)


def _sample_db():
    return {
        "version": 2,
        "surface": [
            {"name": "API", "frequency": 5},
            {"name": "api", "frequency": 3},
            {"name": "Docker", "frequency": 2},
            {"name": "Python"},
            {"name": "#"},
        ],
        "deep": [
            {"name": "apis", "frequency": 1},
            {"name": "機械学習モデル"},
            {"name": "これ"},
            {"name": "12345"},
            {"name": "!"},
        ],
    }


def _names(concepts):
    return [c["name"] for c in concepts]


def test_scenario_dedup_and_merge():
    db = {"surface": [{"name": "API", "frequency": 5}, {"name": "api", "frequency": 3}], "deep": [{"name": "apis", "frequency": 1}]}
    improved, stats = improve_concept_db(db, now=NOW)
    assert improved["deep"] == []
    assert len(improved["surface"]) == 1
    merged = improved["surface"][0]
    assert merged["name"] == "API"
    assert merged["frequency"] == 9
    assert merged["mergedFrom"] == ["API", "api", "apis"]
    assert merged["category"] == "programming"
    assert merged["lastMerged"] == "2025-01-01T00:00:00Z"
    assert stats.to_dict() == {
        "originalCount": 3,
        "mergedGroups": 1,
        "removedConcepts": 0,
        "finalCount": 1,
        "improvementRatio": pytest.approx(100 / 3),
    }


def test_scenario_empty_database():
    improved, stats = improve_concept_db({"surface": [], "deep": []})
    assert improved == {"surface": [], "deep": []}
    assert stats.original_count == 0
    assert stats.final_count == 0
    assert stats.improvement_ratio == 0


def test_full_pass_partitions_and_stats():
    improved, stats = improve_concept_db(_sample_db(), now=NOW)
    assert _names(improved["surface"]) == ["API", "Docker", "Python", "機械学習モデル", "12345"]
    assert _names(improved["deep"]) == ["これ"]
    assert improved["version"] == 2
    assert stats.original_count == 10
    assert stats.merged_groups == 1
    assert stats.removed_concepts == 2
    assert stats.final_count == 6
    assert stats.improvement_ratio == pytest.approx(30.0)

    categories = {c["name"]: c["category"] for c in improved["surface"] + improved["deep"]}
    assert categories["Docker"] == "system_architecture"
    assert categories["機械学習モデル"] == "artificial_intelligence"
    assert categories["これ"] == "general"


def test_count_invariant():
    improved, stats = improve_concept_db(_sample_db(), now=NOW)
    cluster_absorbed = sum(len(c["mergedFrom"]) - 1 for c in improved["surface"] + improved["deep"] if "mergedFrom" in c)
    assert stats.final_count <= stats.original_count
    assert stats.final_count == stats.original_count - stats.removed_concepts - cluster_absorbed
    assert stats.final_count == len(improved["surface"]) + len(improved["deep"])


def test_input_is_not_mutated():
    db = _sample_db()
    snapshot = copy.deepcopy(db)
    improved, _ = improve_concept_db(db, now=NOW)
    assert db == snapshot
    improved["surface"][0]["name"] = "changed"
    assert db == snapshot


def test_second_pass_is_stable():
    first, _ = improve_concept_db(_sample_db(), now=NOW)
    _, stats = improve_concept_db(first, now=NOW)
    assert stats.merged_groups == 0
    assert stats.removed_concepts == 0
    assert stats.final_count == stats.original_count


def test_nested_concepts_layout_is_accepted():
    db = {"concepts": {"surface": [{"name": "Python"}], "deep": [{"name": "python"}]}, "meta": {"source": "x"}}
    improved, stats = improve_concept_db(db, now=NOW)
    assert "concepts" not in improved
    assert improved["meta"] == {"source": "x"}
    assert stats.merged_groups == 1
    assert _names(improved["surface"]) == ["Python"]


def test_malformed_records_flow_through():
    db = {"surface": [{"frequency": 3}, {"name": None}], "deep": []}
    improved, stats = improve_concept_db(db, now=NOW)
    assert stats.original_count == 2
    assert stats.merged_groups == 1
    merged = (improved["surface"] + improved["deep"])[0]
    assert merged["mergedFrom"] == ["", ""]


def test_thresholds_come_from_config():
    strict = QualityConfig(tiers=QualityTiers(acceptable=0.5))
    improved, stats = improve_concept_db(_sample_db(), strict, now=NOW)
    assert "これ" not in _names(improved["surface"] + improved["deep"])
    assert stats.removed_concepts == 3


def test_pipeline_rejects_invalid_config_before_running():
    with pytest.raises(ConfigError):
        ConceptQualityPipeline(QualityConfig(similar_threshold=1.2))


def test_pipeline_improve_and_report():
    pipeline = ConceptQualityPipeline()
    db = _sample_db()
    improved, stats = pipeline.improve(db)
    report = pipeline.report(db, improved, stats)
    assert report["original"]["totalConcepts"] == 10
    assert report["improved"]["totalConcepts"] == 6
    assert report["improvements"]["mergedGroups"] == 1


def test_stale_quality_stats_are_not_carried_over():
    db = {
        "meta": {"source": "x"},
        "qualityStats": {"originalCount": 99, "finalCount": 1},
        "surface": [{"name": "Python", "frequency": 4}],
        "deep": [],
    }
    improved, _ = improve_concept_db(db, now=NOW)
    assert "qualityStats" not in improved
    assert improved["meta"] == {"source": "x"}
