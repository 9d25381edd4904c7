from curation.stages.grouping import duplicate_group_indices, find_duplicate_groups


def test_scenario_groups_case_and_plural_variants():
    concepts = [
        {"name": "API", "frequency": 5},
        {"name": "api", "frequency": 3},
        {"name": "apis", "frequency": 1},
        {"name": "Docker"},
    ]
    assert duplicate_group_indices(concepts) == [[0, 1, 2]]
    groups = find_duplicate_groups(concepts)
    assert [c["name"] for c in groups[0]] == ["API", "api", "apis"]


def test_clusters_are_leader_based_not_transitive():
    a = {"name": "abcdefghij"}
    b = {"name": "abcdefghiX"}
    c = {"name": "abcdefghXX"}
    # a~b and b~c, but a and c are too far apart
    assert duplicate_group_indices([a, b, c]) == [[0, 1]]
    assert duplicate_group_indices([b, a, c]) == [[0, 1, 2]]


def test_singletons_are_not_emitted():
    concepts = [{"name": "Python"}, {"name": "Kubernetes"}, {"name": "GraphQL"}]
    assert duplicate_group_indices(concepts) == []
    assert duplicate_group_indices([]) == []


def test_groups_ordered_by_leader_position():
    concepts = [
        {"name": "Docker"},
        {"name": "model"},
        {"name": "docker"},
        {"name": "models"},
    ]
    assert duplicate_group_indices(concepts) == [[0, 2], [1, 3]]


def test_threshold_is_a_parameter():
    concepts = [{"name": "API"}, {"name": "api"}, {"name": "apis"}]
    assert duplicate_group_indices(concepts, threshold=1.0) == [[0, 1]]
    assert duplicate_group_indices(concepts, threshold=0.0) == [[0, 1, 2]]
