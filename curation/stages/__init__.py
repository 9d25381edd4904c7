"""Pipeline stages: scoring, similarity, grouping, merge, filtering, recategorization.

Each stage exposes a small, pure function API and takes its thresholds and
rule tables as arguments; the orchestrator wires them from a QualityConfig.
"""
