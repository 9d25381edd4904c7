#!/usr/bin/env python3
import argparse
import sys

import yaml

from curation.config import config_to_dict
from curation.orchestrator import build_config, run_once


def main(argv=None):
    parser = argparse.ArgumentParser(description="Concept curation CLI")
    parser.add_argument("--input", help="Path to the concept database JSON")
    parser.add_argument("--output", help="Where to write the improved database JSON")
    parser.add_argument("--config", help="Path to YAML config (defaults apply when omitted)")
    parser.add_argument("--report", help="Optional path for a Markdown quality report")
    parser.add_argument("--print-config", dest="print_config", action="store_true", help="Print the effective config as YAML and exit")
    # threshold overrides
    parser.add_argument("--similar-threshold", dest="similar_threshold", type=float, help="Duplicate similarity threshold (0-1)")
    parser.add_argument("--acceptable-threshold", dest="acceptable_threshold", type=float, help="Minimum quality kept by the filter (0-1)")
    parser.add_argument("--good-threshold", dest="good_threshold", type=float, help="Quality that promotes a concept to the surface partition (0-1)")
    parser.add_argument("--max-related", dest="max_related", type=int, help="Cap on related concepts kept per merged record")
    args = parser.parse_args(argv)

    overrides = {
        "similar_threshold": args.similar_threshold,
        "acceptable_threshold": args.acceptable_threshold,
        "good_threshold": args.good_threshold,
        "max_related": args.max_related,
    }

    if args.print_config:
        cfg = build_config(args.config, overrides)
        yaml.safe_dump(config_to_dict(cfg), sys.stdout, allow_unicode=True, sort_keys=False)
        return 0

    if not args.input or not args.output:
        parser.error("--input and --output are required")

    stats = run_once(
        args.input,
        args.output,
        config_path=args.config,
        report_path=args.report,
        overrides=overrides,
    )
    print(
        f"{stats.original_count} -> {stats.final_count} concepts "
        f"(merged {stats.merged_groups} groups, removed {stats.removed_concepts}, "
        f"{stats.improvement_ratio:.1f}% improvement)"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
