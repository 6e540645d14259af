#!/usr/bin/env python3
"""
CLI for post-processing TopMetric trending analysis results

Works on a saved ``/analyze`` response (JSON file).

Usage:
    python -m topmetric.cli process response.json [--tier good] [--resort]
    python -m topmetric.cli export response.json --query gaming [--output-dir exports]
    python -m topmetric.cli summary response.json
    python -m topmetric.cli tiers
"""
import argparse
import io
import json
import logging
import sys

from .errors import TopMetricError
from .results.exporter import export_to_file, to_delimited_text
from .results.pipeline import process_response, view
from .results.quality import DEFAULT_TIER, QUALITY_TIERS
from .results.summary import summarize

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="TopMetric trending results CLI"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # Process command
    process_parser = subparsers.add_parser(
        "process",
        help="Normalize, filter and list the videos of a saved response"
    )
    _add_response_args(process_parser)
    process_parser.add_argument(
        "--tier",
        default=DEFAULT_TIER,
        help=f"Quality tier to apply (default: {DEFAULT_TIER})"
    )
    process_parser.add_argument(
        "--trust-scores",
        action="store_true",
        help="Keep normalized scores supplied by the service (still clamped to 0-10)"
    )
    process_parser.add_argument(
        "--limit",
        type=_non_negative_int,
        default=None,
        help="Only show the first N results"
    )

    # Export command
    export_parser = subparsers.add_parser(
        "export",
        help="Export the filtered videos as CSV"
    )
    _add_response_args(export_parser)
    export_parser.add_argument(
        "--query",
        default=None,
        help="Search query used for the filename (default: the response's query)"
    )
    export_parser.add_argument(
        "--tier",
        default=DEFAULT_TIER,
        help=f"Quality tier to apply (default: {DEFAULT_TIER})"
    )
    export_parser.add_argument(
        "--output-dir",
        default=".",
        help="Directory to write the CSV file to (default: .)"
    )
    export_parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the CSV instead of writing a file"
    )

    # Summary command
    summary_parser = subparsers.add_parser(
        "summary",
        help="Show headline statistics and per-tier counts"
    )
    _add_response_args(summary_parser)

    # Tiers command
    subparsers.add_parser(
        "tiers",
        help="List the available quality tiers"
    )

    return parser.parse_args()


def _non_negative_int(value: str) -> int:
    """argparse type for counts that must be 0 or more."""
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {number}")
    return number


def _add_response_args(subparser):
    subparser.add_argument(
        "response",
        help="Path to a saved /analyze JSON response"
    )
    subparser.add_argument(
        "--resort",
        action="store_true",
        help="Ignore the service's ordering and sort locally"
    )


def load_response(path: str) -> dict:
    """Read a saved service response from disk."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _load_batch(args, trust_scores: bool = False):
    payload = load_response(args.response)
    return process_response(
        payload,
        trust_order=not args.resort,
        trust_upstream_scores=trust_scores,
    )


def cmd_process(args) -> dict:
    """Execute the process command."""
    batch = _load_batch(args, trust_scores=args.trust_scores)
    records = view(batch, args.tier)
    if args.limit is not None:
        records = records[:args.limit]

    return {
        "command": "process",
        "query": batch.query,
        "region": batch.region,
        "tier": args.tier,
        "analyzed": batch.analyzed_count,
        "total": len(batch),
        "shown": len(records),
        "videos": [
            {
                "rank": r.rank,
                "title": r.title,
                "channel": r.channel,
                "views": r.views,
                "normalized_score": round(r.normalized_score, 1),
                "regional_score": r.regional_relevance.score,
                "confidence": r.regional_relevance.confidence,
                "url": r.url,
            }
            for r in records
        ],
    }


def cmd_export(args) -> dict:
    """Execute the export command."""
    batch = _load_batch(args)
    records = view(batch, args.tier)
    query = args.query if args.query is not None else batch.query

    if args.stdout:
        return {
            "command": "export",
            "rows": len(records),
            "csv": to_delimited_text(records),
        }

    path = export_to_file(records, query, directory=args.output_dir)
    return {
        "command": "export",
        "rows": len(records),
        "path": path,
    }


def cmd_summary(args) -> dict:
    """Execute the summary command."""
    batch = _load_batch(args)
    summary = summarize(batch.records)
    return {
        "command": "summary",
        "query": batch.query,
        "timestamp": batch.timestamp,
        "algorithm_used": batch.algorithm_used,
        "analyzed": batch.analyzed_count,
        "total": summary.total,
        "trending_page_videos": summary.trending_page_videos,
        "api_videos": summary.api_videos,
        "truly_trending": summary.truly_trending,
        "blacklisted": summary.blacklisted,
        "total_views": summary.total_views,
        "mean_normalized_score": round(summary.mean_normalized_score, 2),
        "mean_engagement_rate": round(summary.mean_engagement_rate * 100, 2),
        "by_tier": summary.by_tier,
    }


def cmd_tiers(args) -> dict:
    """Execute the tiers command."""
    return {
        "command": "tiers",
        "tiers": [
            {
                "key": t.key,
                "label": t.label,
                "min_confidence": t.min_confidence,
                "min_regional_score": t.min_regional_score,
            }
            for t in QUALITY_TIERS
        ],
    }


COMMANDS = {
    "process": cmd_process,
    "export": cmd_export,
    "summary": cmd_summary,
    "tiers": cmd_tiers,
}


def print_result(result: dict) -> None:
    """Human-readable output for a command result."""
    command = result["command"]
    print(f"\n{'=' * 50}")
    print(f"Command: {command}")
    print(f"{'=' * 50}")

    if command == "process":
        print(f"Query: {result['query'] or 'n/a'} ({result['region'] or 'n/a'})")
        print(f"Tier: {result['tier']}")
        print(f"Showing {result['shown']} of {result['total']} "
              f"({result['analyzed']} analyzed)")
        for v in result["videos"]:
            print(f"\n  #{v['rank']:>3} [{v['normalized_score']:>4.1f}/10] {v['title'][:60]}")
            print(f"       Channel: {v['channel']}")
            print(f"       Views: {v['views']:,} | Regional: {v['regional_score']:.0%} "
                  f"| Confidence: {v['confidence']:.0%}")

    elif command == "export":
        if "csv" in result:
            print(result["csv"], end="")
        else:
            print(f"Exported {result['rows']} rows to {result['path']}")

    elif command == "summary":
        print(f"Query: {result['query'] or 'n/a'} at {result['timestamp'] or 'n/a'}")
        print(f"Algorithm: {result['algorithm_used'] or 'n/a'}")
        print(f"Analyzed: {result['analyzed']}, results: {result['total']}")
        print(f"  Trending pages: {result['trending_page_videos']}")
        print(f"  API videos:     {result['api_videos']}")
        print(f"  Truly trending: {result['truly_trending']}")
        print(f"  Blacklisted:    {result['blacklisted']}")
        print(f"  Total views:    {result['total_views']:,}")
        print(f"  Mean score:     {result['mean_normalized_score']}/10")
        print(f"  Mean engagement: {result['mean_engagement_rate']}%")
        print("\nBy tier:")
        for key, count in result["by_tier"].items():
            print(f"  {key:<10} {count}")

    elif command == "tiers":
        print("  KEY        | MIN CONFIDENCE | MIN REGIONAL | LABEL")
        print("  " + "-" * 60)
        for t in result["tiers"]:
            print(f"  {t['key']:<10} | {t['min_confidence']:>14.2f} | "
                  f"{t['min_regional_score']:>12.2f} | {t['label']}")

    print(f"{'=' * 50}\n")


def main() -> int:
    """Main entry point."""
    args = parse_args()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        result = COMMANDS[args.command](args)
    except TopMetricError as e:
        logger.error("%s failed: %s", args.command, e)
        result = {"command": args.command, "success": False, "error": str(e)}
        if args.json:
            print(json.dumps(result, indent=2))
        else:
            print(f"Error: {e}")
        return 1
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read response file: %s", e)
        return 1

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print_result(result)
    return 0


def run():
    """Console script entry point."""
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")
    sys.exit(main())


if __name__ == "__main__":
    run()
