"""
Main CLI Module for Chan Structure Analysis

Runs the merge / turning point / stroke / zone pipeline over a CSV of OHLC
bars and prints a summary.

Commands:
- analyze: Run the pipeline with one zone strategy
- compare: Run both zone strategies over the same strokes
"""

import argparse
import json
import logging
import sys

from src.chan_analysis.adapters import load_bars_csv
from src.chan_analysis.analyzer import AnalysisResult, ChanAnalyzer
from src.chan_analysis.chan_config import ChanConfig, MergeDirection, MergeRule, ZoneStrategy
from src.chan_analysis.errors import ChanAnalysisError
from src.chan_analysis.zones import compare_zone_strategies

logger = logging.getLogger(__name__)


def _config_from_args(args) -> ChanConfig:
    return ChanConfig(
        min_stroke_bars=args.min_stroke_bars,
        min_zone_strokes=args.min_zone_strokes,
        merge_rule=MergeRule(args.merge_rule),
        merge_direction=MergeDirection(args.merge_direction),
        zone_strategy=ZoneStrategy(getattr(args, 'strategy', 'dynamic')),
        trace=args.verbose,
    )


def format_summary(result: AnalysisResult) -> str:
    """Human-readable summary of one analysis run."""
    lines = [
        f"Bars:            {result.bar_count}",
        f"Merged bars:     {len(result.merged)}",
        f"Turning points:  {len(result.turning_points)}",
        f"Strokes:         {len(result.strokes)}",
        f"Zones ({result.config.zone_strategy.value}): "
        f"{len(result.zones)} ({len(result.valid_zones)} valid)",
    ]
    for zone in result.zones:
        status = "valid" if zone.is_valid else "invalid"
        lines.append(
            f"  strokes {zone.first_stroke_index}-{zone.last_stroke_index}: "
            f"[{zone.lower_bound:.4f}, {zone.upper_bound:.4f}] "
            f"height {zone.height_pct:.2f}% {status}"
        )
    if result.trace is not None:
        lines.append(f"Rejections:      {result.trace.counts()}")
    return "\n".join(lines)


def run_analyze_command(args) -> bool:
    """Run the pipeline over a CSV file."""
    try:
        bars = load_bars_csv(args.data)
        result = ChanAnalyzer(_config_from_args(args)).analyze(bars)
    except (FileNotFoundError, ChanAnalysisError, ValueError) as e:
        logger.error(f"Analysis failed: {e}")
        print(f"Error: {e}")
        return False

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_summary(result))
    return True


def run_compare_command(args) -> bool:
    """Run both zone strategies over the strokes of one CSV file."""
    try:
        bars = load_bars_csv(args.data)
        config = _config_from_args(args)
        result = ChanAnalyzer(config).analyze(bars)
    except (FileNotFoundError, ChanAnalysisError, ValueError) as e:
        logger.error(f"Comparison failed: {e}")
        print(f"Error: {e}")
        return False

    comparison = compare_zone_strategies(result.strokes, config.min_zone_strokes, config)
    if args.json:
        print(json.dumps({
            **comparison.summary(),
            "agree": comparison.agree,
        }, indent=2))
    else:
        print(f"Strokes:        {len(result.strokes)}")
        print(f"Static zones:   {len(comparison.static)}")
        print(f"Dynamic zones:  {len(comparison.dynamic)}")
        print(f"Strategies agree: {'yes' if comparison.agree else 'no'}")
    return True


def _add_common_arguments(parser):
    parser.add_argument(
        'data',
        help='CSV file with a header row: time, open, high, low, close[, volume]'
    )
    parser.add_argument(
        '--min-stroke-bars',
        type=int,
        default=5,
        help='Minimum merged bars per stroke (default: 5)'
    )
    parser.add_argument(
        '--min-zone-strokes',
        type=int,
        default=3,
        help='Minimum strokes per consolidation zone (default: 3)'
    )
    parser.add_argument(
        '--merge-rule',
        choices=[r.value for r in MergeRule],
        default=MergeRule.EXTREMUM.value,
        help='Containment merge rule (default: extremum)'
    )
    parser.add_argument(
        '--merge-direction',
        choices=[d.value for d in MergeDirection],
        default=MergeDirection.TREND.value,
        help='How a fold picks its direction (default: trend)'
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print machine-readable JSON'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging and rejection diagnostics'
    )


def create_parser():
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        description="Chan structure analysis: merged bars, strokes and consolidation zones",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    analyze_parser = subparsers.add_parser(
        'analyze',
        help='Run the analysis pipeline on a CSV file'
    )
    _add_common_arguments(analyze_parser)
    analyze_parser.add_argument(
        '--strategy',
        choices=[s.value for s in ZoneStrategy],
        default=ZoneStrategy.DYNAMIC.value,
        help='Zone detection strategy (default: dynamic)'
    )

    compare_parser = subparsers.add_parser(
        'compare',
        help='Compare static and dynamic zone detection on a CSV file'
    )
    _add_common_arguments(compare_parser)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == 'analyze':
        success = run_analyze_command(args)
    else:
        success = run_compare_command(args)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
