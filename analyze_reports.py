#!/usr/bin/env python3
"""
Trace Report Analyzer - summarizes captured JSON trace reports
"""

import sys

import ijson

from quick_trace.processors import ReportReader, SpanAggregator


def main(argv=None):
    import argparse
    parser = argparse.ArgumentParser(
        description='Summarize JSON trace reports captured from quick_trace tracers.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_reports.py reports.json
  python analyze_reports.py reports.json --top 10
  python analyze_reports.py reports.json --tracer "GET /checkout"
  python analyze_reports.py reports.json -o summary.md
        """
    )
    parser.add_argument('input_file', help='File of concatenated JSON reports')
    parser.add_argument('-o', '--output', dest='output_file', default=None,
                        help='Write the markdown summary to this file instead of stdout')
    parser.add_argument('--top', type=int, default=None, help='Show only the N slowest spans')
    parser.add_argument('--tracer', default=None, help='Only include reports from this tracer')
    args = parser.parse_args(argv)

    aggregator = SpanAggregator(tracer_name=args.tracer)

    try:
        count = aggregator.add_reports(ReportReader.iter_reports(args.input_file))
        summary = aggregator.to_markdown(top=args.top)

        if args.output_file:
            with open(args.output_file, 'w', encoding='utf-8') as f:
                f.write(summary)
            print(f"✓ Summarized {count} reports into {args.output_file}")
        else:
            print(summary, end='')
    except FileNotFoundError:
        print(f"Error: File '{args.input_file}' not found.", file=sys.stderr)
        return 1
    except ijson.JSONError as e:
        print(f"Error: '{args.input_file}' is not valid JSON: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
