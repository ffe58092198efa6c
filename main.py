import argparse
import json
import logging
import pathlib
import re
import sys
from datetime import datetime

from dotenv import load_dotenv

load_dotenv()

from pydantic import ValidationError

from src.crosstabs import (
    ConfigurationError,
    ReportConfig,
    SectionStatus,
    generate_cross_tabulation_report,
    generate_markdown_report,
    plot_chart,
)
from src.crosstabs.loaders import apply_category_orders, load_dataset
from src.recoding import dummy_code_binary, reverse_scale, split_multiple_answers


def configure_logging(log_level: str):
    """Configure logging with the specified level."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )
    return logging.getLogger(__name__)


def _slug(text: str) -> str:
    """File-name friendly version of a variable name."""
    return re.sub(r"[^\w-]+", "_", text, flags=re.UNICODE).strip("_") or "variable"


def _read_json(path: str, what: str):
    path = pathlib.Path(path)
    if not path.is_file():
        raise SystemExit(f"{what} file does not exist: {path}")
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def _build_report_config(args) -> ReportConfig:
    """Merge --config with command-line options (command line wins)."""
    data = _read_json(args.config, "Config") if args.config else {}

    if args.target:
        data["target"] = args.target
    if args.explanatory:
        data["explanatory"] = args.explanatory
    if args.labels:
        data["labels"] = _read_json(args.labels, "Labels")
    if args.palette:
        data["palette"] = args.palette
    for key in ("title_suffix", "xlabel", "ylabel_suffix"):
        value = getattr(args, key)
        if value is not None:
            data[key] = value

    try:
        return ReportConfig.model_validate(data)
    except ValidationError as e:
        raise SystemExit(f"Invalid report configuration:\n{e}")


def cmd_report(args):
    """Run the cross-tabulation report on a dataset."""
    logger = configure_logging(args.log_level)

    config = _build_report_config(args)

    if args.output:
        report_path = pathlib.Path(args.output)
    else:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        report_path = pathlib.Path(f"reports/crosstab_report_{timestamp}.md")

    try:
        df = load_dataset(args.data)
        df = apply_category_orders(df, config.category_orders)
        options = config.to_options()
        sections = generate_cross_tabulation_report(df, config.target, config.explanatory, options)
    except ConfigurationError as e:
        raise SystemExit(f"Configuration error: {e}")

    # Draw charts, one failure does not stop the others
    if not args.no_plots:
        figures_dir = report_path.parent / "figures"
        figures_dir.mkdir(parents=True, exist_ok=True)

        for idx, section in enumerate(sections, start=1):
            if section.chart is None:
                continue
            try:
                plot_path = figures_dir / f"{idx:02d}_{_slug(section.variable)}.png"
                plot_chart(section.chart, save_path=str(plot_path))
                section.plot_path = str(plot_path)
            except Exception as e:
                logger.error(f"Plotting failed for '{section.label}': {str(e)}")

    target_label = sections[0].target_label
    generate_markdown_report(sections, target_label, str(report_path))

    n_skipped = sum(s.status == SectionStatus.SKIPPED for s in sections)
    n_failed = sum(s.status == SectionStatus.TEST_FAILED for s in sections)
    logger.info(
        f"Processed {len(sections)} variable(s): {n_skipped} skipped, {n_failed} test failure(s)"
    )


def cmd_recode(args):
    """Recode one column of a dataset and write the result."""
    logger = configure_logging(args.log_level)

    try:
        df = load_dataset(args.data)
    except ConfigurationError as e:
        raise SystemExit(str(e))

    if args.column not in df.columns:
        raise SystemExit(f"Column not found: {args.column}")

    values = df[args.column]
    new_column = args.new_column or f"{args.column}_r"

    if args.dummy:
        df[new_column] = dummy_code_binary(values, reverse=args.reverse_dummy)
    elif args.reverse:
        dont_know = [_parse_code(v) for v in args.dont_know] if args.dont_know else None
        df[new_column] = reverse_scale(values, dont_know=dont_know)
    else:
        indicators = split_multiple_answers(values, sep=args.split, prefix=args.new_column or args.column)
        df = df.join(indicators)

    output_path = pathlib.Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, index=False)
    logger.info(f"Recoded '{args.column}' written to {output_path}")


def _parse_code(value: str):
    """Answer codes from the command line, as numbers where possible."""
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Survey Crosstabs - Cross-tabulation reports for questionnaire data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Report command
    report_parser = subparsers.add_parser(
        "report", help="Cross-tabulate a target variable against explanatory variables"
    )
    report_parser.add_argument("--data", required=True, help="Dataset file (CSV, Excel or Parquet)")
    report_parser.add_argument(
        "--config",
        help="JSON run file with target, explanatory variables, labels and display options",
    )
    report_parser.add_argument("--target", help="Target variable column")
    report_parser.add_argument(
        "--explanatory",
        nargs="+",
        help="Explanatory variable columns, in report order",
    )
    report_parser.add_argument(
        "--labels",
        help="JSON file mapping column names to display labels",
    )
    report_parser.add_argument("--title-suffix", help="Text appended to chart titles")
    report_parser.add_argument("--xlabel", help="X-axis label (default: proportion)")
    report_parser.add_argument("--ylabel-suffix", help="Text appended to Y-axis labels")
    report_parser.add_argument(
        "--palette",
        nargs="+",
        metavar="COLOR",
        help="Fixed bar colors, recycled as needed (default: light-to-dark blue gradient)",
    )
    report_parser.add_argument(
        "--output",
        metavar="PATH",
        help="Markdown report path (default: reports/crosstab_report_<timestamp>.md)",
    )
    report_parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Do not save chart images",
    )
    report_parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: INFO)",
    )
    report_parser.set_defaults(func=cmd_report)

    # Recode command
    recode_parser = subparsers.add_parser("recode", help="Recode a questionnaire column")
    recode_parser.add_argument("--data", required=True, help="Dataset file (CSV, Excel or Parquet)")
    recode_parser.add_argument("--column", required=True, help="Column to recode")
    mode = recode_parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--dummy", action="store_true", help="Two-choice question to 0/1 dummy")
    mode.add_argument("--reverse", action="store_true", help="Reverse an ordinal scale")
    mode.add_argument("--split", metavar="SEP", help="Split multi-answer responses on SEP")
    recode_parser.add_argument(
        "--reverse-dummy",
        action="store_true",
        help="With --dummy: first choice -> 0, second choice -> 1",
    )
    recode_parser.add_argument(
        "--dont-know",
        nargs="+",
        metavar="CODE",
        help="With --reverse: codes excluded from the scale",
    )
    recode_parser.add_argument("--new-column", help="Name of the new column (or prefix for --split)")
    recode_parser.add_argument("--output", required=True, help="Output CSV path")
    recode_parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set logging level (default: INFO)",
    )
    recode_parser.set_defaults(func=cmd_recode)

    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    if args.command is None:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
