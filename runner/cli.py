import argparse
import json
import logging
import sys
from pathlib import Path

from pf_checker.core.extract import TransactionShape
from pf_checker.core.params import (MAX_LISTING_PAGES, clamp_pages, parse_params,
                                    parse_tx_shape)
from pf_checker.core.pipeline import (build_page_url, inspect_page, run_analysis,
                                      scrape_listings)
from pf_checker.errors import PipelineError
from pf_checker.suppliers.propertyfinder import PropertyFinderFetcher
from pf_checker.utils.export import build_workbook, listings_to_csv
from runner.config import (DEFAULT_LISTING_URL, DEFAULT_TX_URL,
                           PAGE_DELAY_SECONDS, REQUEST_TIMEOUT_SECONDS,
                           setup_logging)

logger = logging.getLogger("runner.cli")


def _add_shape_arg(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--tx-shape",
        choices=[s.value for s in TransactionShape],
        default=TransactionShape.LIST.value,
        help="Layout of the transactions payload (default: list).",
    )


def _add_analysis_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--listing-url", default="")
    parser.add_argument("--listing-pages", default="1", help="1-10 (default: 1).")
    parser.add_argument("--tx-url", default="")
    parser.add_argument(
        "--tx-pages",
        default=None,
        help="1-20; omit to fetch every page the site reports.",
    )
    parser.add_argument(
        "--threshold",
        default="10",
        help="Rating band in percent around the median, 1-50 (default: 10).",
    )
    parser.add_argument("--bed-min", default=None)
    parser.add_argument("--bed-max", default=None)
    parser.add_argument("--size-min", default=None)
    parser.add_argument("--size-max", default=None)
    _add_shape_arg(parser)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scrape Property Finder listings and rate them against recent transactions."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    scrape = sub.add_parser("scrape", help="Write search-result listings to CSV.")
    scrape.add_argument("url", nargs="?", default="")
    scrape.add_argument("--pages", default="1", help="1-10 (default: 1).")
    scrape.add_argument("--output", default="output.csv")

    analyze = sub.add_parser("analyze", help="Print the price/area analysis.")
    _add_analysis_args(analyze)
    analyze.add_argument("--json", default=None, help="Also write the full result as JSON.")

    export = sub.add_parser("export", help="Write the analysis as an .xlsx workbook.")
    _add_analysis_args(export)
    export.add_argument("--output", default="propertyfinder_analysis.xlsx")

    inspect = sub.add_parser("inspect", help="Show the first record of one page.")
    inspect.add_argument("url", nargs="?", default="")
    inspect.add_argument("--kind", choices=["listings", "transactions"], default="listings")
    inspect.add_argument("--page", type=int, default=1)
    _add_shape_arg(inspect)
    return parser


def _params(args: argparse.Namespace):
    return parse_params(
        {
            "listing_url": args.listing_url,
            "listing_pages": args.listing_pages,
            "tx_url": args.tx_url,
            "tx_pages": args.tx_pages,
            "threshold": args.threshold,
            "bed_min": args.bed_min,
            "bed_max": args.bed_max,
            "size_min": args.size_min,
            "size_max": args.size_max,
            "tx_shape": args.tx_shape,
        },
        DEFAULT_LISTING_URL,
        DEFAULT_TX_URL,
    )


def _analyze(fetcher, params):
    return run_analysis(
        fetcher,
        params.listing_url,
        params.listing_pages,
        params.tx_url,
        params.tx_pages,
        params.threshold_pct,
        params.bounds,
        params.tx_shape,
        delay_seconds=PAGE_DELAY_SECONDS,
    )


def _inspect(fetcher, args) -> int:
    default = DEFAULT_TX_URL if args.kind == "transactions" else DEFAULT_LISTING_URL
    url = build_page_url(args.url.strip() or default, max(1, args.page))
    sample = inspect_page(fetcher, url, args.kind, parse_tx_shape(args.tx_shape))
    if sample.first is None:
        print(f"no {args.kind} found on {url}", file=sys.stderr)
        return 1
    print(f"{args.kind}={sample.count}")
    print("keys: " + ", ".join(sample.keys))
    print(json.dumps(sample.first, indent=2, ensure_ascii=False))
    return 0


def _run(fetcher, args) -> int:
    if args.command == "inspect":
        return _inspect(fetcher, args)

    if args.command == "scrape":
        url = args.url.strip() or DEFAULT_LISTING_URL
        pages = clamp_pages(args.pages, MAX_LISTING_PAGES)
        rows = scrape_listings(fetcher, url, pages, PAGE_DELAY_SECONDS)
        Path(args.output).write_text(listings_to_csv(rows), encoding="utf-8")
        print(f"done. rows={len(rows)}, file={args.output}")
        return 0

    params = _params(args)
    result = _analyze(fetcher, params)
    if args.command == "export":
        Path(args.output).write_bytes(build_workbook(result, params))
        print(f"done. listings={len(result.listings)}, file={args.output}")
        return 0

    tx = result.transactions
    print(f"transactions={tx.count} median={tx.median_price_per_area} "
          f"mean={tx.mean_price_per_area} listings={len(result.listings)}")
    for li in result.listings:
        print(f"{li.rating:<9} {li.price_value} {li.price_currency} "
              f"ppa={li.price_per_area} diff={li.diff_pct_median} {li.url}")
    if args.json:
        Path(args.json).write_text(json.dumps(result.to_dict(), indent=2), encoding="utf-8")
    return 0


def main(argv=None) -> int:
    args = _parser().parse_args(argv)
    setup_logging()

    try:
        with PropertyFinderFetcher(timeout=REQUEST_TIMEOUT_SECONDS) as fetcher:
            return _run(fetcher, args)
    except PipelineError as e:
        logger.error("run failed: %s", e)
        print("error: operation failed, please try again", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
