import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Callable, Sequence

from telegram import LinkPreviewOptions, Update
from telegram.constants import ParseMode
from telegram.ext import Application, CommandHandler, ContextTypes

from pf_checker.core.params import (MAX_LISTING_PAGES, AnalysisParams,
                                    clamp_pages, parse_params)
from pf_checker.core.pipeline import run_analysis, scrape_listings
from pf_checker.suppliers.base import PageFetcher
from pf_checker.utils.export import build_workbook, listings_to_csv
from pf_checker.utils.formatting import (build_keyboard, cheapest,
                                         format_summary)

logger = logging.getLogger(__name__)

FAILURE_TEXT = "Something went wrong. Please try again."

SETTINGS_KEY = "settings"


@dataclass(frozen=True)
class BotSettings:
    default_listing_url: str
    default_tx_url: str
    make_fetcher: Callable[[], PageFetcher]
    delay_seconds: float = 0


def parse_args(args: Sequence[str]) -> dict[str, str]:
    """['listing_pages=2', 'https://...'] -> {'listing_pages': '2', 'url': 'https://...'}"""
    out: dict[str, str] = {}
    for arg in args:
        if arg.startswith("http"):
            out["url"] = arg
            continue
        key, sep, value = arg.partition("=")
        if sep:
            out[key.strip().lower().replace("-", "_")] = value.strip()
    return out


def _settings(context: ContextTypes.DEFAULT_TYPE) -> BotSettings:
    return context.application.bot_data[SETTINGS_KEY]


def _params(context: ContextTypes.DEFAULT_TYPE) -> AnalysisParams:
    settings = _settings(context)
    raw = parse_args(context.args or [])
    if "url" in raw:
        raw.setdefault("listing_url", raw["url"])
    return parse_params(raw, settings.default_listing_url, settings.default_tx_url)


def _scrape(settings: BotSettings, url: str, pages: int):
    with settings.make_fetcher() as fetcher:
        return scrape_listings(fetcher, url, pages, settings.delay_seconds)


def _analyze(settings: BotSettings, params: AnalysisParams):
    with settings.make_fetcher() as fetcher:
        return run_analysis(
            fetcher,
            params.listing_url,
            params.listing_pages,
            params.tx_url,
            params.tx_pages,
            params.threshold_pct,
            params.bounds,
            params.tx_shape,
            delay_seconds=settings.delay_seconds,
        )


# Handlers
async def start(update: Update, _: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(
        "Hi! I rate Property Finder listings against recent transactions.\n\n"
        "/scrape [url] [pages=N] — listings as CSV\n"
        "/analyze [key=value ...] — price/area summary\n"
        "/export [key=value ...] — full analysis as .xlsx\n\n"
        "Keys: listing_url, listing_pages, tx_url, tx_pages, threshold, "
        "bed_min, bed_max, size_min, size_max, tx_shape (list|nested)"
    )


async def scrape(update: Update, context: ContextTypes.DEFAULT_TYPE):
    settings = _settings(context)
    raw = parse_args(context.args or [])
    url = raw.get("url") or raw.get("listing_url") or settings.default_listing_url
    pages = clamp_pages(raw.get("pages") or raw.get("listing_pages"), MAX_LISTING_PAGES)

    await update.message.reply_text(f"Fetching {pages} page(s)…")
    try:
        rows = await asyncio.to_thread(_scrape, settings, url, pages)
    except Exception:
        logger.exception("scrape failed for %s", url)
        await update.message.reply_text(FAILURE_TEXT)
        return

    await update.message.reply_document(
        document=io.BytesIO(listings_to_csv(rows).encode("utf-8")),
        filename="propertyfinder.csv",
        caption=f"{len(rows)} rows",
    )


async def analyze(update: Update, context: ContextTypes.DEFAULT_TYPE):
    settings = _settings(context)
    params = _params(context)

    await update.message.reply_text("Analyzing…")
    try:
        result = await asyncio.to_thread(_analyze, settings, params)
    except Exception:
        logger.exception("analysis failed")
        await update.message.reply_text(FAILURE_TEXT)
        return

    await update.message.reply_text(
        format_summary(result, params),
        parse_mode=ParseMode.HTML,
        reply_markup=build_keyboard(cheapest(result.listings)),
        link_preview_options=LinkPreviewOptions(is_disabled=True),
    )


async def export(update: Update, context: ContextTypes.DEFAULT_TYPE):
    settings = _settings(context)
    params = _params(context)

    await update.message.reply_text("Building workbook…")
    try:
        result = await asyncio.to_thread(_analyze, settings, params)
        payload = build_workbook(result, params)
    except Exception:
        logger.exception("export failed")
        await update.message.reply_text(FAILURE_TEXT)
        return

    await update.message.reply_document(
        document=io.BytesIO(payload),
        filename="propertyfinder_analysis.xlsx",
        caption=f"{result.transactions.count} transactions, {len(result.listings)} listings",
    )


def attach_handlers(app: Application, settings: BotSettings):
    app.bot_data[SETTINGS_KEY] = settings
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("scrape", scrape))
    app.add_handler(CommandHandler("analyze", analyze))
    app.add_handler(CommandHandler("export", export))
