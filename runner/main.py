from telegram.ext import Application

from pf_checker.bot.telegram_bot import BotSettings, attach_handlers
from pf_checker.suppliers.propertyfinder import PropertyFinderFetcher
from runner.config import (DEFAULT_LISTING_URL, DEFAULT_TX_URL,
                           PAGE_DELAY_SECONDS, REQUEST_TIMEOUT_SECONDS,
                           TELEGRAM_TOKEN, setup_logging)


def main():
    setup_logging()
    if not TELEGRAM_TOKEN:
        raise RuntimeError("TELEGRAM_TOKEN not found in .env")

    # 1) Pipeline settings; each run gets its own fetcher/session
    settings = BotSettings(
        default_listing_url=DEFAULT_LISTING_URL,
        default_tx_url=DEFAULT_TX_URL,
        make_fetcher=lambda: PropertyFinderFetcher(timeout=REQUEST_TIMEOUT_SECONDS),
        delay_seconds=PAGE_DELAY_SECONDS,
    )

    # 2) Build bot
    application = Application.builder().token(TELEGRAM_TOKEN).build()

    # 3) Handlers
    attach_handlers(application, settings)

    print("Bot running. Ctrl+C to stop.")
    application.run_polling(close_loop=False)


if __name__ == "__main__":
    main()
