import logging
import os

from dotenv import load_dotenv

load_dotenv()

TELEGRAM_TOKEN = os.getenv("TELEGRAM_TOKEN")

DEFAULT_LISTING_URL = os.getenv(
    "PF_LISTING_URL",
    "https://www.propertyfinder.ae/en/search?l=10493&c=2&fu=0&rp=y&ob=mr",
)
DEFAULT_TX_URL = os.getenv(
    "PF_TRANSACTIONS_URL",
    "https://www.propertyfinder.ae/en/transactions/buy/dubai/"
    "jumeirah-lake-towers-uptown-dubai-uptown-tower?period=1y&fu=0&ob=mr&sort=sqa",
)

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
# pause between page requests; keep the request rate polite on big runs
PAGE_DELAY_SECONDS = float(os.getenv("PAGE_DELAY_SECONDS", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def setup_logging() -> None:
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
    # httpx logs every Telegram poll at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
