# shop_admin/config.py
import os
import logging
from pathlib import Path
from dotenv import load_dotenv
from typing import List

# Load environment variables
load_dotenv()

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent

class Config:
    """Configuration settings for the admin console"""

    # Bot settings
    TELEGRAM_TOKEN: str = os.getenv("TELEGRAM_TOKEN")
    if not TELEGRAM_TOKEN:
        raise ValueError("No TELEGRAM_TOKEN set in environment")

    # Backend settings
    BACKEND_URL: str = os.getenv("BACKEND_URL", "").rstrip("/")
    if not BACKEND_URL:
        raise ValueError("No BACKEND_URL set in environment")

    # Admin settings
    ADMIN_IDS: List[int] = [
        int(id_) for id_ in os.getenv("ADMIN_IDS", "").split(",")
        if id_.strip().isdigit()
    ]

    # Display settings
    CURRENCY: str = os.getenv("CURRENCY", "$")
    PAGE_SIZE: int = int(os.getenv("PAGE_SIZE", "10"))

    # Other settings
    TIMEZONE: str = os.getenv("TZ", "UTC")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Paths
    LOG_DIR = BASE_DIR / "logs"

    # Ensure directories exist
    LOG_DIR.mkdir(exist_ok=True)

def setup_logging():
    """Configure logging settings"""
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    log_file = Config.LOG_DIR / "bot.log"

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL),
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )
