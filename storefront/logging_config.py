"""
Configuration centralisée des logs.
- Format commun: horodatage, niveau, PID, logger, message.
- Sortie console (stdout, compatible Docker) et fichier optionnel (LOG_FILE).
- Verbosité réduite pour les bibliothèques tierces (stripe, httpx, hpack).
"""
import logging
import sys

from storefront.config import LOG_FILE, LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(levelname)s - [PID:%(process)d] - %(name)s - %(message)s"

def setup_logging(level: str = LOG_LEVEL, log_file: str = LOG_FILE) -> None:
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
    for noisy in ("stripe", "httpx", "hpack"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
