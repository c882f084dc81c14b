"""Translation of command-line help text, selected with KIBCTL_LANG."""
import gettext
import os
from pathlib import Path

LOCALE_DIR = Path(__file__).parent / "locales"
DOMAIN = "kibctl"


def get_translator(lang=None):
    """Return the gettext function for *lang*, or identity when no catalog is installed."""
    translation = gettext.translation(
        DOMAIN,
        localedir=str(LOCALE_DIR),
        languages=[lang or os.getenv("KIBCTL_LANG", "en")],
        fallback=True,
    )
    return translation.gettext


_ = get_translator()
