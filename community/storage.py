import logging
from pathlib import Path

from django.conf import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_FILES = (
    'section-609.pdf',
    'inquiry-removal.pdf',
    'medical-debt.pdf',
    'cease-desist.pdf',
    'vod-template.pdf',
)

PLACEHOLDER_TEXT = (
    "DEBT ERASER PRO - {name}\n\n"
    "This is a placeholder document.\n\n"
    "In production, replace this with actual legal templates."
)


def vault_dir():
    return Path(settings.VAULT_DIR)


def ensure_vault_dir():
    path = vault_dir()
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        logger.info("Created vault directory %s", path)
    return path


def create_placeholder_files():
    """Write the demo templates into the vault. Existing files are left alone."""
    path = ensure_vault_dir()
    created = []
    for filename in PLACEHOLDER_FILES:
        target = path / filename
        if target.exists():
            continue
        target.write_text(PLACEHOLDER_TEXT.format(name=Path(filename).stem.upper()))
        created.append(filename)

    if created:
        logger.info("Created %d placeholder vault files", len(created))
    return created


def vault_url(filename):
    return f"{settings.VAULT_URL}{filename}"
