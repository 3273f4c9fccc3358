"""Spreadsheet export of Pokémon summaries."""

import io
import logging
from collections.abc import Iterable

from openpyxl import Workbook

from pokedex.models.pokemon import PokemonSummary

logger = logging.getLogger(__name__)

SHEET_TITLE = "Pokemons"
EXPORT_FILENAME = "pokemons.xlsx"
XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
HEADER = ("Name", "Species", "ImageUrl")


def build_workbook(items: Iterable[PokemonSummary]) -> bytes:
    """Render *items* as a single-sheet ``.xlsx`` file and return its bytes.

    Missing species or image values are written as empty strings.
    """
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append(HEADER)

    rows = 0
    for item in items:
        ws.append((item.name, item.species_name or "", item.image_url or ""))
        rows += 1

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info("Built spreadsheet with %d rows", rows)
    return buffer.getvalue()
