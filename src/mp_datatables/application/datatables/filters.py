"""Filter compiler – DataTables search → MongoDB find expression.

- No search text: the base filter (``find``) is returned as is, meaning every
  document matching ``find`` is a candidate.
- One searchable column: a single field regex is set on the base filter,
  ``{field: re.compile(text, re.I)}``.
- Several searchable columns: an ``$or`` of field regexes::

      {"$or": [{"name": re.compile("jo", re.I)}, {"email": re.compile("jo", re.I)}]}

  When ``find`` already carries an ``$or``, both disjunctions are kept under
  an ``$and``.

Search is always by regex; the DataTables ``search.regex`` flag is ignored.
"""
from __future__ import annotations

import logging
import re
from typing import Any

from mp_datatables.application.datatables.escape import escape_regex
from mp_datatables.application.datatables.fields import searchable_fields
from mp_datatables.application.datatables.request import DataTablesRequest

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r'"[^"]+"|[^ ]+')
_QUOTED_RE = re.compile(r'^"(.*)"$', re.DOTALL)


def smart_tokens(text: str) -> list[str]:
    """Split *text* into words; a double-quoted run is one word, quotes stripped."""
    words = []
    for word in _TOKEN_RE.findall(text) or [""]:
        if word.startswith('"'):
            m = _QUOTED_RE.match(word)
            word = m.group(1) if m else word
        words.append(word.replace('"', "", 1))
    return words


def build_search_regex(text: str, smart: bool = False) -> re.Pattern[str]:
    """Compile the case-insensitive matcher for already-escaped *text*.

    Smart mode requires every token somewhere in the value, in any order.
    """
    if smart:
        pattern = "^(?=.*?" + ")(?=.*?".join(smart_tokens(text)) + ").*$"
    else:
        pattern = text
    return re.compile(pattern, re.IGNORECASE)


def build_find_parameters(request: DataTablesRequest | None) -> dict[str, Any] | None:
    """Return the MongoDB filter for *request*, or ``None`` when it is invalid.

    ``request.find`` is copied, never mutated, so it can still be used to
    count the unfiltered total.
    """
    if (
        request is None
        or request.columns is None
        or request.search is None
        or request.search.value is None
    ):
        return None

    search_text = escape_regex(request.search.value)
    find_parameters: dict[str, Any] = dict(request.find) if request.find else {}

    if search_text == "":
        return find_parameters

    search_regex = build_search_regex(search_text, request.search.smart)
    fields = searchable_fields(request.columns)

    if not fields:
        logger.debug("datatables.search_ignored reason=no_searchable_columns")
        return find_parameters

    if len(fields) == 1:
        find_parameters[fields[0]] = search_regex
        return find_parameters

    search_or = [{field: search_regex} for field in fields]

    if "$or" in find_parameters:
        previous_or = find_parameters.pop("$or")
        find_parameters["$and"] = [
            *find_parameters.get("$and", []),
            {"$or": previous_or},
            {"$or": search_or},
        ]
    else:
        find_parameters["$or"] = search_or

    return find_parameters


__all__ = ["build_find_parameters", "build_search_regex", "smart_tokens"]
