"""Integration connector catalog and matcher.

Each catalog entry pairs a case-insensitive keyword pattern with the
pipeline module it contributes. Entries are evaluated in declaration
order, so matched connectors always come out in catalog order.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Tuple

_LIST_SEPARATORS = re.compile(r"[\n,;]")


def parse_list(value: str) -> List[str]:
    """Split free text on newline, comma or semicolon; drop blank items."""
    return [item.strip() for item in _LIST_SEPARATORS.split(value) if item.strip()]


# ── Catalog ──────────────────────────────────────────────────────────────

CONNECTOR_CATALOG: List[Tuple[re.Pattern[str], Dict[str, str]]] = [
    (
        re.compile(r"hubspot|crm|salesforce|pipedrive", re.IGNORECASE),
        {
            "app": "HubSpot",
            "module": "Create/Update Contact",
            "purpose": "Sync the enriched lead and update its lifecycle stage.",
            "ai_assist": "Applies AI prioritisation and drafts contextual notes for sales.",
        },
    ),
    (
        re.compile(r"notion|knowledge|wiki", re.IGNORECASE),
        {
            "app": "Notion",
            "module": "Append Page Content",
            "purpose": "Document AI learnings and automatically generated playbooks.",
            "ai_assist": "Structures AI decisions into sections and writes summaries for the team.",
        },
    ),
    (
        re.compile(r"slack|teams|discord", re.IGNORECASE),
        {
            "app": "Slack",
            "module": "Send Message",
            "purpose": "Notify squads with a dynamic recap and AI recommendations.",
            "ai_assist": "Handles tone and priority, and adds personalised suggested actions.",
        },
    ),
    (
        re.compile(r"airtable|spreadsheet|sheet|excel", re.IGNORECASE),
        {
            "app": "Airtable",
            "module": "Create Record",
            "purpose": "Centralise the scenario audit trail and operations tracking.",
            "ai_assist": "Fills derived fields (AI score, category, risk).",
        },
    ),
    (
        re.compile(r"zendesk|freshdesk|support|ticket", re.IGNORECASE),
        {
            "app": "Zendesk",
            "module": "Create Ticket",
            "purpose": "Open an enriched ticket for high-complexity cases.",
            "ai_assist": "Proposes a first answer and automatic tags for the agent.",
        },
    ),
]


def match_connectors(sources: Iterable[str], idea: str, context: str) -> List[Dict[str, str]]:
    """Return the catalog descriptors whose pattern hits any candidate text.

    A connector is selected at most once, however many candidates match.
    The same text may select several connectors.
    """
    candidates = [*sources, idea, context]
    return [
        dict(descriptor)
        for pattern, descriptor in CONNECTOR_CATALOG
        if any(pattern.search(text) for text in candidates)
    ]
