"""Shared pytest fixtures."""

from __future__ import annotations

import json
import locale
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from expense_search.utils.formatting import set_default_currency
from expense_search.utils.messages import set_locale

if TYPE_CHECKING:
    from collections.abc import Generator

    from expense_search.models import ReferenceData, SearchResults


PERSONAL_DETAILS: dict[str, dict[str, Any]] = {
    "1": {"accountID": 1, "displayName": "Jane Doe", "login": "jane@example.com"},
    "2": {"accountID": 2, "displayName": "Bob Manager", "login": "bob@example.com"},
    "3": {"accountID": 3, "login": "carol@example.com"},
}


@pytest.fixture(autouse=True)
def _reset_module_settings() -> Generator[None, None, None]:
    """Locale, collation and currency are process-wide; keep tests independent of each other."""
    collation = locale.setlocale(locale.LC_COLLATE)
    set_locale("en")
    set_default_currency("USD")
    yield
    set_locale("en")
    set_default_currency("USD")
    locale.setlocale(locale.LC_COLLATE, collation)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text("""[display]
colored_output = false
locale = "en"

[search]
default_type = "expense"
default_status = "all"

[formatting]
default_currency = "USD"
""")
    return config_path


@pytest.fixture
def results_payload() -> dict[str, Any]:
    """Search response with two reports; one transaction precedes its report."""
    return {
        "data": {
            "personalDetailsList": PERSONAL_DETAILS,
            "report_100": {
                "reportID": "100",
                "reportName": "Q1 Travel",
                "type": "expense",
                "total": -4500,
                "currency": "USD",
                "accountID": 1,
                "managerID": 2,
                "created": "2024-03-01",
            },
            "transaction_1": {
                "transactionID": "1",
                "reportID": "100",
                "accountID": 1,
                "managerID": 2,
                "amount": -1500,
                "currency": "USD",
                "merchant": "Starbucks",
                "category": "Meals",
                "tag": "Engineering",
                "created": "2024-03-02",
                "reportType": "expense",
                "transactionType": "card",
                "comment": {"comment": "Coffee"},
            },
            "transaction_2": {
                "transactionID": "2",
                "reportID": "100",
                "accountID": 1,
                "managerID": 2,
                "amount": -3000,
                "currency": "USD",
                "merchant": "Delta",
                "category": "Travel",
                "created": "2024-03-05",
                "modifiedCreated": "2024-03-06",
                "reportType": "expense",
                "transactionType": "cash",
            },
            "transaction_3": {
                "transactionID": "3",
                "reportID": "200",
                "accountID": 3,
                "managerID": 1,
                "amount": 2500,
                "currency": "USD",
                "merchant": "(none)",
                "created": "2023-12-30",
                "reportType": "iou",
            },
            "report_200": {
                "reportID": "200",
                "reportName": "IOU",
                "type": "iou",
                "total": 2500,
                "currency": "USD",
                "accountID": 3,
                "managerID": 1,
                "action": "view",
            },
        },
        "search": {
            "columnsToShow": {
                "shouldShowCategoryColumn": True,
                "shouldShowTagColumn": False,
                "shouldShowTaxColumn": False,
            }
        },
    }


@pytest.fixture
def chat_payload() -> dict[str, Any]:
    """Chat search response with one deleted action."""
    return {
        "data": {
            "personalDetailsList": PERSONAL_DETAILS,
            "reportActions_300": {
                "a1": {
                    "reportActionID": "a1",
                    "accountID": 1,
                    "created": "2024-03-01 10:00:00",
                    "actionName": "ADDCOMMENT",
                    "message": [{"html": "hello", "text": "hello"}],
                },
                "a2": {
                    "reportActionID": "a2",
                    "accountID": 2,
                    "created": "2024-03-02 09:00:00",
                    "actionName": "ADDCOMMENT",
                    "message": [{"html": "", "text": ""}],
                },
                "a3": {
                    "reportActionID": "a3",
                    "accountID": 2,
                    "created": "2024-03-03 08:00:00",
                    "actionName": "ADDCOMMENT",
                    "message": [{"html": "lunch?", "text": "lunch?"}],
                },
            },
        }
    }


@pytest.fixture
def reference_payload() -> dict[str, Any]:
    """Reference collections used by the filter form."""
    return {
        "policyCategories": {
            "P1": {"Meals": {"name": "Meals"}, "Travel": {"name": "Travel"}},
            "P2": {"Office": {"name": "Office"}},
        },
        "policyTags": {
            "P1": {"Department": {"tags": {"Engineering": {"name": "Engineering"}}}},
            "P2": {"Department": {"tags": {"Sales": {"name": "Sales"}}}},
        },
        "currencyList": {"USD": {"symbol": "$"}, "EUR": {"symbol": "€"}},
        "personalDetails": PERSONAL_DETAILS,
        "cardList": {"11": {"cardID": 11, "bank": "Chase"}},
        "reports": {"100": {"reportName": "Q1 Travel"}},
        "taxRates": {"VAT": ["id_TAX_1", "id_TAX_2"], "GST": ["id_TAX_3"]},
    }


@pytest.fixture
def search_results(results_payload: dict[str, Any]) -> SearchResults:
    from expense_search.models import SearchResults

    return SearchResults.from_payload(results_payload)


@pytest.fixture
def reference(reference_payload: dict[str, Any]) -> ReferenceData:
    from expense_search.models import ReferenceData

    return ReferenceData.from_payload(reference_payload)


@pytest.fixture
def results_file(temp_dir: Path, results_payload: dict[str, Any]) -> Path:
    path = temp_dir / "results.json"
    path.write_text(json.dumps(results_payload))
    return path


@pytest.fixture
def reference_file(temp_dir: Path, reference_payload: dict[str, Any]) -> Path:
    path = temp_dir / "reference.json"
    path.write_text(json.dumps(reference_payload))
    return path
