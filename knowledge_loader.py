"""
Knowledge-base and synonym table loading.

Both inputs are JSON documents read once at startup, either from a local
file or over HTTP (the portfolio site serves ``/knowledge-base.json``).

Dependencies:
- requests: HTTP client for remote JSON sources
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import requests

import assistant_config as config
from assistant_errors import KnowledgeBaseLoadError
from exception_logger import exception_logger


def load_json_source(source: Union[str, Path], timeout: float = config.HTTP_TIMEOUT_SECONDS) -> Any:
    """
    Read JSON from a file path or an ``http(s)://`` URL.

    Raises:
        KnowledgeBaseLoadError: The source is unreachable or not valid JSON
    """
    source = str(source).strip()
    if not source:
        raise KnowledgeBaseLoadError("No JSON source configured.")

    if source.startswith(("http://", "https://")):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as exc:
            exception_logger.log_exception(exc, "loader", f"GET {source}")
            raise KnowledgeBaseLoadError(f"Could not fetch {source}: {exc}") from exc

    path = Path(source)
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        exception_logger.log_exception(exc, "loader", f"read {path}")
        raise KnowledgeBaseLoadError(f"Could not read {path}: {exc}") from exc


def load_knowledge_base(source: Union[str, Path] = config.KNOWLEDGE_BASE_SOURCE) -> Dict[str, Any]:
    data = load_json_source(source)
    if not isinstance(data, dict):
        raise KnowledgeBaseLoadError(
            f"Knowledge base must be a JSON object of categories, got {type(data).__name__}"
        )
    return data


def load_synonyms(source: Union[str, Path] = config.SYNONYMS_SOURCE) -> Dict[str, Any]:
    """Load the synonym table; entries are validated later by ``SynonymExpander``."""
    data = load_json_source(source)
    if not isinstance(data, dict):
        raise KnowledgeBaseLoadError(
            f"Synonym table must be a JSON object, got {type(data).__name__}"
        )
    return data
