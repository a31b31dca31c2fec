"""
Extraction pipeline: document -> ordered, validated CaseRecord list.

    hash -> cache -> gateway -> normalize -> cache write -> ids

A gateway failure aborts the whole run; nothing partial is returned. A
malformed individual record is defaulted field by field and never aborts
the rest of the batch.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from jurispanel.db.schemas import CaseRecord, Party, SessionMetadata
from jurispanel.services.audit_service import AuditService
from jurispanel.services.content_hash import content_hash
from jurispanel.services.document_loader import DocumentPayload
from jurispanel.services.extraction_cache import ExtractionCache
from jurispanel.services.id_service import CASE_PREFIX, IdService
from jurispanel.services.prompts import CASE_LIST_SCHEMA, METADATA_FIELDS
from jurispanel.services.providers import ModelGateway, ModelGatewayError

logger = logging.getLogger(__name__)

NULL_LIKE_OBSERVATIONS = frozenset({"null", "nulo", "none", "", "undefined"})

_TEXT_FIELDS = ("numero_processo", "classe", "ementa", "resumo_estruturado")


def clean_observation(value: Any) -> Optional[str]:
    """
    Null-like flag strings ("NULO", "", "undefined", ...) become ``None``.
    Anything else is returned verbatim, padding included.
    """
    if value is None or not isinstance(value, str):
        return None
    if value.strip().lower() in NULL_LIKE_OBSERVATIONS:
        return None
    return value


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def _as_chamada(value: Any, position: int) -> int:
    """Call order, or the 1-based *position* when missing, zero or negative."""
    number = None
    if isinstance(value, int) and not isinstance(value, bool):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        number = int(value.strip())
    if number is None or number < 1:
        return position
    return number


def _as_parties(value: Any) -> List[Party]:
    if not isinstance(value, list):
        return []
    parties = []
    for item in value:
        if not isinstance(item, dict):
            continue
        name = _as_text(item.get("name"))
        role = _as_text(item.get("role"))
        if not name and not role:
            continue
        advogado = _as_text(item.get("advogado")) or None
        parties.append(Party(role=role, name=name, advogado=advogado))
    return parties


def _as_tags(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [t.strip() for t in value if isinstance(t, str) and t.strip()]


def normalize_records(raw: List[Any], ids: IdService, digest: Optional[str]) -> List[CaseRecord]:
    """
    Turn the gateway's raw array into CaseRecords.

    Every accepted element gets a fresh ``P-`` id; ``chamada`` falls back to
    the element's 1-based position. The result is sorted by ``chamada``
    (stable, so ties keep response order).
    """
    cases: List[CaseRecord] = []
    for position, item in enumerate(raw, start=1):
        if not isinstance(item, dict):
            logger.warning("Skipping non-object record at position %d", position)
            continue
        fields: Dict[str, Any] = {name: _as_text(item.get(name)) for name in _TEXT_FIELDS}
        cases.append(CaseRecord(
            internal_id=ids.next(CASE_PREFIX),
            content_hash=digest,
            chamada=_as_chamada(item.get("chamada"), position),
            partes=_as_parties(item.get("partes")),
            juiz_sentenciante=_as_text(item.get("juiz_sentenciante")) or None,
            tags=_as_tags(item.get("tags")),
            observacao=clean_observation(item.get("observacao")),
            **fields,
        ))
    return sorted(cases, key=lambda c: c.chamada)


class ExtractionPipeline:
    def __init__(
        self,
        gateway: ModelGateway,
        ids: IdService,
        cache: ExtractionCache,
        audit: AuditService,
    ) -> None:
        self.gateway = gateway
        self.ids = ids
        self.cache = cache
        self.audit = audit

    def run(self, document: DocumentPayload, metadata: Optional[SessionMetadata] = None) -> Tuple[List[CaseRecord], bool, str]:
        """
        Returns ``(cases, cache_hit, digest)``.

        Cached lists are reloaded with freshly issued ids so repeated loads
        of one document never collide; ``contentHash`` is kept.
        """
        digest = content_hash(document.hash_source)
        label = document.filename or (metadata.orgao if metadata else "") or "documento"

        cached = self.cache.get(digest)
        if cached is not None:
            cases = [
                c.model_copy(update={"internal_id": self.ids.next(CASE_PREFIX), "content_hash": digest})
                for c in cached
            ]
            cases.sort(key=lambda c: c.chamada)
            logger.info("Cache hit %s: %d cases", digest, len(cases))
            self.audit.log("Cache Utilizado", f"{len(cases)} processos recuperados do cache ({label})", digest)
            return cases, True, digest

        try:
            raw = self.gateway.extract(document, CASE_LIST_SCHEMA)
            if not isinstance(raw, list):
                raise ModelGatewayError(self.gateway.provider, "response is not a JSON array")
        except ModelGatewayError as exc:
            logger.error("Extraction failed for %s: %s", label, exc)
            self.audit.log("Erro Processamento", str(exc), digest)
            raise

        cases = normalize_records(raw, self.ids, digest)
        self.cache.put(digest, cases)
        logger.info("Extracted %d cases from %s (%s)", len(cases), label, self.gateway.provider)
        self.audit.log("Processamento IA", f"{len(cases)} processos extraídos de {label}", digest)
        return cases, False, digest


def autofill_metadata(gateway: ModelGateway, document: DocumentPayload, current: Optional[SessionMetadata] = None) -> SessionMetadata:
    """
    Merge metadata found by the model over ``current``.

    Advisory only: on failure the current metadata comes back unchanged.
    """
    current = current or SessionMetadata()
    try:
        found = gateway.extract_metadata(document)
    except ModelGatewayError as exc:
        logger.warning("Metadata auto-fill failed: %s", exc)
        return current

    updates = {}
    for name in METADATA_FIELDS:
        value = _as_text(found.get(name)).strip()
        if value:
            updates[name] = value
    return current.model_copy(update=updates)
