"""ART-DECOR terminology source.

Retrieves protocol catalogs (ProjectIndex) and codebook datasets
(RetrieveDataset) from an ART-DECOR services endpoint and parses the XML
responses with lxml. Transient network failures are retried; anything
else surfaces as a CatalogError.
"""

from __future__ import annotations

from urllib.parse import urlencode

import requests
from loguru import logger
from lxml import etree
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from palgatrans.catalog.base import CatalogError
from palgatrans.models.codebook import (
    CatalogEntry,
    ConceptDefinition,
    TermCode,
    ValueDefinition,
)
from palgatrans.settings import get_server


class ArtDecorSource:
    """Terminology source backed by the ART-DECOR REST services.

    Usage::

        source = ArtDecorSource()
        entries = source.fetch_catalog("ppcolbio-")
        concepts = source.fetch_concept_definitions(entries[-1].dataset_id, "nl-NL")
    """

    def __init__(
        self,
        server: str | None = None,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.server = server or get_server()
        if not self.server.endswith("/"):
            self.server += "/"
        self.timeout = timeout
        self._session = session or requests.Session()

    def project_index_uri(self, protocol_prefix: str) -> str:
        return f"{self.server}ProjectIndex?" + urlencode(
            {"prefix": protocol_prefix, "format": "xml"}
        )

    def dataset_uri(self, dataset_id: str, language: str) -> str:
        return f"{self.server}RetrieveDataset?" + urlencode(
            {"id": dataset_id, "language": language, "format": "xml"}
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        reraise=True,
    )
    def _get(self, uri: str) -> bytes:
        logger.debug("GET {}", uri)
        response = self._session.get(uri, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def _fetch_xml(self, uri: str, prefix: str | None = None) -> etree._Element:
        try:
            content = self._get(uri)
        except requests.RequestException as e:
            msg = f"Could not retrieve {uri}: {e}"
            raise CatalogError(msg, prefix=prefix, uri=uri) from e
        try:
            return etree.fromstring(content)
        except etree.XMLSyntaxError as e:
            msg = f"Invalid XML returned by {uri}: {e}"
            raise CatalogError(msg, prefix=prefix, uri=uri) from e

    def fetch_catalog(self, protocol_prefix: str) -> list[CatalogEntry]:
        uri = self.project_index_uri(protocol_prefix)
        logger.info(
            "Attempting to retrieve which versions of the codebook are available using {}", uri
        )
        root = self._fetch_xml(uri, prefix=protocol_prefix)
        entries = parse_project_index(root)
        for entry in entries:
            logger.info("versionlabel found: {} id found: {}", entry.version_label, entry.dataset_id)
        return entries

    def fetch_concept_definitions(
        self, dataset_id: str, language: str
    ) -> list[ConceptDefinition]:
        uri = self.dataset_uri(dataset_id, language)
        logger.info("Retrieving codebook dataset {} ({})", dataset_id, language)
        root = self._fetch_xml(uri)
        return parse_dataset(root, language)


# ---------------------------------------------------------------------------
# XML parsing
# ---------------------------------------------------------------------------


def _localname(element: etree._Element) -> str:
    return etree.QName(element).localname


def _children(element: etree._Element, name: str) -> list[etree._Element]:
    return [c for c in element if isinstance(c.tag, str) and _localname(c) == name]


def _term_from_association(element: etree._Element) -> TermCode | None:
    associations = _children(element, "terminologyAssociation")
    if not associations:
        return None
    assoc = associations[0]
    code = assoc.get("code")
    if code is None:
        return None
    return TermCode(
        code=code,
        code_system=assoc.get("codeSystemName") or assoc.get("codeSystem") or "",
        display_name=assoc.get("displayName") or "",
    )


def _name_in_language(element: etree._Element, language: str) -> str | None:
    names = _children(element, "name")
    for name in names:
        if name.get("language") == language:
            return (name.text or "").strip()
    if names:
        return (names[0].text or "").strip()
    return None


def parse_project_index(root: etree._Element) -> list[CatalogEntry]:
    """Parse a ProjectIndex response into catalog entries, in document order."""
    entries: list[CatalogEntry] = []
    for dataset in root.iter("{*}dataset"):
        languages: list[str] = []
        for desc in dataset.iter("{*}desc"):
            language = desc.get("language")
            if language and language not in languages:
                languages.append(language)
        entries.append(
            CatalogEntry(
                version_label=dataset.get("versionLabel", ""),
                dataset_id=dataset.get("id", ""),
                languages=languages,
            )
        )
    return entries


def parse_dataset(root: etree._Element, language: str) -> list[ConceptDefinition]:
    """Parse a RetrieveDataset response into concept definitions.

    Every ``concept`` with a ``shortName`` outside a ``conceptList`` is a
    dataset column. Its value list lives under
    ``valueDomain/conceptList/concept``.
    """
    definitions: list[ConceptDefinition] = []
    for concept in root.iter("{*}concept"):
        parent = concept.getparent()
        if parent is not None and _localname(parent) == "conceptList":
            continue
        column_name = concept.get("shortName")
        if not column_name:
            continue

        values: list[ValueDefinition] = []
        for value_domain in _children(concept, "valueDomain"):
            for concept_list in _children(value_domain, "conceptList"):
                for option in _children(concept_list, "concept"):
                    raw_value = _name_in_language(option, language)
                    term = _term_from_association(option)
                    if raw_value is None or term is None:
                        logger.debug(
                            "Skipping option {} of {} without terminology",
                            option.get("id"),
                            column_name,
                        )
                        continue
                    values.append(
                        ValueDefinition(
                            raw_value=raw_value,
                            code=term.code,
                            code_system=term.code_system,
                            display_name=term.display_name,
                        )
                    )

        definitions.append(
            ConceptDefinition(
                column_name=column_name,
                concept_id=concept.get("id", ""),
                terminology=_term_from_association(concept),
                values=values,
            )
        )
    return definitions
