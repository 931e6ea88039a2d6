"""
Backing triple stores.

Two stores answer SPARQL SELECT queries with rows in SPARQL JSON results
form (``{"s": {"type": "uri", "value": "..."}}``):

- ``OxigraphStore``: local store using Oxigraph (pyoxigraph), in memory or
  persistent on disk.
- ``SparqlEndpointStore``: a remote SPARQL endpoint over HTTP.

Vocabulary source documents are fetched with ``fetch_document`` and cached
on disk before being loaded into a local store.

Example:
    >>> store = OxigraphStore()
    >>> store.load("/path/to/dctype.ttl")
    >>> rows = store.query("SELECT ?s WHERE { ?s ?p ?o } LIMIT 10")
"""
from __future__ import annotations

import hashlib
import logging
import time
from pathlib import Path
from typing import Protocol
from urllib.parse import urlparse

import pyoxigraph
import requests

from .errors import StoreUnavailable

logger = logging.getLogger(__name__)

# Cache settings
DEFAULT_CACHE_DIR = Path.home() / ".cache" / "linked-vocabs"
CACHE_TTL_SECONDS = 60 * 60 * 24 * 30  # 30 days
DEFAULT_TIMEOUT = 30.0

_EXTENSION_FORMATS = {
    ".nt": pyoxigraph.RdfFormat.N_TRIPLES,
    ".ntriples": pyoxigraph.RdfFormat.N_TRIPLES,
    ".ttl": pyoxigraph.RdfFormat.TURTLE,
    ".turtle": pyoxigraph.RdfFormat.TURTLE,
    ".rdf": pyoxigraph.RdfFormat.RDF_XML,
    ".xml": pyoxigraph.RdfFormat.RDF_XML,
    ".owl": pyoxigraph.RdfFormat.RDF_XML,
    ".nq": pyoxigraph.RdfFormat.N_QUADS,
    ".trig": pyoxigraph.RdfFormat.TRIG,
}

_NAME_FORMATS = {
    "nt": pyoxigraph.RdfFormat.N_TRIPLES,
    "ttl": pyoxigraph.RdfFormat.TURTLE,
    "rdf": pyoxigraph.RdfFormat.RDF_XML,
    "nq": pyoxigraph.RdfFormat.N_QUADS,
    "trig": pyoxigraph.RdfFormat.TRIG,
}

_MEDIA_TYPE_EXTENSIONS = {
    "text/turtle": ".ttl",
    "application/n-triples": ".nt",
    "application/rdf+xml": ".rdf",
    "application/n-quads": ".nq",
    "application/trig": ".trig",
}

RDF_ACCEPT = "text/turtle, application/n-triples;q=0.9, application/rdf+xml;q=0.8"


class Store(Protocol):
    """Anything that answers SPARQL SELECT queries with JSON-style rows."""

    def query(self, sparql: str) -> list[dict]: ...


def _rdf_format(path: Path, format: str | None = None) -> pyoxigraph.RdfFormat:
    """Pick an RDF format from an explicit name or the file extension."""
    if format is not None:
        return _NAME_FORMATS.get(format, pyoxigraph.RdfFormat.N_TRIPLES)
    return _EXTENSION_FORMATS.get(path.suffix.lower(), pyoxigraph.RdfFormat.N_TRIPLES)


def _binding(value: object) -> dict:
    """Convert a pyoxigraph term to a SPARQL JSON results binding."""
    if isinstance(value, pyoxigraph.NamedNode):
        return {"type": "uri", "value": value.value}
    if isinstance(value, pyoxigraph.BlankNode):
        return {"type": "bnode", "value": value.value}
    if isinstance(value, pyoxigraph.Literal):
        binding = {"type": "literal", "value": value.value}
        if value.language:
            binding["lang"] = value.language
        return binding
    return {"type": "literal", "value": str(value)}


class OxigraphStore:
    """Local triple store using Oxigraph (pyoxigraph).

    Queries see the union of the default graph and all named graphs, so
    vocabularies loaded into their own graphs are searchable together.
    """

    def __init__(self, persistent_path: Path | None = None):
        """Initialize Oxigraph store.

        Args:
            persistent_path: If provided, use persistent storage at this path.
                            Otherwise, use in-memory storage.
        """
        if persistent_path:
            persistent_path = Path(persistent_path)
            persistent_path.parent.mkdir(parents=True, exist_ok=True)
            self._store = pyoxigraph.Store(str(persistent_path))
        else:
            self._store = pyoxigraph.Store()

        self._loaded_files: set[str] = set()
        self._has_data: bool = False

    def load(self, path: Path | str, format: str | None = None, graph: str | None = None) -> int:
        """Load RDF data from a file.

        Args:
            path: Path to RDF file (N-Triples, Turtle, RDF/XML, etc.)
            format: RDF format. Auto-detected from extension if not provided.
                   Supported: "nt", "ttl", "rdf", "nq", "trig"
            graph: Named graph IRI to load into. Default graph if not given.

        Returns:
            Number of triples loaded.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"RDF file not found: {path}")

        # Track loaded files to avoid reloading
        load_key = f"{path.resolve()}#{graph or ''}"
        if load_key in self._loaded_files:
            logger.debug("File already loaded: %s", path)
            return 0

        rdf_format = _rdf_format(path, format)
        logger.info("Loading RDF data from %s (format: %s)...", path, rdf_format)
        initial_count = len(self._store)

        with open(path, "rb") as f:
            self._store.load(f, rdf_format, to_graph=self._graph(graph))

        loaded = len(self._store) - initial_count
        self._loaded_files.add(load_key)
        self._has_data = True
        logger.info("Loaded %d triples from %s (total: %d)", loaded, path, len(self._store))
        return loaded

    def load_data(self, data: str | bytes, format: str = "ttl", graph: str | None = None) -> int:
        """Load RDF data from a string. Returns number of triples loaded."""
        initial_count = len(self._store)
        rdf_format = _NAME_FORMATS.get(format, pyoxigraph.RdfFormat.TURTLE)
        self._store.load(data, rdf_format, to_graph=self._graph(graph))
        self._has_data = True
        return len(self._store) - initial_count

    def add(self, subject: object, predicate: object, obj: object, graph: str | None = None) -> None:
        """Add one triple. Plain strings are read as IRIs, except the object,
        which becomes a plain literal."""
        if isinstance(subject, str):
            subject = pyoxigraph.NamedNode(subject)
        if isinstance(predicate, str):
            predicate = pyoxigraph.NamedNode(predicate)
        if isinstance(obj, str):
            obj = pyoxigraph.Literal(obj)
        self._store.add(pyoxigraph.Quad(subject, predicate, obj, self._graph(graph)))
        self._has_data = True

    def query(self, sparql: str) -> list[dict]:
        """Execute a SPARQL SELECT query.

        Args:
            sparql: SPARQL SELECT query string.

        Returns:
            List of result bindings (dicts mapping variable names to values).
        """
        query_results = self._store.query(sparql, use_default_graph_as_union=True)
        variables = query_results.variables

        results = []
        for solution in query_results:
            row = {}
            for var in variables:
                value = solution[var]
                if value is not None:
                    row[var.value] = _binding(value)
            results.append(row)
        return results

    def __len__(self) -> int:
        """Return number of triples in store."""
        return len(self._store)

    @property
    def is_loaded(self) -> bool:
        """Check if any data has been loaded."""
        return self._has_data

    @staticmethod
    def _graph(graph: str | None) -> pyoxigraph.NamedNode | None:
        return pyoxigraph.NamedNode(graph) if graph else None


class SparqlEndpointStore:
    """Remote SPARQL endpoint queried over HTTP.

    Failures are raised as ``StoreUnavailable`` and never retried here.
    """

    def __init__(self, endpoint: str, timeout: float = DEFAULT_TIMEOUT):
        self.endpoint = endpoint
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"SparqlEndpointStore({self.endpoint!r})"

    def query(self, sparql: str) -> list[dict]:
        """Execute a SPARQL query and return result bindings.

        Raises:
            StoreUnavailable: On timeout, network error, HTTP error or an
                unparseable response.
        """
        headers = {"Accept": "application/sparql-results+json"}
        params = {"query": sparql, "format": "json"}

        try:
            response = requests.get(
                self.endpoint, params=params, headers=headers, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            raise StoreUnavailable(f"SPARQL query timed out for {self.endpoint}: {e}") from e
        except requests.RequestException as e:
            raise StoreUnavailable(f"SPARQL query failed for {self.endpoint}: {e}") from e
        except ValueError as e:
            raise StoreUnavailable(f"Invalid SPARQL response from {self.endpoint}: {e}") from e
        return data.get("results", {}).get("bindings", [])


def _get_cache_path(cache_dir: Path, url: str, suffix: str = "") -> Path:
    """Get cache file path for a document URL."""
    # Use hash to avoid filesystem issues with special characters
    key_hash = hashlib.sha256(url.encode()).hexdigest()[:16]
    name = Path(urlparse(url).path).stem or "document"
    safe_name = "".join(c if c.isalnum() else "_" for c in name[:50])
    return cache_dir / f"{safe_name}_{key_hash}{suffix}"


def _is_fresh(path: Path, ttl: int) -> bool:
    try:
        return time.time() - path.stat().st_mtime <= ttl
    except OSError:
        return False


def _find_cached(cache_dir: Path, url: str) -> Path | None:
    """Return an existing cache file for ``url`` whatever its extension."""
    stem = _get_cache_path(cache_dir, url).name
    if not cache_dir.exists():
        return None
    return next(iter(sorted(cache_dir.glob(f"{stem}*"))), None)


def fetch_document(
    url: str,
    cache_dir: Path | None = None,
    ttl: int = CACHE_TTL_SECONDS,
    timeout: float = DEFAULT_TIMEOUT,
) -> Path:
    """Download an RDF document, reusing a cached copy while it is fresh.

    The cached file keeps an extension matching the document's format so
    ``OxigraphStore.load`` can detect it.

    Args:
        url: Document URL.
        cache_dir: Cache directory. Default: ~/.cache/linked-vocabs/
        ttl: Seconds a cached copy stays valid.
        timeout: Request timeout in seconds.

    Returns:
        Path of the cached document.

    Raises:
        StoreUnavailable: If the document cannot be downloaded and no
            cached copy exists.
    """
    cache_dir = Path(cache_dir or DEFAULT_CACHE_DIR)
    cached = _find_cached(cache_dir, url)
    if cached is not None and _is_fresh(cached, ttl):
        logger.debug("Using cached document for %s: %s", url, cached)
        return cached

    try:
        response = requests.get(url, headers={"Accept": RDF_ACCEPT}, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        if cached is not None:
            logger.warning("Failed to fetch %s, using expired cache %s: %s", url, cached, e)
            return cached
        raise StoreUnavailable(f"Failed to fetch {url}: {e}") from e

    suffix = Path(urlparse(url).path).suffix.lower()
    if suffix not in _EXTENSION_FORMATS:
        media_type = response.headers.get("Content-Type", "").split(";")[0].strip()
        suffix = _MEDIA_TYPE_EXTENSIONS.get(media_type, ".rdf")

    path = _get_cache_path(cache_dir, url, suffix)
    cache_dir.mkdir(parents=True, exist_ok=True)
    if cached is not None and cached != path:
        cached.unlink(missing_ok=True)
    path.write_bytes(response.content)
    logger.info("Fetched %s (%d bytes) to %s", url, len(response.content), path)
    return path
