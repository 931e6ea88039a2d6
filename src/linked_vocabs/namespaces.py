"""
Namespaces and predicate IRIs used for labels and search.
"""

SKOS_NS = "http://www.w3.org/2004/02/skos/core#"
DCTERMS_NS = "http://purl.org/dc/terms/"
RDFS_NS = "http://www.w3.org/2000/01/rdf-schema#"

SKOS_PREF_LABEL = SKOS_NS + "prefLabel"
SKOS_ALT_LABEL = SKOS_NS + "altLabel"
SKOS_HIDDEN_LABEL = SKOS_NS + "hiddenLabel"
DC_TITLE = DCTERMS_NS + "title"
RDFS_LABEL = RDFS_NS + "label"

# Tried in order when a resource has no label of its own declared predicates
DEFAULT_LABEL_PREDICATES = (
    SKOS_PREF_LABEL,
    DC_TITLE,
    RDFS_LABEL,
    SKOS_ALT_LABEL,
    SKOS_HIDDEN_LABEL,
)

# Predicates whose matches are preferred over incidental literal matches in search
SEARCH_LABEL_PREDICATES = (
    SKOS_PREF_LABEL,
    DC_TITLE,
    RDFS_LABEL,
)

__all__ = [
    "SKOS_NS",
    "DCTERMS_NS",
    "RDFS_NS",
    "SKOS_PREF_LABEL",
    "SKOS_ALT_LABEL",
    "SKOS_HIDDEN_LABEL",
    "DC_TITLE",
    "RDFS_LABEL",
    "DEFAULT_LABEL_PREDICATES",
    "SEARCH_LABEL_PREDICATES",
]
