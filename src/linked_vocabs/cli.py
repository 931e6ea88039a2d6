#!/usr/bin/env python3
# PYTHON_ARGCOMPLETE_OK
"""
Command-line interface for linked-vocabs
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import argcomplete

from ._version import __version__
from .catalog import catalog_from_config
from .config import Config
from .errors import StoreUnavailable, UnknownVocabulary
from .registry import VocabularyRegistry
from .resolver import TermResolver
from .resource import ControlledClass
from .search import VocabularySearch
from .store import OxigraphStore, SparqlEndpointStore, Store


def build_registry(config: Config, vocabularies: list[str] | None = None) -> VocabularyRegistry:
    """Register the requested vocabularies, or the configured ones, or the whole catalog.

    Raises:
        UnknownVocabulary: If a requested name is not in the catalog.
    """
    catalog = catalog_from_config(config)
    registry = VocabularyRegistry(catalog)
    for name in vocabularies or config.use_vocabularies or catalog.names():
        registry.register(name)
    return registry


def build_store(
    config: Config,
    data: list[Path] | None = None,
    endpoint: str | None = None,
    store_path: Path | None = None,
) -> Store:
    """Open the remote endpoint if one is given, otherwise a local Oxigraph store
    with the requested data files loaded."""
    endpoint = endpoint or config.store_endpoint
    if endpoint:
        return SparqlEndpointStore(endpoint, timeout=config.timeout)
    store = OxigraphStore(persistent_path=store_path or config.store_path)
    for path in [*config.store_data, *(data or [])]:
        store.load(path)
    return store


def config_command(show: bool = False, show_path: bool = False) -> int:
    """Show configuration information."""
    config = Config()

    if show_path:
        if config.path:
            print(config.path)
        else:
            print("No configuration file found")
        return 0

    if config.path:
        print(f"# Configuration loaded from: {config.path}")
    else:
        print("# No configuration file found, showing defaults")
    print()
    print(json.dumps(config.data, indent=2, default=str))
    return 0


def vocabularies_command(config: Config) -> int:
    """List the vocabularies known to the catalog."""
    catalog = catalog_from_config(config)
    for name in catalog.names():
        entry = catalog.get(name)
        kind = "strict" if entry.strict else "open"
        source = f" <{entry.source}>" if entry.source else ""
        print(f"  {name}: {entry.prefix} ({kind}){source}")
    return 0


def resolve_command(identifier: str, vocabularies: list[str] | None, config: Config) -> int:
    """Resolve an identifier against the registered vocabularies."""
    try:
        registry = build_registry(config, vocabularies)
    except UnknownVocabulary as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    resolver = TermResolver(registry)
    resolution = resolver.resolve(identifier)
    if not resolution.accepted:
        print(f"Rejected: {identifier} (anonymous node)")
        return 1

    vocab = registry.matching(resolution.value)
    print(f"{resolution.text}")
    print(f"  status: {resolution.status.value}")
    print(f"  bound: {'yes' if resolution.bound else 'no'}")
    if vocab:
        print(f"  vocabulary: {vocab.name}")
        print(f"  in vocabulary: {'yes' if resolver.in_vocab(resolution.value) else 'no'}")
    return 0


def search_command(
    query: str,
    vocabularies: list[str] | None,
    config: Config,
    data: list[Path] | None = None,
    endpoint: str | None = None,
    as_json: bool = False,
) -> int:
    """Search the store for terms of the registered vocabularies."""
    try:
        registry = build_registry(config, vocabularies)
        store = build_store(config, data=data, endpoint=endpoint)
        hits = VocabularySearch(registry, store, config.label_predicates).search(query)
    except (UnknownVocabulary, StoreUnavailable, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if as_json:
        print(json.dumps([hit.to_dict() for hit in hits], indent=2, ensure_ascii=False))
        return 0

    if not hits:
        print(f"No matches for '{query}'")
        return 1
    for hit in hits:
        print(f"  {hit.label}  <{hit.id}>")
    return 0


def label_command(
    identifier: str,
    vocabularies: list[str] | None,
    config: Config,
    data: list[Path] | None = None,
    endpoint: str | None = None,
) -> int:
    """Print the display label of a resource, using the configured label languages."""
    try:
        registry = build_registry(config, vocabularies)
        store = build_store(config, data=data, endpoint=endpoint)
        resources = ControlledClass(
            "cli",
            registry=registry,
            label_predicates=config.label_predicates,
            preferred_languages=config.preferred_languages,
            store=store,
        )
        resource = resources.fetch(identifier)
    except (UnknownVocabulary, StoreUnavailable, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    labels = resource.rdf_label()
    if not labels:
        print(f"No label for {identifier}")
        return 1
    for label in labels:
        print(label)
    return 0


def terms_command(vocabularies: list[str] | None, config: Config) -> int:
    """List the terms of the registered strict vocabularies."""
    try:
        registry = build_registry(config, vocabularies)
    except UnknownVocabulary as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for term in registry.list_terms():
        print(term.value)
    return 0


def load_command(vocabularies: list[str] | None, config: Config, store_path: Path | None = None) -> int:
    """Fetch vocabulary source documents into a local store."""
    try:
        registry = build_registry(config, vocabularies)
    except UnknownVocabulary as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    store_path = store_path or config.store_path
    if store_path is None:
        print("Warning: no --store or store.path configured, loading into memory only", file=sys.stderr)
    store = OxigraphStore(persistent_path=store_path)
    try:
        loaded = registry.load_vocabularies(
            store,
            cache_dir=config.cache_dir,
            ttl=config.cache_ttl_seconds,
            timeout=config.timeout,
        )
    except StoreUnavailable as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not loaded:
        print("No registered vocabulary has a source document")
        return 0
    for name, count in loaded.items():
        print(f"✅ {name}: {count} triples")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    # Load configuration (used for defaults)
    config = Config()

    parser_cli = argparse.ArgumentParser(
        description="linked-vocabs - Controlled vocabularies for RDF resources",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resolve a bare term name against DCMI types
  linked-vocabs resolve Image --vocab dcmitype

  # Search a local RDF file for terms of the registered vocabularies
  linked-vocabs search cat --data dctype.ttl --vocab dcmitype

  # Show the English (or configured language) label of a term
  linked-vocabs label Image --data dctype.ttl --vocab dcmitype

  # Fetch vocabulary documents into a persistent store
  linked-vocabs load --vocab dcmitype --store ~/.local/share/linked-vocabs/store

  # Show current configuration
  linked-vocabs config --show
        """
    )
    parser_cli.add_argument(
        '--version', '-V',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    subparsers = parser_cli.add_subparsers(dest='command', help='Command to run')

    # Config command
    config_parser = subparsers.add_parser('config', help='Show configuration')
    config_parser.add_argument('--show', action='store_true', help='Show merged configuration')
    config_parser.add_argument('--path', action='store_true', help='Show config file path')

    # Vocabularies command
    subparsers.add_parser('vocabularies', help='List known vocabularies')

    # Resolve command
    resolve_parser = subparsers.add_parser('resolve', help='Resolve an identifier to a vocabulary term')
    resolve_parser.add_argument('identifier', help='Term name or full identifier')
    resolve_parser.add_argument('--vocab', action='append', metavar='NAME',
                                help='Vocabulary to register (repeatable; default: from config or all)')

    # Search command
    search_parser = subparsers.add_parser('search', help='Search vocabulary terms by label')
    search_parser.add_argument('query', help='Text to search for')
    search_parser.add_argument('--vocab', action='append', metavar='NAME',
                               help='Vocabulary to search (repeatable; default: from config or all)')
    search_parser.add_argument('--data', '-d', type=Path, action='append',
                               help='RDF file to load into the store (repeatable)')
    search_parser.add_argument('--endpoint', type=str, metavar='URL',
                               help='Remote SPARQL endpoint to query instead of a local store')
    search_parser.add_argument('--json', action='store_true', help='Print hits as JSON')

    # Label command
    label_parser = subparsers.add_parser('label', help='Show the display label of a resource')
    label_parser.add_argument('identifier', help='Term name or full identifier')
    label_parser.add_argument('--vocab', action='append', metavar='NAME', help='Vocabulary (repeatable)')
    label_parser.add_argument('--data', '-d', type=Path, action='append',
                              help='RDF file to load into the store (repeatable)')
    label_parser.add_argument('--endpoint', type=str, metavar='URL',
                              help='Remote SPARQL endpoint to query instead of a local store')

    # Terms command
    terms_parser = subparsers.add_parser('terms', help='List terms of strict vocabularies')
    terms_parser.add_argument('--vocab', action='append', metavar='NAME', help='Vocabulary (repeatable)')

    # Load command
    load_parser = subparsers.add_parser('load', help='Fetch vocabulary source documents into a store')
    load_parser.add_argument('--vocab', action='append', metavar='NAME', help='Vocabulary (repeatable)')
    load_parser.add_argument('--store', type=Path, help='Persistent store directory')

    argcomplete.autocomplete(parser_cli)

    args = parser_cli.parse_args()

    if args.command == 'config':
        return config_command(show=args.show, show_path=args.path)
    elif args.command == 'vocabularies':
        return vocabularies_command(config)
    elif args.command == 'resolve':
        return resolve_command(args.identifier, args.vocab, config)
    elif args.command == 'search':
        return search_command(args.query, args.vocab, config, args.data, args.endpoint, args.json)
    elif args.command == 'label':
        return label_command(args.identifier, args.vocab, config, args.data, args.endpoint)
    elif args.command == 'terms':
        return terms_command(args.vocab, config)
    elif args.command == 'load':
        return load_command(args.vocab, config, args.store)
    else:
        parser_cli.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
