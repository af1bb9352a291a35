import argparse
import atexit
import json
import logging
import sys
from datetime import datetime

from .catalogue import CatalogueError, FactStore, catalogue_stats, load_catalogue, read_catalogue_file
from .config import EXPORT_INDENT
from .database import FilmDatabase, close_pool, init_db, upsert_films
from .film import NotFound
from .quality import QualityVerdict, assess_catalogue, evaluate_quality
from .ranker import find_similar_films, resolve_top_n
from .search import MatchMode, SearchCriteria, recommend
from .similarity import STRATEGIES

logger = logging.getLogger(__name__)

# Register cleanup on exit
atexit.register(close_pool)


def _open_store(args: argparse.Namespace) -> FactStore:
    """Use the JSON catalogue when one is given, otherwise the database."""
    if getattr(args, 'catalogue', None):
        return load_catalogue(args.catalogue)
    init_db()
    return FilmDatabase()


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def _verdict_to_dict(verdict: QualityVerdict) -> dict:
    film = verdict.film
    return {
        "title": verdict.title,
        "year": film.release_year,
        "score": round(verdict.score, 2),
        "band": verdict.band.value,
        "signals": {k: round(v, 2) for k, v in verdict.signals.as_inputs().items()},
        "imdb_rating": film.imdb_rating,
        "box_office_usd": film.box_office_usd,
        "budget_usd": film.budget_usd,
        "awards": sorted(film.awards),
    }


def cmd_import(args: argparse.Namespace) -> None:
    """Import a JSON catalogue into the database."""
    films = read_catalogue_file(args.file)
    init_db()
    written = upsert_films(films)
    logger.info(f"Imported {written} films from {args.file}")


def cmd_export(args: argparse.Namespace) -> None:
    """Export the catalogue to a JSON file."""
    store = _open_store(args)
    payload = {
        "films": [f.to_dict() for f in store.list_all()],
        "exported_at": datetime.now().isoformat(),
    }
    with open(args.file, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=EXPORT_INDENT)
    logger.info(f"Exported {len(payload['films'])} films to {args.file}")


def cmd_list(args: argparse.Namespace) -> None:
    """List available films."""
    store = _open_store(args)
    films = store.list_all()
    logger.info("\nAvailable films:")
    for film in films:
        logger.info(f"  - {film.title} ({film.release_year})")
    logger.info(f"\nTotal: {len(films)} films")


def cmd_stats(args: argparse.Namespace) -> None:
    """Show catalogue statistics."""
    stats = catalogue_stats(_open_store(args))
    logger.info("\nCatalogue Statistics:")
    logger.info(f"  Films: {stats['films']}")
    logger.info(f"  Genres: {stats['genres']}")
    logger.info(f"  Directors: {stats['directors']}")
    logger.info(f"  Languages: {stats['languages']}")
    if stats['year_range']:
        logger.info(f"  Years: {stats['year_range'][0]}-{stats['year_range'][1]}")


def cmd_recommend(args: argparse.Namespace) -> None:
    """Find films matching search criteria."""
    criteria = SearchCriteria(
        genre=args.genre,
        director=args.director,
        actor=args.actor,
        language=args.language,
        year_from=args.year_from,
        year_to=args.year_to,
    )
    matches = recommend(_open_store(args), criteria, args.mode)
    ranked = args.mode == MatchMode.RANKED.value

    if args.format == 'json':
        output = [
            {
                "title": m.film.title,
                "year": m.film.release_year,
                "director": m.film.director,
                "genres": sorted(m.film.genres),
                "matches": m.match_count,
                "matched": list(m.matched),
            }
            for m in matches
        ]
        logger.info(json.dumps(output, indent=2))
        return

    if not matches:
        logger.info("No films found matching the specified criteria.")
        return

    header = f"{'Title':<40} {'Year':<8} {'Director':<30} {'Genres':<30}"
    logger.info(f"\n{header} Score" if ranked else f"\n{header}")
    for m in matches:
        genres = ", ".join(sorted(m.film.genres)) or "N/A"
        line = (f"{_truncate(m.film.title, 40):<40} {m.film.release_year:<8} "
                f"{_truncate(m.film.director or 'N/A', 30):<30} {_truncate(genres, 30):<30}")
        logger.info(f"{line} {m.match_count}" if ranked else line.rstrip())


def cmd_similar(args: argparse.Namespace) -> None:
    """Find films similar to a specific film."""
    title = args.title.strip()
    if not title:
        logger.error("Film title cannot be empty.")
        return

    store = _open_store(args)
    choice = resolve_top_n(args.limit, store.count())
    if choice.note:
        logger.warning(choice.note)
    if choice.value < 1:
        return

    results = find_similar_films(store, title, top_n=choice.value, strategy=args.strategy)
    if isinstance(results, NotFound):
        logger.error(f"Film not found: {title}")
        return

    if args.format == 'json':
        output = [
            {
                "rank": i,
                "title": r.title,
                "year": r.film.release_year,
                "imdb_rating": r.film.imdb_rating,
                "director": r.film.director,
                "genres": sorted(r.film.genres),
                "score": round(r.score, 3),
                "breakdown": r.breakdown,
            }
            for i, r in enumerate(results, 1)
        ]
        logger.info(json.dumps(output, indent=2))
        return

    logger.info(f"\nFilms similar to \"{title}\" ({args.strategy}):")
    for i, r in enumerate(results, 1):
        genres = ", ".join(sorted(r.film.genres))
        logger.info(
            f"{i}. {_truncate(r.title, 40)} ({r.film.release_year}) - IMDb {r.film.imdb_rating:.1f}"
            f" - {_truncate(r.film.director or 'N/A', 30)} - {_truncate(genres, 30)}"
        )
        why = ", ".join(f"{name} +{points:g}" for name, points in r.breakdown.items())
        logger.info(f"   Score: {r.score:g}  ({why or 'no shared attributes'})")


def cmd_assess(args: argparse.Namespace) -> None:
    """Assess the quality of one film."""
    title = args.title.strip()
    if not title:
        logger.error("Film title cannot be empty.")
        return

    verdict = evaluate_quality(_open_store(args), title, reference_year=args.reference_year)
    if isinstance(verdict, NotFound):
        logger.error(f"Film not found: {title}")
        return

    if args.format == 'json':
        logger.info(json.dumps(_verdict_to_dict(verdict), indent=2))
        return

    film = verdict.film
    signals = verdict.signals
    awards = ", ".join(sorted(film.awards)) or "None"
    roi = film.box_office_usd / film.budget_usd if film.budget_usd > 0 else 0
    logger.info("\nFILM QUALITY ASSESSMENT")
    logger.info(f"Film: {film.title} ({film.release_year})")
    logger.info(f"Rating: {verdict.band.value} ({verdict.score:.1f}/100)")
    logger.info("\n--- Original Data ---")
    logger.info(f"  IMDb Rating: {film.imdb_rating:.1f}/10")
    logger.info(f"  Box Office: ${film.box_office_usd / 1_000_000:.0f}M")
    logger.info(f"  Budget: ${film.budget_usd / 1_000_000:.0f}M")
    logger.info(f"  ROI: {roi:.1f}x")
    logger.info(f"  Awards: {awards}")
    logger.info("\n--- Quality Criteria ---")
    logger.info(f"  Director Quality: {signals.director_quality:.1f}/10")
    logger.info(f"  Acting Quality: {signals.acting_quality:.1f}/10")
    logger.info(f"  Story Quality: {signals.story_quality:.1f}/10")
    logger.info(f"  Visual Effects: {signals.visual_effects:.1f}/10")
    logger.info(f"  Cultural Impact: {signals.cultural_impact:.1f}/10")


def cmd_assess_all(args: argparse.Namespace) -> None:
    """Assess every film in the catalogue."""
    verdicts = assess_catalogue(
        _open_store(args),
        reference_year=args.reference_year,
        progress=args.format != 'json',
    )

    if args.format == 'json':
        logger.info(json.dumps([_verdict_to_dict(v) for v in verdicts], indent=2))
        return

    logger.info(f"\nQuality of {len(verdicts)} films:")
    for i, v in enumerate(verdicts, 1):
        logger.info(f"{i}. {_truncate(v.title, 40)} ({v.film.release_year}) - {v.band.value} {v.score:.1f}")


def main():
    parser = argparse.ArgumentParser(description="Film Recommender")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--catalogue", metavar="PATH",
                        help="Read films from a JSON catalogue instead of the database")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import a JSON catalogue into the database")
    import_parser.add_argument("file", help="JSON file to import")
    import_parser.set_defaults(func=cmd_import)

    export_parser = subparsers.add_parser("export", help="Export the catalogue to JSON")
    export_parser.add_argument("file", help="Output JSON file")
    export_parser.set_defaults(func=cmd_export)

    list_parser = subparsers.add_parser("list", help="List available films")
    list_parser.set_defaults(func=cmd_list)

    stats_parser = subparsers.add_parser("stats", help="Show catalogue statistics")
    stats_parser.set_defaults(func=cmd_stats)

    recommend_parser = subparsers.add_parser("recommend", help="Find films matching criteria")
    recommend_parser.add_argument("--genre", help="Genre (e.g. SciFi, Drama)")
    recommend_parser.add_argument("--director", help="Director (e.g. ChristopherNolan)")
    recommend_parser.add_argument("--actor", help="Actor (e.g. LeonardoDiCaprio)")
    recommend_parser.add_argument("--language", help="Language (e.g. English, Serbian)")
    recommend_parser.add_argument("--year-from", type=int, help="Earliest release year")
    recommend_parser.add_argument("--year-to", type=int, help="Latest release year")
    recommend_parser.add_argument("--mode", choices=[m.value for m in MatchMode], default=MatchMode.RANKED.value,
                                  help="strict: all criteria must match; ranked: order by matches (default)")
    recommend_parser.add_argument("--format", choices=["text", "json"], default="text")
    recommend_parser.set_defaults(func=cmd_recommend)

    similar_parser = subparsers.add_parser("similar", help="Find films similar to a specific film")
    similar_parser.add_argument("title", help="Film title (case-insensitive)")
    similar_parser.add_argument("--limit", help="Number of similar films to show (default: 5)")
    similar_parser.add_argument("--strategy", choices=sorted(STRATEGIES), default="points",
                                help="Similarity strategy (default: points)")
    similar_parser.add_argument("--format", choices=["text", "json"], default="text")
    similar_parser.set_defaults(func=cmd_similar)

    assess_parser = subparsers.add_parser("assess", help="Evaluate film quality")
    assess_parser.add_argument("title", help="Film title (case-insensitive)")
    assess_parser.add_argument("--reference-year", type=int,
                               help="Year used to compute film age (default: current year)")
    assess_parser.add_argument("--format", choices=["text", "json"], default="text")
    assess_parser.set_defaults(func=cmd_assess)

    assess_all_parser = subparsers.add_parser("assess-all", help="Evaluate quality of every film")
    assess_all_parser.add_argument("--reference-year", type=int,
                                   help="Year used to compute film age (default: current year)")
    assess_all_parser.add_argument("--format", choices=["text", "json"], default="text")
    assess_all_parser.set_defaults(func=cmd_assess_all)

    args = parser.parse_args()

    # Configure logging based on verbosity
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        args.func(args)
    except CatalogueError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
