"""CLI entry point for news curator."""

import asyncio
import json
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

import httpx
import typer

from news_curator.adapters.curated import SupabaseSourceProvider
from news_curator.adapters.llm import ClaudeClient
from news_curator.adapters.sources import FeedDiscoverer, RSSFeedSource, build_adapters
from news_curator.config import Settings, get_settings
from news_curator.core import InvalidRequestError, Reranker, SourceQuery, StalenessPolicy
from news_curator.use_cases import CurationReport, CurationService

app = typer.Typer(help="Fresh tech news for a job role.", no_args_is_help=True)

IMPACT_EMOJI = {"critical": "🚨", "high": "🔥", "medium": "📌", "low": "•"}


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_service(settings: Settings, client: httpx.AsyncClient) -> CurationService:
    """Wire adapters, extractor and reranker from settings."""
    reranker = Reranker(
        policy=settings.curation.staleness_policy,
        strict_dates=settings.curation.strict_dates,
        window=timedelta(hours=settings.curation.window_hours),
        skew_tolerance=timedelta(minutes=settings.curation.skew_tolerance_minutes),
    )
    extractor = ClaudeClient(settings, client=client) if settings.anthropic_api_key else None
    provider = SupabaseSourceProvider(
        settings.supabase_url,
        settings.supabase_service_key,
        client=client,
        timeout=settings.http.request_timeout,
    )
    return CurationService(
        adapters=build_adapters(settings, client),
        reranker=reranker,
        extractor=extractor,
        curated_provider=provider,
        curation=settings.curation,
        sources=settings.sources,
    )


def _print_credentials(settings: Settings) -> None:
    print("\n🔑 Credentials:")
    checks = [
        ("ANTHROPIC_API_KEY", settings.anthropic_api_key, "LLM extraction disabled, adapter items are ranked directly"),
        ("GITHUB_TOKEN", settings.github_token, "limited GitHub rate limit"),
        ("YOUTUBE_API_KEY", settings.youtube_api_key, "YouTube sources will report a configuration error"),
        ("SUPABASE_URL", settings.supabase_url and settings.supabase_service_key, "no curated sources"),
    ]
    for name, value, missing in checks:
        if value:
            print(f"  ✓ {name}")
        else:
            print(f"  ⚠️  {name} - not found ({missing})")


def _print_report(report: CurationReport) -> None:
    print("\n" + "=" * 70)
    print("📡 SOURCES")
    print("=" * 70)
    for result in report.results:
        term = result.query.term or "default"
        if result.ok:
            print(f"  ✓ {result.source} [{term}]: {len(result.items)}")
        else:
            print(f"  ❌ {result.source} [{term}]: {result.error_kind.value} - {result.error}")

    print("\n" + "=" * 70)
    print(f"📰 {len(report.items)} ITEMS FOR {report.role.upper()}")
    print("=" * 70)
    if not report.items:
        print("\nNo fresh items found.")
    for item in report.items:
        impact = item.impact_level.value if item.impact_level else "low"
        print(f"\n  {IMPACT_EMOJI.get(impact, '•')} [{item.relevance}] {item.title}")
        print(f"     └─ {item.source} · {item.category} · {item.published.raw or 'no date'}")
        if item.url:
            print(f"     └─ {item.url}")

    print(f"\n✅ Done in {report.elapsed:.1f}s ({'LLM extraction' if report.extracted else 'direct'})\n")


@app.command()
def curate(
    role: str = typer.Argument(..., help="Job role, e.g. 'Frontend Engineer'"),
    context: Optional[str] = typer.Option(None, "--context", help="Comma-separated extra keywords"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    policy: Optional[StalenessPolicy] = typer.Option(None, "--policy", help="Staleness policy override"),
    config: Path = typer.Option(Path("config.yaml"), "--config", help="Path to config.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Collect, rank and print fresh news for ROLE."""
    _setup_logging(verbose)
    settings = get_settings(config)
    if policy is not None:
        settings.curation.staleness_policy = policy

    try:
        report = asyncio.run(_curate(settings, role, context, quiet=as_json))
    except InvalidRequestError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        _print_report(report)


async def _curate(settings: Settings, role: str, context: Optional[str], quiet: bool) -> CurationReport:
    if not quiet:
        print("\n" + "=" * 70)
        print(f"🗞️  NEWS CURATOR - {role}")
        print("=" * 70)
        _print_credentials(settings)
        print(f"\n⚙️  Staleness policy: {settings.curation.staleness_policy.value}")

    async with httpx.AsyncClient(
        timeout=settings.http.request_timeout,
        follow_redirects=True,
        headers={"User-Agent": settings.http.user_agent},
    ) as client:
        service = build_service(settings, client)
        return await service.curate(role, context)


@app.command()
def discover(
    url: str = typer.Argument(..., help="Site URL"),
    config: Path = typer.Option(Path("config.yaml"), "--config"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Find the RSS/Atom feed behind a site URL."""
    _setup_logging(verbose)
    settings = get_settings(config)
    discoverer = FeedDiscoverer(
        page_timeout=settings.http.page_timeout,
        probe_timeout=settings.http.probe_timeout,
    )
    result = asyncio.run(discoverer.discover(url))

    if not result.found:
        print(f"❌ No feed found for {result.site_url}")
        raise typer.Exit(code=1)
    print(f"✓ {result.feed_url} (via {result.strategy.value})")


@app.command("read-feed")
def read_feed(
    url: str = typer.Argument(..., help="Site or feed URL"),
    max_items: int = typer.Option(10, "--max", help="Maximum number of items"),
    config: Path = typer.Option(Path("config.yaml"), "--config"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Discover and read a site's feed, keeping items from the last 24 hours."""
    _setup_logging(verbose)
    settings = get_settings(config)
    source = RSSFeedSource(timeout=settings.http.request_timeout)
    result = asyncio.run(source.collect(SourceQuery(source=source.name, term=url, max_results=max_items)))

    if not result.ok:
        print(f"❌ {result.error}")
        raise typer.Exit(code=1)

    print(f"\n📡 {len(result.items)} fresh items from {url}")
    for item in result.items:
        print(f"\n  • {item.title}")
        print(f"     └─ {item.published.raw or 'no date'}")
        print(f"     └─ {item.url}")
    print()


if __name__ == "__main__":
    app()
