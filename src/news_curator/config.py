"""Configuration management."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from news_curator.core.reranker import StalenessPolicy


@dataclass
class ClaudeConfig:
    """Claude API settings."""
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 16000
    temperature: float = 0.0
    max_retries: int = 3
    initial_retry_delay: float = 2.0
    timeout: float = 90.0


@dataclass
class HttpConfig:
    """Outbound HTTP settings."""
    request_timeout: float = 10.0
    page_timeout: float = 8.0
    probe_timeout: float = 5.0
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )


@dataclass
class CurationConfig:
    """Freshness and ranking settings."""
    staleness_policy: StalenessPolicy = StalenessPolicy.HARD_EXCLUDE
    strict_dates: bool = True
    window_hours: float = 24.0
    skew_tolerance_minutes: float = 30.0
    request_deadline: float = 60.0
    max_results_per_source: int = 50
    use_llm_extraction: bool = True


@dataclass
class SourcesConfig:
    """Source-specific settings."""
    enabled: list[str] = field(default_factory=lambda: [
        "duckduckgo_news",
        "duckduckgo_search",
        "google_news_rss",
        "hackernews_search",
        "reddit_search",
        "devto_articles",
        "lobsters_search",
        "read_rss_feed",
        "github_trending",
        "youtube_search",
        "youtube_channel_videos",
        "scrape_website",
    ])
    role_topics: dict = field(default_factory=lambda: {
        "frontend_engineer": {
            "topics": ["react", "next.js", "typescript", "css"],
            "subreddits": ["webdev", "reactjs", "javascript"],
            "language": "typescript",
            "feeds": ["https://react.dev", "https://nextjs.org", "https://web.dev"],
        },
        "backend_engineer": {
            "topics": ["postgres", "golang", "node.js", "api"],
            "subreddits": ["programming", "golang", "node"],
            "language": "go",
            "feeds": ["https://go.dev/blog", "https://nodejs.org"],
        },
        "ai_engineer": {
            "topics": ["llm", "pytorch", "machine learning", "agents"],
            "subreddits": ["machinelearning", "localllama"],
            "language": "python",
            "feeds": ["https://huggingface.co/blog", "https://pytorch.org/blog"],
        },
        "devops_engineer": {
            "topics": ["kubernetes", "terraform", "docker", "observability"],
            "subreddits": ["devops", "kubernetes"],
            "language": "go",
            "feeds": ["https://kubernetes.io/blog", "https://www.docker.com/blog"],
        },
        "ui_ux_designer": {
            "topics": ["figma", "design systems", "accessibility"],
            "subreddits": ["userexperience", "web_design"],
            "language": "",
            "feeds": ["https://www.smashingmagazine.com"],
        },
        "mobile_developer": {
            "topics": ["swift", "kotlin", "react native", "flutter"],
            "subreddits": ["iosprogramming", "androiddev", "flutterdev"],
            "language": "kotlin",
            "feeds": ["https://android-developers.googleblog.com"],
        },
    })
    default_topics: list[str] = field(default_factory=lambda: ["programming", "software release"])
    default_subreddits: list[str] = field(default_factory=lambda: ["programming", "technology"])


@dataclass
class PromptsConfig:
    """Prompts for the extraction step."""
    extraction: dict = field(default_factory=lambda: {
        "system": (
            "You are a structured data extractor for a tech news pipeline. "
            "Use only the raw tool output provided. Never invent dates: if a date "
            "is absent, use \"today\". Skip items older than 24 hours and business "
            "news. Output ONLY a JSON array of objects with the fields title, url, "
            "summary, importance_score, target_audience, published_at, "
            "is_major_announcement, technologies, primary_role, relevant_roles, source."
        ),
        "user": (
            "Job role: \"{role}\"\nToday: {today}\n\nRAW TOOL OUTPUTS:\n\n{raw_outputs}\n\n"
            "Extract all technically relevant news items as a JSON array."
        ),
    })


@dataclass
class Settings:
    """Application settings."""

    # API Keys (from environment only)
    anthropic_api_key: str = ""
    github_token: Optional[str] = None
    youtube_api_key: Optional[str] = None
    supabase_url: Optional[str] = None
    supabase_service_key: Optional[str] = None

    # Config sections
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    http: HttpConfig = field(default_factory=HttpConfig)
    curation: CurationConfig = field(default_factory=CurationConfig)
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    prompts: PromptsConfig = field(default_factory=PromptsConfig)


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(
        anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
        github_token=os.getenv("GITHUB_TOKEN"),
        youtube_api_key=os.getenv("YOUTUBE_API_KEY"),
        supabase_url=os.getenv("SUPABASE_URL"),
        supabase_service_key=os.getenv("SUPABASE_SERVICE_KEY"),
    )

    if "claude" in config:
        for key, value in config["claude"].items():
            setattr(settings.claude, key, value)

    if "http" in config:
        for key, value in config["http"].items():
            setattr(settings.http, key, value)

    if "curation" in config:
        for key, value in config["curation"].items():
            if key == "staleness_policy":
                value = StalenessPolicy(value)
            setattr(settings.curation, key, value)

    if "sources" in config:
        settings.sources = SourcesConfig(**config["sources"])

    if "prompts" in config:
        settings.prompts = PromptsConfig(**config["prompts"])

    return settings
