"""Application configuration using Pydantic Settings.

Environment variables are automatically mapped to Settings fields.
"""

from functools import lru_cache

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_PORT = 65535


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Every field has a default so the server starts with an empty environment.
    Invalid values cause validation errors at startup, so the process fails
    early with a clear error message.
    """

    # --- Debugging ---
    fetchmcp_debug: bool = False

    # --- Transport ---
    mcp_transport: str = "stdio"
    host: str = "0.0.0.0"
    port: int = 3000
    mcp_http_path: str = "/mcp"
    mcp_stateless_http: bool = True
    # stdio only: how long a signalled shutdown may wait on the stdin reader
    mcp_shutdown_grace_seconds: float = 2.0

    # --- Page Fetching ---
    fetch_timeout: float = 30.0
    fetch_follow_redirects: bool = True
    fetch_user_agent: str = (
        "Mozilla/5.0 (X11; Linux x86_64; rv:128.0) Gecko/20100101 Firefox/128.0"
    )

    # --- Response Shape ---
    include_metadata: bool = False

    # --- Boilerplate Removal (crawl4ai) ---
    # Page metadata is read after these are removed: never list meta or title.
    # form stays out: WebForms pages wrap the whole body in one.
    boilerplate_excluded_tags: str = "nav,footer,header,aside,script,style,noscript,button,iframe,svg"
    boilerplate_selectors: str = (
        '[role="navigation"], [role="banner"], [role="contentinfo"], [role="complementary"], '
        '[aria-hidden="true"], .sidebar, .advertisement, .ads, .ad-container, '
        ".cookie-banner, .cookie-consent, .share-buttons, .social-share, .newsletter-signup, "
        ".breadcrumb, .breadcrumbs, .related-posts, .comments"
    )

    # --- CSS Selector Strategy ---
    css_selector_priority_list: str = (
        'article, main, [role="main"], .article, .article-content, .post-content, '
        ".entry-content, .page-content, .markdown, #article, #content, #main, .content"
    )
    css_selector_min_words: int = 50

    # --- Residual Junk Filter ---
    junk_filter_enabled: bool = False
    junk_filter_letter_ratio_threshold: float = 0.3

    # --- Crawl4AI Markdown Generation ---
    markdown_pruning_enabled: bool = True
    crawl4ai_pruning_threshold: float = 0.30
    crawl4ai_threshold_type: str = "dynamic"
    crawl4ai_min_word_threshold: int = 1
    crawl4ai_ignore_links: bool = False
    crawl4ai_ignore_images: bool = True
    crawl4ai_escape_html: bool = True
    crawl4ai_body_width: int = 0
    crawl4ai_include_sup_sub: bool = True
    # Blank line between blocks; crawl4ai's own default is a single newline
    crawl4ai_single_line_break: bool = False

    # --- Redis ---
    redis_url: str = ""
    redis_key_prefix: str = "fetchmcp"
    redis_expiration_seconds: int = 3600

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        """Reject ports outside the TCP range.

        Raises:
            ValueError: If the port is not between 1 and 65535

        """
        if not 0 < value <= MAX_PORT:
            msg = f"PORT must be between 1 and {MAX_PORT}, got {value}"
            raise ValueError(msg)
        return value

    @field_validator("fetch_timeout", "mcp_shutdown_grace_seconds")
    @classmethod
    def validate_positive_seconds(cls, value: float, info: ValidationInfo) -> float:
        """Reject non-positive timeouts."""
        if value <= 0:
            msg = f"{str(info.field_name).upper()} must be positive"
            raise ValueError(msg)
        return value

    # --- Tool Metadata ---
    # Tool descriptions are stored here so they can be updated via environment
    # variables without code changes.
    tool_fetch_desc: str = (
        "Fetches a URL from the internet and extracts its contents as clean, "
        "readable Markdown. Navigation, ads, sidebars and footers are removed.\n\n"
        "Use start_index and max_length to page through long documents."
    )

    # Tool argument descriptions
    arg_fetch_url_desc: str = "URL to fetch"
    arg_fetch_max_length_desc: str = "Maximum number of characters to return"
    arg_fetch_start_index_desc: str = "Start content from this character index"
    arg_fetch_raw_desc: str = "Get raw content without markdown conversion"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance.

    Uses lru_cache to ensure the .env file is only parsed once
    and all modules share the same settings instance.

    Returns:
        Settings instance with application configuration.

    Raises:
        ValidationError: If an environment variable holds an invalid value.

    """
    return Settings()


settings = get_settings()
