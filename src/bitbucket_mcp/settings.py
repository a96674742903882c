from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=[".env"], extra="ignore", frozen=True)

    bitbucket_url: str = ""

    # either a token (bearer auth) or a username/password pair (basic auth)
    bitbucket_token: str | None = None
    bitbucket_username: str | None = None
    bitbucket_password: str | None = None

    # used when a tool call omits `project`
    bitbucket_default_project: str | None = None

    bitbucket_timeout: float = 30.0
    bitbucket_log_level: str = "INFO"
    bitbucket_log_file: str | None = None

    @model_validator(mode="after")
    def _check_connection(self) -> "Settings":
        if not self.bitbucket_url:
            raise ValueError("BITBUCKET_URL is required")

        has_username = bool(self.bitbucket_username)
        has_password = bool(self.bitbucket_password)
        if has_username != has_password:
            raise ValueError(
                "BITBUCKET_USERNAME and BITBUCKET_PASSWORD must be provided together"
            )
        if not self.bitbucket_token and not has_username:
            raise ValueError(
                "Either BITBUCKET_TOKEN or BITBUCKET_USERNAME/PASSWORD is required"
            )
        return self

    @property
    def api_url(self) -> str:
        """REST base the client is bound to"""
        return f"{self.bitbucket_url.rstrip('/')}{BITBUCKET_API_PATH}"


# bitbucket server REST constants
BITBUCKET_API_PATH = "/rest/api/1.0"
DEFAULT_CONTEXT_LINES = 10
DEFAULT_MERGE_STRATEGY = "merge-commit"

# sentinel telling bitbucket to skip the optimistic-lock version check
ANY_VERSION = -1
