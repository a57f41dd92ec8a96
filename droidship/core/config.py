"""Configuration management for droidship."""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Configuration class for droidship.

    Field names double as environment variable names, so the usual Android
    SDK variables (``ANDROID_HOME``, ``ANDROID_SDK_ROOT``, ``JAVA_HOME``) are
    picked up without any extra mapping.
    """

    # Android SDK / toolchain
    adb_path: Optional[str] = Field(default=None, description="Explicit path to the adb executable")
    android_home: Optional[str] = Field(default=None, description="Android SDK root (ANDROID_HOME)")
    android_sdk_root: Optional[str] = Field(default=None, description="Legacy SDK root (ANDROID_SDK_ROOT)")
    bundletool_path: Optional[str] = Field(default=None, description="bundletool jar or executable")
    java_home: Optional[str] = Field(default=None, description="JDK used to run bundletool.jar")

    # Signing (AAB deployments only)
    keystore_path: Optional[str] = Field(default=None)
    keystore_password: Optional[str] = Field(default=None)
    keystore_alias: Optional[str] = Field(default=None)
    keystore_alias_password: Optional[str] = Field(default=None)

    # Deployment behaviour
    default_device: str = Field(default="auto", description="Device used when none is given on the CLI")
    crash_scan_delay: float = Field(default=0.15, description="Seconds to let the app settle before the crash scan")
    tail_chunk_size: int = Field(default=4096, description="Max bytes per logcat read")

    # Framework Configuration
    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(default=None, description="Directory for rotating log files (disabled if unset)")

    class Config:
        """Pydantic configuration for environment loading."""

        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Ignore unexpected env vars rather than raising errors

    def validate_config(self) -> bool:
        """Validate configuration values."""
        if self.crash_scan_delay < 0:
            raise ValueError("Crash scan delay must not be negative")

        if self.tail_chunk_size <= 0:
            raise ValueError("Tail chunk size must be positive")

        return True

    def sdk_roots(self) -> list[str]:
        """Return the configured SDK roots in lookup order."""
        return [root for root in (self.android_home, self.android_sdk_root) if root]


# Global configuration instance
try:
    config = Config()
except Exception as e:
    print(f"Warning: Could not load configuration: {e}")
    # Fall back to defaults so the CLI can still report the problem
    config = Config.model_construct()
