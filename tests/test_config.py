"""
Tests for CleanupSettings.
"""

from sg_sweeper.core.config import CleanupSettings


class TestCleanupSettings:
    """Tests for CleanupSettings."""

    def test_defaults_from_empty_environment(self):
        """Test defaults when nothing is configured."""
        settings = CleanupSettings.from_env({})

        assert settings.function_name == "UnknownFunction"
        assert settings.region == "us-east-1"
        assert settings.dry_run is False
        assert settings.max_attempts == 5
        assert settings.retry_delay_ms == 2000
        assert settings.log_level == "INFO"

    def test_reads_lambda_environment(self):
        """Test values taken from the Lambda runtime environment."""
        settings = CleanupSettings.from_env(
            {
                "AWS_LAMBDA_FUNCTION_NAME": "sg-cleanup",
                "AWS_REGION": "eu-west-1",
                "AWS_DEFAULT_REGION": "us-west-2",
                "DRY_RUN": "TRUE",
                "RETRY_MAX_ATTEMPTS": "3",
                "RETRY_DELAY_MS": "250",
                "LOG_LEVEL": "debug",
            }
        )

        assert settings.function_name == "sg-cleanup"
        assert settings.region == "eu-west-1"
        assert settings.dry_run is True
        assert settings.max_attempts == 3
        assert settings.retry_delay_ms == 250
        assert settings.log_level == "DEBUG"

    def test_default_region_fallback(self):
        """Test AWS_DEFAULT_REGION when AWS_REGION is absent."""
        assert CleanupSettings.from_env({"AWS_DEFAULT_REGION": "ap-south-1"}).region == "ap-south-1"

    def test_invalid_integer_ignored(self):
        """Test that a malformed integer falls back to the default."""
        settings = CleanupSettings.from_env({"RETRY_MAX_ATTEMPTS": "many"})

        assert settings.max_attempts == 5

    def test_with_overrides_skips_none(self):
        """Test that None overrides keep the current value."""
        settings = CleanupSettings(region="us-east-1", dry_run=False)

        updated = settings.with_overrides(region="eu-central-1", dry_run=None)

        assert updated.region == "eu-central-1"
        assert updated.dry_run is False
        assert settings.region == "us-east-1"
