"""Tests for CLI validation utilities."""

import pytest

from themestats.cli.utils.validation import validate_api_url, validate_rating, validate_theme_id


class TestValidateApiUrl:
    def test_https_accepted_and_trailing_slash_removed(self):
        assert validate_api_url(" https://themes.example.com/ ") == "https://themes.example.com"

    def test_localhost_http_accepted(self):
        assert validate_api_url("http://localhost:8787") == "http://localhost:8787"
        assert validate_api_url("http://127.0.0.1:8787") == "http://127.0.0.1:8787"

    def test_plain_http_rejected(self):
        with pytest.raises(ValueError, match="HTTPS"):
            validate_api_url("http://themes.example.com")

    def test_empty_rejected(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_api_url("   ")


class TestValidateThemeId:
    def test_valid(self):
        assert validate_theme_id("  Dark-Mode-2 ") == "Dark-Mode-2"

    def test_invalid_characters(self):
        with pytest.raises(ValueError, match="letters, numbers, and hyphens"):
            validate_theme_id("dark_mode")

    def test_too_long(self):
        with pytest.raises(ValueError, match="exceed 100"):
            validate_theme_id("a" * 101)


class TestValidateRating:
    @pytest.mark.parametrize("rating", [1, 3, 5])
    def test_in_range(self, rating):
        assert validate_rating(rating) == rating

    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_out_of_range(self, rating):
        with pytest.raises(ValueError):
            validate_rating(rating)
