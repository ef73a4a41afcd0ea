"""Tests for pulling a GitHub email out of a Slack DM."""

from __future__ import annotations

import pytest

from devbrief.services.email_parser_service import EmailParserService


@pytest.mark.parametrize(
    "message, expected",
    [
        ("My github email is a@b.com", "a@b.com"),
        ("github email is dev@example.org", "dev@example.org"),
        ("github: Dev.Name+tag@Example.io", "dev.name+tag@example.io"),
        ("Hey! My GitHub email is   someone@corp.dev thanks", "someone@corp.dev"),
        ("a@b.co", "a@b.co"),
        ("  a@b.co\n", "a@b.co"),
        ("A@B.CO", "a@b.co"),
    ],
)
def test_extracts_email(message, expected):
    assert EmailParserService.extract_github_email(message) == expected


@pytest.mark.parametrize(
    "message",
    [
        "hello there",
        "",
        None,
        "a@b.com please update my account to this new one since I forgot my old password",
        "my email is a@b",
    ],
)
def test_no_match(message):
    assert EmailParserService.extract_github_email(message) is None


def test_bare_email_must_be_shorter_than_limit():
    long_email = "a" * 95 + "@b.com"
    assert EmailParserService.extract_github_email(long_email) is None


def test_phrase_wins_over_bare_address():
    message = "github: first@example.com"
    assert EmailParserService.extract_github_email(message) == "first@example.com"


def test_is_valid_email():
    assert EmailParserService.is_valid_email("a@b.co") is True
    assert EmailParserService.is_valid_email("not an email") is False
