"""Pytest configuration and fixtures."""

from __future__ import annotations

import pytest

from wrapped import create_app
from wrapped.database import db
from wrapped.services.errors import ExternalFetchError
from wrapped.services.stats_repository import StatsRepository
from wrapped.services.stats_service import StatsService


def make_repo(name, stars=0, forks=0, language=None, color=None, edges=()):
    """Build a repository node shaped like the GraphQL response."""
    return {
        "name": name,
        "stargazerCount": stars,
        "forkCount": forks,
        "primaryLanguage": {"name": language, "color": color} if language else None,
        "languages": {
            "edges": [
                {"size": size, "node": {"name": lang, "color": lang_color}}
                for lang, lang_color, size in edges
            ]
        },
    }


CALENDAR = {
    "totalContributions": 3,
    "weeks": [
        {
            "contributionDays": [
                {"color": "#ebedf0", "contributionCount": 0, "date": "2024-01-01", "weekday": 1},
                {"color": "#40c463", "contributionCount": 3, "date": "2024-01-02", "weekday": 2},
            ]
        }
    ],
}


class FakeGitHub:
    """In-memory stand-in for GitHubService."""

    def __init__(self):
        self.profiles = {
            "octocat": {
                "login": "octocat",
                "name": "The Octocat",
                "bio": "I like forks",
                "company": "@github",
                "email": "octocat@github.com",
                "avatar_url": "https://avatars.githubusercontent.com/u/583231",
                "blog": "https://github.blog",
                "followers": 100,
                "following": 9,
                "public_repos": 8,
                "twitter_username": None,
            }
        }
        self.pinned = [
            {
                "name": "Spoon-Knife",
                "description": "This repo is for demonstration purposes only.",
                "url": "https://github.com/octocat/Spoon-Knife",
                "stargazerCount": 12000,
                "forkCount": 140000,
                "primaryLanguage": {"name": "HTML", "color": "#e34c26"},
            },
            {
                "name": "Hello-World",
                "description": "My first repository on GitHub!",
                "url": "https://github.com/octocat/Hello-World",
                "stargazerCount": 2500,
                "forkCount": 2300,
                "primaryLanguage": None,
            },
        ]
        self.repositories = [
            make_repo("linguist", stars=3, forks=1, language="Ruby", color="#701516",
                      edges=[("Ruby", "#701516", 500), ("Go", "#00ADD8", 100)]),
            make_repo("hello-go", stars=10, forks=4, language="Go", color="#00ADD8",
                      edges=[("Go", "#00ADD8", 250)]),
            make_repo("scripts", stars=7, forks=0, language="Python", color="#3572A5",
                      edges=[("Python", "#3572A5", 40)]),
        ]
        self.contributions = {
            "totalCommitContributions": 321,
            "totalIssueContributions": 12,
            "totalPullRequestContributions": 45,
            "contributionCalendar": CALENDAR,
        }
        self.fail_on = None
        self.calls = []

    def _call(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise ExternalFetchError(f"simulated failure in {name}")

    def fetch_user_profile(self, username):
        self._call("fetch_user_profile")
        return self.profiles.get(username)

    def fetch_pinned_items(self, username):
        self._call("fetch_pinned_items")
        return list(self.pinned)

    def fetch_repository_stats(self, username):
        self._call("fetch_repository_stats")
        return list(self.repositories)

    def fetch_contribution_stats(self, username):
        self._call("fetch_contribution_stats")
        return dict(self.contributions)


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def app(fake_github):
    app = create_app("testing")
    app.extensions["stats_service"] = StatsService(fake_github, StatsRepository())

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def service(app) -> StatsService:
    return app.extensions["stats_service"]
