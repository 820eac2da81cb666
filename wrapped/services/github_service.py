# wrapped/services/github_service.py

import logging
from datetime import datetime

import requests

from .errors import ExternalFetchError, UserNotFoundError

logger = logging.getLogger(__name__)

# GitHub API 的基础 URL
GITHUB_API_BASE = "https://api.github.com"
GITHUB_GRAPHQL_URL = "https://api.github.com/graphql"

USER_AGENT = "github-wrapped-backend"

# -----------------------------
# GraphQL 查询语句
# -----------------------------
PINNED_ITEMS_QUERY = """
query($login: String!) {
  user(login: $login) {
    pinnedItems(first: 6, types: REPOSITORY) {
      edges {
        node {
          ... on Repository {
            name
            description
            url
            stargazerCount
            forkCount
            primaryLanguage { name color }
          }
        }
      }
    }
  }
}
"""

REPOSITORY_STATS_QUERY = """
query($login: String!, $first: Int!, $after: String) {
  user(login: $login) {
    repositories(first: $first, after: $after, ownerAffiliations: OWNER, isFork: false) {
      pageInfo { hasNextPage endCursor }
      nodes {
        name
        stargazerCount
        forkCount
        primaryLanguage { name color }
        languages(first: 100) {
          edges {
            size
            node { name color }
          }
        }
      }
    }
  }
}
"""

CONTRIBUTION_STATS_QUERY = """
query($login: String!, $from: DateTime!, $to: DateTime!) {
  user(login: $login) {
    contributionsCollection(from: $from, to: $to) {
      totalCommitContributions
      totalIssueContributions
      totalPullRequestContributions
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            color
            contributionCount
            date
            weekday
          }
        }
      }
    }
  }
}
"""


class GitHubService:
    """GitHub 数据获取服务：一个 REST 调用 + 三个 GraphQL 查询"""

    def __init__(self, token=None, api_base=GITHUB_API_BASE, graphql_url=GITHUB_GRAPHQL_URL,
                 timeout=10, page_size=100, max_pages=10, year=None, session=None):
        self.token = token
        self.api_base = api_base.rstrip('/')
        self.graphql_url = graphql_url
        self.timeout = timeout
        self.page_size = page_size
        self.max_pages = max_pages
        self.year = year or datetime.utcnow().year
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config):
        """根据 Flask 配置创建服务实例"""
        return cls(
            token=config.get('GITHUB_TOKEN'),
            api_base=config.get('GITHUB_API_BASE') or GITHUB_API_BASE,
            graphql_url=config.get('GITHUB_GRAPHQL_URL') or GITHUB_GRAPHQL_URL,
            timeout=config.get('GITHUB_TIMEOUT', 10),
            page_size=config.get('GITHUB_REPOS_PAGE_SIZE', 100),
            max_pages=config.get('GITHUB_REPOS_MAX_PAGES', 10),
            year=config.get('WRAPPED_YEAR'),
        )

    # 🟢 核心辅助方法：统一生成带 Token 的请求头
    def _get_headers(self, accept='application/vnd.github+json'):
        headers = {
            'Accept': accept,
            'User-Agent': USER_AGENT,
        }
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'
        return headers

    def _graphql(self, query: str, variables: dict) -> dict:
        """
        执行一次 GraphQL 查询，返回 data 字段。
        任何传输错误、非 2xx 状态或 errors 字段都统一抛出 ExternalFetchError。
        """
        if not self.token:
            raise ExternalFetchError("GraphQL 查询需要 GITHUB_TOKEN")

        payload = {'query': query, 'variables': variables}
        try:
            response = self.session.post(self.graphql_url, headers=self._get_headers('application/json'),
                                         json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise ExternalFetchError(f"GitHub GraphQL 请求失败: {e}") from e

        if response.status_code >= 400:
            raise ExternalFetchError(f"GitHub GraphQL 错误 {response.status_code}: {response.text[:300]}")

        try:
            body = response.json()
        except ValueError as e:
            raise ExternalFetchError(f"GitHub GraphQL 返回了无法解析的内容: {e}") from e

        if body.get('errors'):
            # 只保留前几条错误，避免日志过长
            raise ExternalFetchError(f"GitHub GraphQL errors: {body['errors'][:3]}")

        return body.get('data') or {}

    def _graphql_user(self, query: str, variables: dict) -> dict:
        data = self._graphql(query, variables)
        user = data.get('user')
        if user is None:
            raise UserNotFoundError(f"GitHub 用户 {variables.get('login')} 不存在")
        return user

    def fetch_user_profile(self, username: str):
        """
        获取 GitHub 用户的基本个人资料。用户不存在 (404) 时返回 None。
        """
        url = f"{self.api_base}/users/{username}"

        try:
            response = self.session.get(url, headers=self._get_headers(), timeout=self.timeout)
        except requests.RequestException as e:
            raise ExternalFetchError(f"获取用户 {username} 资料失败: {e}") from e

        if response.status_code == 404:
            return None  # 用户不存在
        if response.status_code >= 400:
            raise ExternalFetchError(f"获取用户 {username} 资料失败: HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalFetchError(f"用户 {username} 资料无法解析: {e}") from e

        return {
            'login': data.get('login'),
            'name': data.get('name'),
            'bio': data.get('bio'),
            'company': data.get('company'),
            'email': data.get('email'),
            'avatar_url': data.get('avatar_url'),
            'blog': data.get('blog'),
            'followers': data.get('followers'),
            'following': data.get('following'),
            'public_repos': data.get('public_repos'),
            'twitter_username': data.get('twitter_username')
        }

    def fetch_pinned_items(self, username: str) -> list:
        """
        获取用户置顶的仓库，保持 GitHub 返回的顺序。没有置顶仓库时返回空列表。
        """
        user = self._graphql_user(PINNED_ITEMS_QUERY, {'login': username})
        edges = (user.get('pinnedItems') or {}).get('edges') or []
        return [edge['node'] for edge in edges if edge.get('node')]

    def fetch_repository_stats(self, username: str) -> list:
        """
        获取用户拥有的全部非 fork 仓库及其语言分布 (按页拉取，最多 max_pages 页)。
        """
        repositories = []
        after = None

        for _ in range(self.max_pages):
            user = self._graphql_user(
                REPOSITORY_STATS_QUERY,
                {'login': username, 'first': self.page_size, 'after': after}
            )
            chunk = user.get('repositories') or {}
            repositories.extend(chunk.get('nodes') or [])

            page_info = chunk.get('pageInfo') or {}
            if not page_info.get('hasNextPage'):
                break
            after = page_info.get('endCursor')
        else:
            logger.warning(f"用户 {username} 的仓库超过 {self.max_pages} 页，剩余仓库未统计")

        return repositories

    def fetch_contribution_stats(self, username: str) -> dict:
        """
        获取指定年份的贡献统计 (提交、Issue、PR 数量以及贡献日历)。
        """
        variables = {
            'login': username,
            'from': f"{self.year}-01-01T00:00:00Z",
            'to': f"{self.year}-12-31T23:59:59Z",
        }
        user = self._graphql_user(CONTRIBUTION_STATS_QUERY, variables)
        collection = user.get('contributionsCollection')
        if collection is None:
            raise ExternalFetchError(f"用户 {username} 的贡献数据缺失")
        return collection
