# wrapped/services/stats_service.py

import logging
from datetime import datetime
from typing import NamedTuple, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from wrapped.models import GitHubUser, PinnedRepository, GitHubStats, LanguageStat
from .aggregation import aggregate_languages, select_top_repository, repository_totals
from .errors import StatsError, AlreadyExistsError, UserNotFoundError, ExternalFetchError, PersistenceError

logger = logging.getLogger(__name__)

STATUS_CREATED = 'created'
STATUS_FAILED = 'failed'


class GenerationOutcome(NamedTuple):
    """generate_stats 的结果：成功或带错误类型的失败"""
    username: str
    status: str
    error_kind: Optional[str] = None
    message: str = ''

    @property
    def ok(self) -> bool:
        return self.status == STATUS_CREATED


class StatsService:
    """
    年度统计服务：从 GitHub 拉取数据，聚合成用户资料和统计快照并入库。
    依赖在构造时注入，之后不再改变。
    """

    def __init__(self, github_client, repository):
        self._github = github_client
        self._repository = repository

    @property
    def github(self):
        return self._github

    @property
    def repository(self):
        return self._repository

    def generate_stats(self, username: str) -> GenerationOutcome:
        """
        为用户生成统计数据。任何错误都会被记录并转换成失败结果，不会抛给调用方。
        用户资料和统计快照在同一个事务中提交，失败时整体回滚。
        """
        try:
            user, stats = self._build(username)
            self._persist(user, stats)
        except StatsError as e:
            self._repository.rollback()
            logger.error(f"[{e.kind}] 生成用户 {username} 的统计数据失败: {e}")
            return GenerationOutcome(username, STATUS_FAILED, e.kind, str(e))
        except Exception as e:
            self._repository.rollback()
            logger.exception(f"[{ExternalFetchError.kind}] 生成用户 {username} 的统计数据时发生未知错误: {e}")
            return GenerationOutcome(username, STATUS_FAILED, ExternalFetchError.kind, str(e))

        logger.info(f"用户 {username} 的统计数据生成完毕 (stats id={stats.id})")
        return GenerationOutcome(username, STATUS_CREATED, message='统计数据生成成功')

    def _build(self, username: str):
        try:
            exists = self._repository.exists_by_username(username)
        except SQLAlchemyError as e:
            raise PersistenceError(f"查询用户 {username} 是否已有统计数据失败: {e}") from e
        if exists:
            raise AlreadyExistsError(f"用户 {username} 的统计数据已存在")

        # 1. 用户资料
        profile = self._github.fetch_user_profile(username)
        if profile is None:
            raise UserNotFoundError(f"GitHub 用户 {username} 不存在")
        logger.info(f"已获取用户 {username} 的资料")

        user = GitHubUser(
            username=profile.get('login'),
            name=profile.get('name'),
            bio=profile.get('bio'),
            company=profile.get('company'),
            email=profile.get('email'),
            avatar_url=profile.get('avatar_url'),
            blog_url=profile.get('blog'),
            followers=profile.get('followers'),
            following=profile.get('following'),
            public_repos=profile.get('public_repos'),
            twitter_username=profile.get('twitter_username')
        )

        # 2. 置顶仓库
        pinned_nodes = self._github.fetch_pinned_items(username)
        logger.info(f"已获取用户 {username} 的 {len(pinned_nodes)} 个置顶仓库")
        for position, node in enumerate(pinned_nodes):
            language = node.get('primaryLanguage') or {}
            user.pinned_repositories.append(PinnedRepository(
                position=position,
                name=node.get('name'),
                description=node.get('description'),
                url=node.get('url'),
                stars=node.get('stargazerCount'),
                forks=node.get('forkCount'),
                language=language.get('name'),
                language_color=language.get('color')
            ))

        # 两条记录都以 GitHub 返回的 login 为准，请求里的大小写可能不同
        stats = GitHubStats(username=user.username)

        # 3. 仓库与语言分布
        repositories = self._github.fetch_repository_stats(username)
        logger.info(f"已获取用户 {username} 的 {len(repositories)} 个仓库")
        for position, language_stat in enumerate(aggregate_languages(repositories)):
            stats.languages_stats.append(LanguageStat(position=position, **language_stat))
        stats.total_stars, stats.total_forks = repository_totals(repositories)

        # 4. 贡献统计
        contributions = self._github.fetch_contribution_stats(username)
        stats.total_commits = contributions.get('totalCommitContributions') or 0
        stats.total_issues_closed = contributions.get('totalIssueContributions') or 0
        stats.total_pull_requests_closed = contributions.get('totalPullRequestContributions') or 0
        stats.contribution_calendar = contributions.get('contributionCalendar')

        # 5. Star 最多的仓库
        top_repository = select_top_repository(repositories)
        if top_repository is not None:
            stats.top_repository_name = top_repository['name']
            stats.top_repository_language = top_repository['top_language']
            stats.top_repository_language_color = top_repository['top_language_color']
            stats.top_repository_stars = top_repository['stars']
            stats.top_repository_forks = top_repository['forks']

        return user, stats

    def _persist(self, user: GitHubUser, stats: GitHubStats):
        try:
            user.created_date = datetime.utcnow()
            user = self._repository.save_user(user)

            stats.user_id = user.id
            self._repository.save_stats(stats)
            self._repository.commit()
        except IntegrityError as e:
            # 并发请求同一个用户名时，唯一约束让后提交的一方失败
            raise AlreadyExistsError(f"用户 {stats.username} 的统计数据已存在 ({e.orig})") from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"保存用户 {stats.username} 的统计数据失败: {e}") from e

    def get_stats(self, username: str):
        """
        查询用户的统计数据。用户不存在时返回 None；
        统计快照缺失时 stats 字段为 None。
        """
        user = self._repository.find_by_username(username)
        if user is None:
            return None

        stats = self._repository.find_stats_by_user_id(user.id)
        return {
            'username': username,
            'user': user.to_dict(),
            'stats': stats.to_dict() if stats else None
        }


def get_stats_service() -> StatsService:
    """当前应用绑定的 StatsService 实例 (在 create_app 中注册)"""
    return current_app.extensions['stats_service']
