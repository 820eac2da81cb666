from sqlalchemy import func

from wrapped.database import db
from wrapped.models import GitHubUser, GitHubStats


class StatsRepository:
    """
    统计数据的持久化入口，封装 db.session。
    save_* 只 flush 不 commit，由调用方决定何时提交，保证用户和统计在同一个事务里写入。
    GitHub 用户名不区分大小写，按用户名查询时统一转成小写比较。
    """

    @staticmethod
    def exists_by_username(username: str) -> bool:
        query = db.session.query(GitHubUser.id).filter(func.lower(GitHubUser.username) == username.lower())
        return query.first() is not None

    @staticmethod
    def save_user(user: GitHubUser) -> GitHubUser:
        db.session.add(user)
        db.session.flush()  # 临时提交，以便获取 user.id
        return user

    @staticmethod
    def save_stats(stats: GitHubStats) -> GitHubStats:
        db.session.add(stats)
        db.session.flush()
        return stats

    @staticmethod
    def commit():
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()

    @staticmethod
    def find_by_username(username: str):
        return GitHubUser.query.filter(func.lower(GitHubUser.username) == username.lower()).first()

    @staticmethod
    def find_stats_by_username(username: str):
        return GitHubStats.query.filter(func.lower(GitHubStats.username) == username.lower()).first()

    @staticmethod
    def find_stats_by_user_id(user_id: int):
        return GitHubStats.query.filter_by(user_id=user_id).first()
