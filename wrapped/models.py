from .database import db
from datetime import datetime


class GitHubUser(db.Model):
    """GitHub 用户资料：每个用户名只保存一份"""
    __tablename__ = 'github_users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, index=True, nullable=False)

    name = db.Column(db.String(256))
    bio = db.Column(db.Text)
    company = db.Column(db.String(256))
    email = db.Column(db.String(256))
    avatar_url = db.Column(db.String(512))
    blog_url = db.Column(db.String(512))
    followers = db.Column(db.Integer)
    following = db.Column(db.Integer)
    public_repos = db.Column(db.Integer)
    twitter_username = db.Column(db.String(64))

    # 入库时间
    created_date = db.Column(db.DateTime, default=datetime.utcnow)

    # 置顶仓库，按 GitHub 返回的顺序保存
    pinned_repositories = db.relationship(
        'PinnedRepository',
        backref='user',
        order_by='PinnedRepository.position',
        cascade='all, delete-orphan'
    )

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'name': self.name,
            'bio': self.bio,
            'company': self.company,
            'email': self.email,
            'avatarUrl': self.avatar_url,
            'blogUrl': self.blog_url,
            'followers': self.followers,
            'following': self.following,
            'publicRepos': self.public_repos,
            'twitterUsername': self.twitter_username,
            'createdDate': self.created_date.isoformat() if self.created_date else None,
            'pinnedRepositories': [repo.to_dict() for repo in self.pinned_repositories]
        }


class PinnedRepository(db.Model):
    """置顶仓库：属于 GitHubUser，没有独立身份"""
    __tablename__ = 'pinned_repositories'
    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey('github_users.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False)

    name = db.Column(db.String(256))
    description = db.Column(db.Text)
    url = db.Column(db.String(512))
    stars = db.Column(db.Integer)
    forks = db.Column(db.Integer)
    language = db.Column(db.String(128))
    language_color = db.Column(db.String(16))

    def to_dict(self):
        return {
            'name': self.name,
            'description': self.description,
            'url': self.url,
            'stars': self.stars,
            'forks': self.forks,
            'language': self.language,
            'languageColor': self.language_color
        }


class GitHubStats(db.Model):
    """统计快照：通过 user_id 关联 GitHubUser，生成后不再修改"""
    __tablename__ = 'github_stats'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, index=True, nullable=False)

    user_id = db.Column(db.Integer, db.ForeignKey('github_users.id'), nullable=False)

    total_commits = db.Column(db.Integer, default=0)
    total_issues_closed = db.Column(db.Integer, default=0)
    total_pull_requests_closed = db.Column(db.Integer, default=0)
    total_stars = db.Column(db.Integer, default=0)
    total_forks = db.Column(db.Integer, default=0)

    # GitHub 返回的贡献日历，原样保存
    contribution_calendar = db.Column(db.JSON)

    # Star 最多的仓库 (没有仓库时全部为空)
    top_repository_name = db.Column(db.String(256))
    top_repository_language = db.Column(db.String(128))
    top_repository_language_color = db.Column(db.String(16))
    top_repository_stars = db.Column(db.Integer)
    top_repository_forks = db.Column(db.Integer)

    # 语言统计，按代码量降序
    languages_stats = db.relationship(
        'LanguageStat',
        backref='stats',
        order_by='LanguageStat.position',
        cascade='all, delete-orphan'
    )

    user = db.relationship('GitHubUser')

    @property
    def top_repository(self):
        if self.top_repository_name is None:
            return None
        return {
            'name': self.top_repository_name,
            'topLanguage': self.top_repository_language,
            'topLanguageColor': self.top_repository_language_color,
            'stars': self.top_repository_stars,
            'forks': self.top_repository_forks
        }

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'userId': self.user_id,
            'languagesStats': [stat.to_dict() for stat in self.languages_stats],
            'totalCommits': self.total_commits,
            'totalIssuesClosed': self.total_issues_closed,
            'totalPullRequestsClosed': self.total_pull_requests_closed,
            'totalStars': self.total_stars,
            'totalForks': self.total_forks,
            'contributionCalendar': self.contribution_calendar,
            'topRepository': self.top_repository
        }


class LanguageStat(db.Model):
    """单个语言在所有仓库中的累计字节数"""
    __tablename__ = 'language_stats'
    __table_args__ = (
        db.UniqueConstraint('stats_id', 'language', name='uq_language_stats_stats_id_language'),
    )
    id = db.Column(db.Integer, primary_key=True)

    stats_id = db.Column(db.Integer, db.ForeignKey('github_stats.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False)

    language = db.Column(db.String(128), nullable=False)
    color = db.Column(db.String(16))
    lines_count = db.Column(db.BigInteger, default=0)

    def to_dict(self):
        return {
            'language': self.language,
            'color': self.color,
            'linesCount': self.lines_count
        }
