import os
from datetime import datetime
from dotenv import load_dotenv

# 加载 .env 文件中的环境变量
load_dotenv()


def _env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """基础配置类"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'A_REALLY_BAD_SECRET_KEY'

    # --- 数据库配置 (MySQL) ---
    MYSQL_USER = os.environ.get('MYSQL_USER') or 'root'
    MYSQL_PASSWORD = os.environ.get('MYSQL_PASSWORD') or 'root'
    MYSQL_HOST = os.environ.get('MYSQL_HOST') or 'localhost'
    MYSQL_PORT = os.environ.get('MYSQL_PORT') or '3306'
    MYSQL_DB = os.environ.get('MYSQL_DB') or 'github_wrapped'

    # SQLAlchemy 配置，DATABASE_URL 优先
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or (
        f"mysql+pymysql://{MYSQL_USER}:{MYSQL_PASSWORD}@{MYSQL_HOST}:{MYSQL_PORT}/{MYSQL_DB}"
    )
    # 禁用修改追踪，可以节省资源
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # ------------------- GitHub API 配置 -------------------
    # 不填 Token 时 REST 每小时只能请求 60 次，GraphQL 查询则完全不可用
    GITHUB_TOKEN = os.environ.get('GITHUB_TOKEN')
    GITHUB_API_BASE = os.environ.get('GITHUB_API_BASE') or 'https://api.github.com'
    GITHUB_GRAPHQL_URL = os.environ.get('GITHUB_GRAPHQL_URL') or 'https://api.github.com/graphql'
    GITHUB_TIMEOUT = int(os.environ.get('GITHUB_TIMEOUT') or 10)
    GITHUB_REPOS_PAGE_SIZE = int(os.environ.get('GITHUB_REPOS_PAGE_SIZE') or 100)
    GITHUB_REPOS_MAX_PAGES = int(os.environ.get('GITHUB_REPOS_MAX_PAGES') or 10)

    # 统计哪一年的贡献数据 (年度报告)
    WRAPPED_YEAR = int(os.environ.get('WRAPPED_YEAR') or datetime.utcnow().year)
    # -------------------------------------------------------

    # 前端调用后端时携带的鉴权 Token，留空则不校验
    BACKEND_AUTH_TOKEN = os.environ.get('BACKEND_AUTH_TOKEN')

    # True: 生成任务交给 APScheduler 后台执行；False: 请求内同步执行
    GENERATE_STATS_ASYNC = _env_bool('GENERATE_STATS_ASYNC', True)

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True  # 开启调试模式


class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False


class TestingConfig(Config):
    """测试环境配置：内存 SQLite，同步生成"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    GITHUB_TOKEN = 'test-token'
    BACKEND_AUTH_TOKEN = None
    GENERATE_STATS_ASYNC = False
    WRAPPED_YEAR = 2024


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
