# wrapped/__init__.py

from flask import Flask
from config import config
from .database import db
from flask_cors import CORS


def create_app(config_name='default'):
    """
    Flask 应用工厂函数。
    """
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    app.config['CONFIG_NAME'] = config_name

    # 2. 注册数据库扩展
    db.init_app(app)

    # 3. 组装服务：依赖在这里注入，视图和后台任务通过 get_stats_service() 取用
    from wrapped.services.github_service import GitHubService
    from wrapped.services.stats_repository import StatsRepository
    from wrapped.services.stats_service import StatsService

    app.extensions['stats_service'] = StatsService(
        GitHubService.from_config(app.config),
        StatsRepository()
    )

    # 4. 注册蓝图 (Blueprint)
    from wrapped.modules.stats import stats_bp
    app.register_blueprint(stats_bp)

    # 5. 注册 CORS 扩展
    CORS(app, supports_credentials=True)

    # 简单的测试路由
    @app.route('/')
    def index():
        return 'Welcome to GitHub Wrapped Backend!'

    return app
