# wrapped/modules/stats/__init__.py

from flask import Blueprint

# 创建一个名为 'stats' 的蓝图，URL 前缀为 /api
stats_bp = Blueprint('stats', __name__, url_prefix='/api')

# 导入 views 文件，将路由注册到蓝图上
from . import views
