# wrapped/modules/stats/views.py

from functools import wraps

from flask import jsonify, request, current_app
from wrapped.modules.stats import stats_bp
from wrapped.scheduler import enqueue_stats_generation
from wrapped.services.stats_service import get_stats_service
from wrapped.services.errors import AlreadyExistsError, UserNotFoundError, ExternalFetchError, PersistenceError

# 同步生成失败时，错误类型对应的 HTTP 状态码
ERROR_STATUS = {
    AlreadyExistsError.kind: 409,
    UserNotFoundError.kind: 404,
    ExternalFetchError.kind: 502,
    PersistenceError.kind: 500,
}


# --------------------
# 辅助函数：接口鉴权装饰器
# --------------------
def token_required(f):
    """检查请求头 Authorization 是否与 BACKEND_AUTH_TOKEN 一致，未配置 Token 时放行"""

    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected = current_app.config.get('BACKEND_AUTH_TOKEN')
        if expected and request.headers.get('Authorization') != expected:
            return jsonify({'message': '未授权的请求'}), 401
        return f(*args, **kwargs)

    return decorated_function


# --------------------
# 路由 1：查询用户的年度统计
# GET /api/stats/<username>
# --------------------
@stats_bp.route('/stats/<string:username>', methods=['GET'])
@token_required
def get_stats(username):
    view = get_stats_service().get_stats(username)

    if view is None:
        return jsonify({
            'message': f'未找到用户 {username} 的统计数据',
            'data': None
        }), 404

    return jsonify({
        'message': '获取成功',
        'data': view
    }), 200


# --------------------
# 路由 2：触发生成用户的年度统计
# POST /api/generate/<username>
# --------------------
@stats_bp.route('/generate/<string:username>', methods=['POST'])
@token_required
def generate_stats(username):
    service = get_stats_service()

    if not current_app.config.get('GENERATE_STATS_ASYNC'):
        outcome = service.generate_stats(username)
        if outcome.ok:
            return jsonify({'message': outcome.message, 'data': service.get_stats(username)}), 201
        return jsonify({
            'message': outcome.message,
            'error': outcome.error_kind
        }), ERROR_STATUS.get(outcome.error_kind, 500)

    # 异步模式：先做一次存在性检查，避免无意义的排队
    if service.repository.exists_by_username(username):
        return jsonify({
            'message': f'用户 {username} 的统计数据已存在',
            'error': AlreadyExistsError.kind
        }), 409

    if not enqueue_stats_generation(username, current_app.config.get('CONFIG_NAME', 'default')):
        return jsonify({'message': f'用户 {username} 的统计数据正在生成中'}), 409

    return jsonify({
        'message': f'已开始生成用户 {username} 的统计数据，请稍后查询',
        'data': {'username': username}
    }), 202
