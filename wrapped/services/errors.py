# wrapped/services/errors.py


class StatsError(Exception):
    """统计生成过程中的错误基类，kind 用于日志和接口返回"""
    kind = 'stats_error'


class AlreadyExistsError(StatsError):
    """该用户的统计数据已经存在"""
    kind = 'already_exists'


class UserNotFoundError(StatsError):
    """GitHub 上查无此人"""
    kind = 'user_not_found'


class ExternalFetchError(StatsError):
    """GitHub 接口请求失败 (网络、状态码、GraphQL errors、缺少 Token 等)"""
    kind = 'external_fetch_failure'


class PersistenceError(StatsError):
    """数据库拒绝写入"""
    kind = 'persistence_failure'
