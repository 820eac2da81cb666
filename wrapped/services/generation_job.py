# 导入创建 App 的工厂函数
import logging

from wrapped import create_app
from wrapped.services.stats_service import get_stats_service

logger = logging.getLogger(__name__)


# 接收 config_name 而不是 app 实例，任务参数需要能被 JobStore 序列化
def run_stats_generation(config_name: str, username: str):
    """
    后台生成任务，由 APScheduler 在线程池中执行一次。
    """
    # 在后台线程中创建一个新的应用实例，必须在 app_context 中才能访问数据库和配置
    app = create_app(config_name)

    with app.app_context():
        logger.info(f"--- ⚙️ 开始为 {username} 生成年度统计 ---")
        outcome = get_stats_service().generate_stats(username)

        if outcome.ok:
            logger.info(f"--- ✅ {username} 的年度统计生成完毕 ---")
        else:
            logger.warning(f"--- ❌ {username} 的年度统计生成失败 [{outcome.error_kind}]: {outcome.message}")

        return outcome
