import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.jobstores.base import ConflictingIdError
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.executors.pool import ThreadPoolExecutor
from flask import Flask

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = BackgroundScheduler()

# 全局存储 JobStore 实例，用于在 CLI 命令中手动创建表
_job_store_instance = None


def generation_job_id(username: str) -> str:
    """同一个用户名同一时间只允许排队一个生成任务"""
    return f'generate_stats:{username}'


def init_scheduler(app: Flask):
    """
    初始化并配置 APScheduler。
    """
    global _job_store_instance

    # 1. 配置 JobStore：任务信息存入应用数据库
    jobstores = {
        'default': SQLAlchemyJobStore(url=app.config['SQLALCHEMY_DATABASE_URI'])
    }
    _job_store_instance = jobstores['default']

    # 2. 配置 Executor
    executors = {
        'default': ThreadPoolExecutor(20)
    }

    scheduler.configure(jobstores=jobstores, executors=executors, timezone='UTC')


def enqueue_stats_generation(username: str, config_name: str = 'default') -> bool:
    """
    把生成任务交给后台线程立即执行。
    该用户名已有任务在排队时返回 False。
    """
    from wrapped.services.generation_job import run_stats_generation

    try:
        scheduler.add_job(
            func=run_stats_generation,
            trigger='date',
            id=generation_job_id(username),
            kwargs={'config_name': config_name, 'username': username},
            misfire_grace_time=None,
            # 不替换已有任务，让重复请求直接冲突
            replace_existing=False
        )
    except ConflictingIdError:
        logger.info(f"用户 {username} 的生成任务已在队列中")
        return False

    logger.info(f"用户 {username} 的生成任务已加入队列")
    return True


def create_scheduler_tables(app: Flask):
    """
    手动创建 APScheduler 自身的表 (apscheduler_jobs)。
    """
    global _job_store_instance

    if not _job_store_instance:
        init_scheduler(app)

    try:
        # JobStore 的 start() 会在表不存在时建表
        _job_store_instance.start(scheduler, 'default')
        _job_store_instance.shutdown()
        logger.info("✅ APScheduler 表创建成功!")

    except Exception as e:
        logger.warning(f"❌ 警告：尝试创建 APScheduler 表时遇到错误: {e}")


def start_scheduler():
    """启动调度器"""
    try:
        scheduler.start()
        logger.info("✅ APScheduler 启动成功，统计生成任务可以排队执行！")
    except Exception as e:
        logger.error(f"❌ APScheduler 启动失败: {e}")
