#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
日志工具
所有组件共用 "bayesclimb." 前缀的记录器，同时输出到控制台和 logs/<组件名>.log
"""
import os
import logging
from pathlib import Path

DEFAULT_LOG_DIR = os.environ.get("BAYESCLIMB_LOG_DIR", "logs")
DEFAULT_LEVEL = os.environ.get("BAYESCLIMB_LOG_LEVEL", "INFO")
LOGGER_PREFIX = "bayesclimb."
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _parse_level(level: str) -> int:
    """日志级别名称 -> 数值"""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"未知的日志级别: {level}")
    return numeric


def setup_logger(name: str, log_dir: str = None, level: str = None) -> logging.Logger:
    """
    获取组件日志记录器，首次调用时挂载控制台与文件处理器

    Args:
        name: 组件名，记录器名为 bayesclimb.<name>
        log_dir: 日志目录，None表示使用环境变量 BAYESCLIMB_LOG_DIR 或 "logs"
        level: 日志级别，None表示使用环境变量 BAYESCLIMB_LOG_LEVEL 或 "INFO"

    Returns:
        配置好的日志记录器
    """
    numeric = _parse_level(level or DEFAULT_LEVEL)
    logger = logging.getLogger(LOGGER_PREFIX + name)
    logger.setLevel(numeric)

    # 已配置过的记录器直接复用
    if logger.handlers:
        return logger

    log_path = Path(log_dir or DEFAULT_LOG_DIR)
    log_path.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in (
        logging.StreamHandler(),
        logging.FileHandler(log_path / f"{name}.log", encoding='utf-8'),
    ):
        handler.setLevel(numeric)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def set_level(level: str) -> None:
    """
    统一调整所有 bayesclimb 日志记录器及其处理器的级别

    Args:
        level: 日志级别名称（DEBUG / INFO / WARNING ...）
    """
    numeric = _parse_level(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if not name.startswith(LOGGER_PREFIX) or not isinstance(logger, logging.Logger):
            continue
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)
