#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
配置工具
"""
import copy
import yaml
from pathlib import Path
from typing import Dict, Any

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"

# 配置文件缺省时使用的默认值
DEFAULTS: Dict[str, Any] = {
    'data': {
        'path': None,
        'continuous': [],
    },
    'network': {
        'smoothing': 1,
        'seed': 'empty',
        'class_attribute': None,
    },
    'search': {
        'scoring': 'bic',
        'stopping': 'no_improvement',
        'max_iterations': 100,
        'min_delta': 0.0,
        'show_progress': False,
    },
    'output': {
        'dir': 'outputs',
        'summary_file': 'structure_summary.yaml',
    },
    'logging': {
        'level': 'INFO',
    },
}


def load_config(config_path: str = None) -> Dict[str, Any]:
    """
    加载配置文件，并用默认值补全缺失项
    
    Args:
        config_path: 配置文件路径，None表示使用 configs/default.yaml
        
    Returns:
        配置字典
    """
    if config_path is None and not DEFAULT_CONFIG_PATH.exists():
        return merge_config(DEFAULTS, {})

    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    with open(path, 'r', encoding='utf-8') as f:
        config = yaml.safe_load(f) or {}
    
    if not isinstance(config, dict):
        raise ValueError(f"配置文件格式错误（顶层必须是映射）: {path}")
    
    return merge_config(DEFAULTS, config)


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    递归合并两个配置字典，override 中的值优先
    
    Args:
        base: 基础配置
        override: 覆盖配置
        
    Returns:
        合并后的新字典（不修改输入）
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def ensure_dir(directory: str) -> None:
    """
    确保目录存在，不存在则创建
    
    Args:
        directory: 目录路径
    """
    if directory:  # 防止空字符串
        Path(directory).mkdir(parents=True, exist_ok=True)
